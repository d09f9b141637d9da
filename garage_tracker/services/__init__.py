"""
Services module for business logic separation.

This module contains service classes that encapsulate business logic,
keeping it separate from API endpoints and database models:
- CredentialStore / RecordStore: persistence, one table each
- AuthService: signup and login
- RecordService: tenant-scoped record operations and dashboard stats
- service_status: pure status classification
"""
