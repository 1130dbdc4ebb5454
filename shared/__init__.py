"""
Shared utilities for the LDAP Group Access layer.

This package aggregates common building blocks consumed by the service
and its command line tools:

- config: Configuration via pydantic-settings
- logging: Structured logging with request correlation
- errors: Canonical error types and responses
- base_service: FastAPI service skeleton with health and error handling

Do not import from service_* packages into shared/.
"""
