"""
Infrastructure layer - external service integrations.

- storage: HTTP client for the storage service (httpx)

These wrappers translate between wire formats and our domain models.
"""
