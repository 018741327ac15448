"""Infrastructure layer — HTTP API client and error log.

This layer depends on stdlib and third-party libs (httpx, structlog).
It must never import from domain, services, commands, or output.
The service layer bridges between domain models and infrastructure.
"""
