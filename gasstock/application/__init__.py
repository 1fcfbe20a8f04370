"""
Application layer - Use cases, DTOs, and service wiring.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing report and export use cases over the core services
3. Building the service container used by the API
"""

from gasstock.application.services import ServiceContainer, build_container

__all__ = ["ServiceContainer", "build_container"]
