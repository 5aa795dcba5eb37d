"""
REST boundary for the Library Catalog service.

- app.py: application factory and logging setup
- routers.py: CRUD routers generated per entity
- binding.py: query string -> criteria / pagination
- headers.py: alert and pagination headers
- errors.py: exception -> HTTP response translation
"""

from .app import configure_logging, create_app
from .errors import BadRequestAlertError
from .routers import RESOURCES, EntityResource, build_router

__all__ = [
    "RESOURCES",
    "BadRequestAlertError",
    "EntityResource",
    "build_router",
    "configure_logging",
    "create_app",
]
