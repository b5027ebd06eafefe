"""
Core infrastructure components for the application.

This module contains the database pool, the repository base class,
logging setup and route discovery. Lifespan and dependency wiring live in
``image_dock.core.lifespan`` and ``image_dock.core.dependencies`` and are
imported from there, since they depend on the service layer.
"""

from .base_repository import BaseRepository
from .database import AsyncDBPool
from .logging_config import setup_logging
from .route_discovery import RouterDiscoveryError, discover_routers, register_routers

__all__ = [
    "AsyncDBPool",
    "BaseRepository",
    "RouterDiscoveryError",
    "discover_routers",
    "register_routers",
    "setup_logging",
]
