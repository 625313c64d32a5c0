"""HTTP layer built on Flask."""

from .app import create_app
from .services import Services, get_services

__all__ = [
    "Services",
    "create_app",
    "get_services",
]
