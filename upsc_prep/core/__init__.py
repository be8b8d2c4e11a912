"""
Core module containing configuration, database, models, auth and AI services
"""

from .config import config
from .database import Base, get_db, get_db_manager
from .ai_services import get_ai_service
from .auth import authenticate, optional_auth, get_identity_provider

__all__ = [
    "config",
    "Base",
    "get_db",
    "get_db_manager",
    "get_ai_service",
    "authenticate",
    "optional_auth",
    "get_identity_provider",
]
