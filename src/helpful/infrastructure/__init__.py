"""Infrastructure layer - external dependencies and implementations.

This layer contains:
- Database adapters (SQLAlchemy async models and repositories)
- The Chargify billing provider (httpx)
"""

from helpful.infrastructure.persistence.database import (
    Base,
    DatabaseManager,
    close_database,
    get_db_manager,
    init_database,
)

__all__ = [
    "Base",
    "DatabaseManager",
    "close_database",
    "get_db_manager",
    "init_database",
]
