"""Storage — posts de configuration (SQLAlchemy) + chargement du registry."""
from .models import Base, BlockPostDB, PostStatus, PostType
from .database import (
    DB_PATH,
    make_engine,
    make_session_factory,
    init_db,
    get_db,
    save_block_post,
    get_collection,
    load_registry,
)

__all__ = [
    "Base", "BlockPostDB", "PostStatus", "PostType",
    "DB_PATH", "make_engine", "make_session_factory", "init_db", "get_db",
    "save_block_post", "get_collection", "load_registry",
]
