"""
Posts de configuration — un enregistrement par bloc Gutenberg ou widget Elementor.
SQLAlchemy 2 (SQLite par défaut) ; la config est stockée en JSON texte.
"""
import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class PostType(str, Enum):
    BLOCK  = "aw_gb_blocks"
    WIDGET = "aw_elements"


class PostStatus(str, Enum):
    PUBLISH = "publish"
    DRAFT   = "draft"


class Base(DeclarativeBase):
    pass


class BlockPostDB(Base):
    __tablename__ = "block_posts"
    __table_args__ = (sa.UniqueConstraint("post_type", "module", name="uq_block_posts_type_module"),)

    post_id:          Mapped[str]           = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    post_type:        Mapped[str]           = mapped_column(sa.String, nullable=False, default=PostType.BLOCK.value, index=True)
    module:           Mapped[str]           = mapped_column(sa.String, nullable=False)
    title:            Mapped[str]           = mapped_column(sa.String, default="")
    config:           Mapped[str]           = mapped_column(sa.Text, default="{}")
    controls_service: Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    render_service:   Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    status:           Mapped[str]           = mapped_column(sa.String, default=PostStatus.PUBLISH.value)
    created_at:       Mapped[datetime]      = mapped_column(sa.DateTime, default=datetime.utcnow)
    updated_at:       Mapped[datetime]      = mapped_column(sa.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
