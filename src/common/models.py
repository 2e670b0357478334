"""SQLAlchemy model for the imported property table."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

TITLE_MAX_LENGTH = 255

# Column name prefix for each supported locale's title/description pair.
LOCALE_COLUMN_PREFIXES = {
    "en": "english",
    "sv": "swedish",
    "nb": "norwegian",
    "da": "danish",
    "fi": "finnish",
}


class Base(DeclarativeBase):
    pass


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    reference: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    english_title: Mapped[str | None] = mapped_column(String(TITLE_MAX_LENGTH))
    english_description: Mapped[str | None] = mapped_column(Text)
    swedish_title: Mapped[str | None] = mapped_column(String(TITLE_MAX_LENGTH))
    swedish_description: Mapped[str | None] = mapped_column(Text)
    norwegian_title: Mapped[str | None] = mapped_column(String(TITLE_MAX_LENGTH))
    norwegian_description: Mapped[str | None] = mapped_column(Text)
    danish_title: Mapped[str | None] = mapped_column(String(TITLE_MAX_LENGTH))
    danish_description: Mapped[str | None] = mapped_column(Text)
    finnish_title: Mapped[str | None] = mapped_column(String(TITLE_MAX_LENGTH))
    finnish_description: Mapped[str | None] = mapped_column(Text)
    source_language: Mapped[str | None] = mapped_column(String(8))
    translation_status: Mapped[dict[str, Any] | None] = mapped_column(
        JSONB,
        comment="Per-locale status: source, translated or fallback",
    )

    country: Mapped[str] = mapped_column(String(120), nullable=False)
    city: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    property_type: Mapped[str] = mapped_column(String(32), nullable=False)
    bedrooms: Mapped[int | None] = mapped_column(Integer)
    bathrooms: Mapped[int | None] = mapped_column(Integer)
    area: Mapped[int | None] = mapped_column(Integer)
    plot_area: Mapped[int | None] = mapped_column(Integer)
    terrace: Mapped[str | None] = mapped_column(String(120))
    ibi_fees: Mapped[str | None] = mapped_column(String(120))
    community_fees: Mapped[str | None] = mapped_column(String(120))
    basura_tax: Mapped[str | None] = mapped_column(String(120))

    images: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="published")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
