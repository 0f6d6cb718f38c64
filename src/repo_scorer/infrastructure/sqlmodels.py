"""SQLAlchemy models for scan history.

One row per scan session, one row per scored repository of that session.
The quality score breakdown is stored as JSON.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class ScanSessionRow(Base):
    """A single scan of one GitHub account, owned by one caller identity."""

    __tablename__ = "scan_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_identity: Mapped[str] = mapped_column(String(255), nullable=False)
    account_handle: Mapped[str] = mapped_column(String(100), nullable=False)
    total_repositories: Mapped[int] = mapped_column(Integer, nullable=False)
    scanned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    repositories: Mapped[list[ScannedRepositoryRow]] = relationship(
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="ScannedRepositoryRow.id",
    )

    __table_args__ = (
        Index("ix_scan_sessions_identity_scanned", "account_identity", "scanned_at"),
    )


class ScannedRepositoryRow(Base):
    """One scored repository within a scan session."""

    __tablename__ = "scanned_repositories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[int] = mapped_column(
        ForeignKey("scan_sessions.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False)
    language: Mapped[str | None] = mapped_column(String(100), nullable=True)
    stars: Mapped[int] = mapped_column(Integer, nullable=False)
    forks: Mapped[int] = mapped_column(Integer, nullable=False)
    quality_score: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    scanned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    session: Mapped[ScanSessionRow] = relationship(back_populates="repositories")

    __table_args__ = (Index("ix_scanned_repositories_session", "session_id"),)
