# backend/app/models/submission.py
from __future__ import annotations

from datetime import datetime, timezone
from sqlalchemy import String, Text, Integer, Boolean, DateTime, ForeignKey, JSON, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.constants import STATUS_SUBMITTED
from app.db import Base


class Submission(Base):
    __tablename__ = "sub_mission_submissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # users live in the auth service; no FK
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    sub_mission_id: Mapped[int] = mapped_column(
        ForeignKey("sub_missions.id", ondelete="CASCADE"), nullable=False
    )

    slots: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=STATUS_SUBMITTED)
    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    reviewer_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "sub_mission_id", name="uq_submission_user_sub_mission"),
        Index("ix_submissions_sub_mission_status", "sub_mission_id", "status"),
    )

    sub_mission = relationship("SubMission", back_populates="submissions")
