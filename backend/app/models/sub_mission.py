# backend/app/models/sub_mission.py
from __future__ import annotations

from datetime import datetime, timezone
from sqlalchemy import String, Text, Integer, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db import Base


class SubMission(Base):
    __tablename__ = "sub_missions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    mission_id: Mapped[int] = mapped_column(
        ForeignKey("missions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    action_type_id: Mapped[int | None] = mapped_column(
        ForeignKey("action_types.id", ondelete="SET NULL"), nullable=True
    )

    submission_types: Mapped[list] = mapped_column(JSON, nullable=False, default=lambda: ["file"])
    submission_labels: Mapped[list] = mapped_column(JSON, nullable=False, default=list)  # [{index, label}]
    require_review: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # 0 = not sequential; level N opens once every level < N is approved
    sequential_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    attendance_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    attendance_password: Mapped[str | None] = mapped_column(Text, nullable=True)

    studio_dpi: Mapped[int] = mapped_column(Integer, nullable=False, default=300)
    studio_file_format: Mapped[str] = mapped_column(String(10), nullable=False, default="pdf")
    party_template_project_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    party_max_pages: Mapped[int | None] = mapped_column(Integer, nullable=True)

    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
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

    mission = relationship("Mission", back_populates="sub_missions")
    action_type = relationship("ActionType")
    submissions = relationship(
        "Submission",
        back_populates="sub_mission",
        cascade="all, delete-orphan",
    )
