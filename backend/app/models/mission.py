# backend/app/models/mission.py
from __future__ import annotations

from datetime import datetime, timezone
from sqlalchemy import String, Text, Integer, Boolean, DateTime, ForeignKey, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.constants import VISIBILITY_PUBLIC
from app.db import Base


class Mission(Base):
    __tablename__ = "missions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    category_id: Mapped[int | None] = mapped_column(
        ForeignKey("mission_categories.id", ondelete="RESTRICT"), nullable=True
    )
    visibility: Mapped[str] = mapped_column(String(16), nullable=False, default=VISIBILITY_PUBLIC)
    hospital_id: Mapped[int | None] = mapped_column(ForeignKey("hospitals.id"), nullable=True)

    # Two orthogonal relations: tree (parent_id) and display bucket (folder_id)
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("missions.id", ondelete="CASCADE"), nullable=True, index=True
    )
    folder_id: Mapped[int | None] = mapped_column(
        ForeignKey("mission_folders.id", ondelete="SET NULL"), nullable=True
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Recruitment window
    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Event details
    event_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    event_end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_first_come: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notice_items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)  # [{title, content}]

    # Storage URLs produced by the upload endpoints
    header_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    gift_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    gift_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    venue_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

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
        Index("ix_missions_folder_order", "folder_id", "order"),
    )

    category = relationship("MissionCategory")
    hospital = relationship("Hospital")
    folder = relationship("MissionFolder", back_populates="missions")

    parent = relationship("Mission", remote_side="Mission.id", back_populates="children")
    children = relationship(
        "Mission",
        back_populates="parent",
        cascade="all, delete",
        order_by="[Mission.order, Mission.id]",
    )
    sub_missions = relationship(
        "SubMission",
        back_populates="mission",
        cascade="all, delete-orphan",
        order_by="[SubMission.order, SubMission.id]",
    )
