# backend/app/models/hospital.py
from sqlalchemy import Column, Integer, String
from app.db import Base


class Hospital(Base):
    # Owned by the hospital management side; missions only reference it.
    __tablename__ = "hospitals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(128), nullable=False)
