"""ORM models for listings and the application step log"""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class ListingModel(Base):
    """A job listing found in the Easy Apply collection."""

    __tablename__ = "listings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False, default="")
    organization = Column(Text, nullable=False, default="")
    location = Column(Text, nullable=False, default="")
    link = Column(String(2048), nullable=False, unique=True)
    inserted_at = Column(DateTime, nullable=False, default=datetime.now)
    eligible = Column(Boolean, nullable=False, default=True)
    submitted = Column(Boolean, nullable=False, default=False)
    submitted_at = Column(DateTime, nullable=True)


class ApplicationStepModel(Base):
    """One attempted step of the apply wizard, append-only."""

    __tablename__ = "application_steps"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    link = Column(String(2048), nullable=False)
    step = Column(String(256), nullable=False)
    success = Column(Boolean, nullable=False)
    detail = Column(Text, nullable=True)
    html_path = Column(Text, nullable=True)
    screenshot_path = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    __table_args__ = (
        Index("idx_application_steps_link_created_at", "link", "created_at"),
    )
