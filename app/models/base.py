"""
Base Model Module

This module provides a base class for all SQLAlchemy models with common fields:
- id: Primary key (auto-increment integer)
- created_at: Timestamp when record was created
- updated_at: Timestamp when record was last updated
"""

from sqlalchemy import Column, DateTime, Integer, func

from app.db.database import Base


class BaseModel(Base):
    """
    Abstract base model class that provides common fields for all models.

    Attributes:
        id (int): Primary key, auto-incremented by the store
        created_at (DateTime): Timestamp set automatically when record is created
        updated_at (DateTime): Timestamp updated automatically when record is modified
    """

    # This makes the class abstract - no table will be created for BaseModel itself
    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)

    # Created timestamp - set once when record is created
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    # Updated timestamp - updates every time the record is modified
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    def __repr__(self):
        """String representation for debugging."""
        return f"<{self.__class__.__name__}(id={self.id})>"
