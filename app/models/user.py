import enum

from sqlalchemy import Column, String, Integer, Enum
from sqlalchemy.orm import relationship
from .base import BaseModel


class UserRole(enum.Enum):
    USER = "user"
    ADMIN = "admin"


class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(
            UserRole,
            name="role",
            values_callable=lambda x: [e.value for e in x]
        ),
        default=UserRole.USER,
        nullable=False
    )

    # Running total of all submission scores
    score = Column(Integer, default=0, server_default="0", nullable=False, index=True)

    # Relationships - User OWNS these
    quizzes = relationship("Quiz", back_populates="owner", passive_deletes="all")
    submissions = relationship("Submission", back_populates="user", passive_deletes="all")
