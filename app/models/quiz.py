from sqlalchemy import Column, String, Boolean, ForeignKey, Integer, Text, false
from sqlalchemy.orm import relationship
from .base import BaseModel


class Quiz(BaseModel):
    __tablename__ = "quizzes"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    cover_image = Column(String(500), nullable=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    is_published = Column(Boolean, default=False, server_default=false(), nullable=False, index=True)

    # Relationships
    # Children are removed by the store's ON DELETE CASCADE, not by the ORM
    owner = relationship("User", back_populates="quizzes")
    questions = relationship(
        "Question",
        back_populates="quiz",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[Question.order, Question.id]",
    )
    submissions = relationship("Submission", back_populates="quiz", passive_deletes="all")
