from sqlalchemy import Column, Integer, ForeignKey, Text
from sqlalchemy.orm import relationship
from .base import BaseModel


class Question(BaseModel):
    __tablename__ = "questions"

    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)

    text = Column(Text, nullable=False)
    order = Column(Integer, nullable=False)  # Author-supplied position, not unique
    points = Column(Integer, default=1, server_default="1", nullable=False)

    # Relationships
    quiz = relationship("Quiz", back_populates="questions")
    answers = relationship(
        "Answer",
        back_populates="question",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Answer.id",
    )
