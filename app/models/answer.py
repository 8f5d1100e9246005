from sqlalchemy import Column, Integer, Boolean, ForeignKey, Text, false
from sqlalchemy.orm import relationship
from .base import BaseModel


class Answer(BaseModel):
    __tablename__ = "answers"

    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)

    text = Column(Text, nullable=False)
    # Any number of answers per question may be flagged correct
    is_correct = Column(Boolean, default=False, server_default=false(), nullable=False)
    explanation = Column(Text, nullable=True)

    # Relationships
    question = relationship("Question", back_populates="answers")
