from sqlalchemy import Column, Integer, ForeignKey, DateTime, JSON, func
from sqlalchemy.orm import relationship
from app.db.database import Base


class Submission(Base):
    """
    One attempt at a quiz by a user.

    Rows are append-only. `answers` keeps the submitted
    {question_id: answer_id} map exactly as it was sent, so later edits
    to the quiz never rewrite history.
    """
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)

    # Results
    score = Column(Integer, nullable=False)
    total_questions = Column(Integer, nullable=False)
    correct_answers = Column(Integer, nullable=False)

    # Timing
    time_spent = Column(Integer, nullable=True)  # seconds
    answers = Column(JSON, nullable=True)

    completed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    user = relationship("User", back_populates="submissions")
    quiz = relationship("Quiz", back_populates="submissions")

    def __repr__(self):
        return f"<Submission(id={self.id}, user_id={self.user_id}, quiz_id={self.quiz_id}, score={self.score})>"
