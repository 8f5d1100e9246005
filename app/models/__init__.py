from app.models.base import Base
from app.models.user import User, UserRole
from app.models.quiz import Quiz
from app.models.question import Question
from app.models.answer import Answer
from app.models.submission import Submission

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Quiz",
    "Question",
    "Answer",
    "Submission",
]
