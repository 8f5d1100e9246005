from app.repositories.base import BaseRepository
from app.repositories.user_repo import UserRepository
from app.repositories.quiz_repo import QuizRepository, QuestionRepository, AnswerRepository
from app.repositories.submission_repo import SubmissionRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "QuizRepository",
    "QuestionRepository",
    "AnswerRepository",
    "SubmissionRepository",
]
