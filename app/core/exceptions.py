"""
Domain Exceptions

Error kinds raised by services. Routers translate them to HTTP
status codes; services never catch their own errors.
"""


class QuizEngineError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str = "Quiz engine error"):
        self.message = message
        super().__init__(message)


class NotFoundError(QuizEngineError):
    """Referenced quiz, question or user does not exist."""


class ForbiddenError(QuizEngineError):
    """Acting user is not allowed to touch the resource."""


class BadRequestError(QuizEngineError):
    """Request is well-formed but cannot be applied (e.g. unpublished quiz)."""


class ConflictError(QuizEngineError):
    """Unique constraint would be violated (e.g. email already registered)."""


class AuthenticationError(QuizEngineError):
    """Credential could not be resolved to a user."""
