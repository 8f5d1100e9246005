"""
Quiz Endpoints

HTTP API for quiz authoring, taking, and leaderboards.

Endpoints:
----------
- POST   /quiz                                 - Create a quiz (draft)
- GET    /quiz                                 - List quizzes (?published=true|false)
- GET    /quiz/user/submissions                - Current user's submissions
- GET    /quiz/leaderboard/global              - Global leaderboard
- GET    /quiz/{quiz_id}                       - Get quiz metadata
- GET    /quiz/{quiz_id}/full                  - Get quiz with questions and answers
- PATCH  /quiz/{quiz_id}                       - Update a quiz (owner only)
- DELETE /quiz/{quiz_id}                       - Delete a quiz (owner only)
- POST   /quiz/{quiz_id}/questions             - Add a question (owner only)
- POST   /quiz/questions/{question_id}/answers - Add an answer (owner only)
- POST   /quiz/{quiz_id}/submit                - Submit answers
- GET    /quiz/{quiz_id}/leaderboard           - Quiz leaderboard
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import NotFoundError, ForbiddenError, BadRequestError
from app.db.database import get_db
from app.api.deps import get_current_user
from app.models.user import User
from app.schemas.quiz import (
    QuizCreate,
    QuizUpdate,
    QuestionCreate,
    AnswerCreate,
    QuizSubmitRequest,
    QuizResponse,
    QuizDetailResponse,
    QuestionResponse,
    AnswerResponse,
    SubmissionResponse,
    SubmissionResultResponse,
    QuizLeaderboardEntry,
    GlobalLeaderboardEntry,
    MessageResponse,
)
from app.services.quiz_service import QuizService

router = APIRouter(tags=["Quizzes"])


def get_quiz_service(db: AsyncSession = Depends(get_db)) -> QuizService:
    return QuizService(db)


def leaderboard_limit(
    limit: Optional[int] = Query(None, ge=1, le=settings.LEADERBOARD_MAX_LIMIT),
) -> Optional[int]:
    return limit


# ============================================================
# CREATE QUIZ
# ============================================================

@router.post(
    "",
    response_model=QuizResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a quiz",
    description="Creates an unpublished quiz owned by the current user.",
)
async def create_quiz(
    quiz_data: QuizCreate,
    current_user: User = Depends(get_current_user),
    service: QuizService = Depends(get_quiz_service),
):
    return await service.create_quiz(quiz_data, current_user)


# ============================================================
# LIST QUIZZES
# ============================================================

@router.get(
    "",
    response_model=List[QuizResponse],
    summary="List quizzes",
)
async def list_quizzes(
    published: Optional[bool] = Query(None, description="Filter by publish state"),
    service: QuizService = Depends(get_quiz_service),
):
    return await service.list_quizzes(published)


# ============================================================
# USER SUBMISSIONS
# ============================================================

@router.get(
    "/user/submissions",
    response_model=List[SubmissionResponse],
    summary="List the current user's submissions",
)
async def get_user_submissions(
    current_user: User = Depends(get_current_user),
    service: QuizService = Depends(get_quiz_service),
):
    return await service.get_user_submissions(current_user.id)


# ============================================================
# GLOBAL LEADERBOARD
# ============================================================

@router.get(
    "/leaderboard/global",
    response_model=List[GlobalLeaderboardEntry],
    summary="Global leaderboard by cumulative score",
)
async def get_global_leaderboard(
    limit: Optional[int] = Depends(leaderboard_limit),
    service: QuizService = Depends(get_quiz_service),
):
    return await service.get_global_leaderboard(limit)


# ============================================================
# GET QUIZ
# ============================================================

@router.get(
    "/{quiz_id}",
    response_model=QuizResponse,
    summary="Get quiz metadata",
)
async def get_quiz(
    quiz_id: int,
    service: QuizService = Depends(get_quiz_service),
):
    try:
        return await service.get_quiz(quiz_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )


@router.get(
    "/{quiz_id}/full",
    response_model=QuizDetailResponse,
    summary="Get quiz with questions and answers",
)
async def get_quiz_full(
    quiz_id: int,
    service: QuizService = Depends(get_quiz_service),
):
    try:
        return await service.get_quiz_with_questions_and_answers(quiz_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )


# ============================================================
# UPDATE QUIZ
# ============================================================

@router.patch(
    "/{quiz_id}",
    response_model=QuizResponse,
    summary="Update a quiz",
    description="Only the quiz creator may update it. Use `is_published` to publish.",
)
async def update_quiz(
    quiz_id: int,
    quiz_data: QuizUpdate,
    current_user: User = Depends(get_current_user),
    service: QuizService = Depends(get_quiz_service),
):
    try:
        return await service.update_quiz(quiz_id, quiz_data, current_user)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )
    except ForbiddenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=e.message,
        )


# ============================================================
# DELETE QUIZ
# ============================================================

@router.delete(
    "/{quiz_id}",
    response_model=MessageResponse,
    summary="Delete a quiz",
)
async def delete_quiz(
    quiz_id: int,
    current_user: User = Depends(get_current_user),
    service: QuizService = Depends(get_quiz_service),
):
    try:
        await service.delete_quiz(quiz_id, current_user)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )
    except ForbiddenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=e.message,
        )
    return MessageResponse(message="Quiz deleted successfully")


# ============================================================
# QUESTIONS & ANSWERS
# ============================================================

@router.post(
    "/{quiz_id}/questions",
    response_model=QuestionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a question to a quiz",
)
async def add_question(
    quiz_id: int,
    question_data: QuestionCreate,
    current_user: User = Depends(get_current_user),
    service: QuizService = Depends(get_quiz_service),
):
    try:
        return await service.add_question(quiz_id, question_data, current_user)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )
    except ForbiddenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=e.message,
        )


@router.post(
    "/questions/{question_id}/answers",
    response_model=AnswerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add an answer to a question",
)
async def add_answer(
    question_id: int,
    answer_data: AnswerCreate,
    current_user: User = Depends(get_current_user),
    service: QuizService = Depends(get_quiz_service),
):
    try:
        return await service.add_answer(question_id, answer_data, current_user)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )
    except ForbiddenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=e.message,
        )


# ============================================================
# SUBMIT QUIZ
# ============================================================

@router.post(
    "/{quiz_id}/submit",
    response_model=SubmissionResultResponse,
    summary="Submit quiz answers",
    description="""
    Grades the answers, records a submission and adds the score to the
    user's running total. Answers for unknown questions are ignored.
    """,
)
async def submit_quiz(
    quiz_id: int,
    submission: QuizSubmitRequest,
    current_user: User = Depends(get_current_user),
    service: QuizService = Depends(get_quiz_service),
):
    try:
        return await service.submit_quiz(quiz_id, submission, current_user)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )
    except BadRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )


# ============================================================
# QUIZ LEADERBOARD
# ============================================================

@router.get(
    "/{quiz_id}/leaderboard",
    response_model=List[QuizLeaderboardEntry],
    summary="Quiz leaderboard",
)
async def get_quiz_leaderboard(
    quiz_id: int,
    limit: Optional[int] = Depends(leaderboard_limit),
    service: QuizService = Depends(get_quiz_service),
):
    return await service.get_quiz_leaderboard(quiz_id, limit)
