from fastapi import APIRouter
from app.api.v1.endpoints import auth, quizzes

# ============================================================
# Main API v1 Router
# ============================================================

api_router = APIRouter()

# Include auth routes at /auth
api_router.include_router(
    auth.router,
    prefix="/auth"
)

# Quiz authoring, taking and leaderboards at /quiz
api_router.include_router(
    quizzes.router,
    prefix="/quiz"
)
