import os

# Test-safe environment defaults for pydantic Settings (must run before app imports)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.database import Base, build_engine, get_db
from app.main import app
from app.models import User, UserRole
from app.schemas.quiz import QuizCreate, QuizUpdate, QuestionCreate, AnswerCreate
from app.services.quiz_service import QuizService


@pytest.fixture()
async def engine(tmp_path):
    """Fresh SQLite database file per test, schema created from the models."""
    test_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'quiz.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture()
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def quiz_service(db):
    return QuizService(db)


@pytest.fixture()
def make_user(db):
    """Insert a user directly (no bcrypt round trip)."""
    counter = {"n": 0}

    async def _make_user(email: str = None, role: UserRole = UserRole.USER, score: int = 0) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"player{counter['n']}@quizhub.io",
            password_hash="not-a-bcrypt-hash",
            role=role,
            score=score,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def make_quiz(quiz_service):
    """
    Build a quiz through the service.

    `questions` is a list of (points, [(answer_text, is_correct), ...]).
    Returns (quiz, [(question, [answer, ...]), ...]).
    """
    async def _make_quiz(owner: User, questions=(), published: bool = True, title: str = "General Knowledge"):
        quiz = await quiz_service.create_quiz(QuizCreate(title=title), owner)
        built = []
        for position, (points, answers) in enumerate(questions, start=1):
            question = await quiz_service.add_question(
                quiz.id,
                QuestionCreate(text=f"Question number {position}?", order=position, points=points),
                owner,
            )
            created = []
            for text, is_correct in answers:
                created.append(
                    await quiz_service.add_answer(
                        question.id,
                        AnswerCreate(text=text, is_correct=is_correct),
                        owner,
                    )
                )
            built.append((question, created))

        if published:
            quiz = await quiz_service.update_quiz(quiz.id, QuizUpdate(is_published=True), owner)
        return quiz, built

    return _make_quiz


@pytest.fixture()
async def client(session_factory):
    """HTTP client against the app with get_db bound to the test database."""
    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()
