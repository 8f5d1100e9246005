"""
Scoring Engine

Grades a submitted answer map against a quiz's answer key.

The function is pure: it only reads the loaded Question/Answer objects
and never touches the database, so it can be tested without a session.

Rules:
- Every question of the quiz is visited, answered or not.
- A question scores when the chosen answer id belongs to that question
  and is flagged correct. Questions with several correct answers score
  on any of them; questions with none can never score.
- Submitted keys that are not questions of the quiz are ignored and
  reported back in `ignored_question_ids`.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional

from app.models.question import Question

logger = logging.getLogger(__name__)


@dataclass
class QuestionOutcome:
    """Result for a single question."""
    question_id: int
    selected_answer_id: Optional[int]
    is_correct: bool
    points_earned: int


@dataclass
class ScoreBreakdown:
    """
    Result of grading one submission.

    Attributes:
        score: Sum of points of correctly answered questions
        total_questions: Number of questions in the quiz
        correct_answers: Number of correctly answered questions
        max_score: Sum of points of all questions
        ignored_question_ids: Submitted keys that matched no question
        outcomes: Per-question results, in quiz order
    """
    score: int = 0
    total_questions: int = 0
    correct_answers: int = 0
    max_score: int = 0
    ignored_question_ids: List[str] = field(default_factory=list)
    outcomes: List[QuestionOutcome] = field(default_factory=list)


def score_submission(
    questions: Iterable[Question],
    submitted: Mapping[str, int],
) -> ScoreBreakdown:
    """
    Grade `submitted` (question id -> chosen answer id) against `questions`.

    Each question must have its `answers` collection loaded.
    """
    breakdown = ScoreBreakdown()
    seen_keys = set()

    for question in questions:
        key = str(question.id)
        seen_keys.add(key)

        breakdown.total_questions += 1
        breakdown.max_score += question.points

        chosen_id = submitted.get(key)
        is_correct = False

        if chosen_id is not None:
            selected = _find_answer(question, chosen_id)
            is_correct = bool(selected is not None and selected.is_correct)

        points = question.points if is_correct else 0
        if is_correct:
            breakdown.correct_answers += 1
            breakdown.score += points

        breakdown.outcomes.append(
            QuestionOutcome(
                question_id=question.id,
                selected_answer_id=chosen_id,
                is_correct=is_correct,
                points_earned=points,
            )
        )

    breakdown.ignored_question_ids = [k for k in submitted if k not in seen_keys]
    if breakdown.ignored_question_ids:
        logger.debug(f"Ignoring answers for unknown questions: {breakdown.ignored_question_ids}")

    return breakdown


def _find_answer(question: Question, answer_id: int):
    # Only answers of this question count; ids from other questions are stale
    for answer in question.answers:
        if answer.id == answer_id:
            return answer
    return None
