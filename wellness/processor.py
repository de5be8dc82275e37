"""
Question set construction and assessment scoring.

Both entry points are pure: no I/O, no shared state. ``build_question_set``
runs once when the student finalises their category selection;
``score_responses`` runs once at submission time.
"""
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from wellness import config
from wellness.question_bank import (
    MAX_OPTION_SCORE,
    OPTION_SCORES,
    OVERALL,
    Question,
    QuestionBank,
    is_known_tag,
    load_question_bank,
)


# -------------------------------------------------------
# 1. QUESTION SET
# -------------------------------------------------------
class QuestionSet(Sequence[Question]):
    """Ordered questions presented to one student; index is the response key."""

    def __init__(self, questions: Iterable[Question] = (), bank_version: str = ""):
        self._questions: Tuple[Question, ...] = tuple(questions)
        # Resolved once here so scoring never joins on question text.
        self._categories: Tuple[str, ...] = tuple(q.category for q in self._questions)
        self.bank_version = bank_version

    def __getitem__(self, index):
        return self._questions[index]

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)

    def __repr__(self) -> str:
        return f"QuestionSet({len(self)} questions, bank={self.bank_version!r})"

    def get(self, index: int) -> Optional[Question]:
        if 0 <= index < len(self._questions):
            return self._questions[index]
        return None

    def category_of(self, index: int) -> Optional[str]:
        if 0 <= index < len(self._categories):
            return self._categories[index]
        return None

    def to_list(self) -> List[Dict[str, Any]]:
        return [dict(q.to_dict(), index=i) for i, q in enumerate(self._questions)]


def build_question_set(
    selected_categories: Iterable[str],
    bank: Optional[QuestionBank] = None,
    allow_overlap_counting: Optional[bool] = None,
) -> QuestionSet:
    """
    Expand the selected categories into the ordered question sequence.

    - "overall" appends every category's questions in declaration order
    - a concrete category appends its own questions in catalog order
    - unknown tags are skipped
    With overlap counting disabled a question is never appended twice.
    """
    bank = bank or load_question_bank()
    if allow_overlap_counting is None:
        allow_overlap_counting = config.ALLOW_OVERLAP_COUNTING

    questions: List[Question] = []
    for tag in selected_categories:
        if tag == OVERALL:
            batch = bank.all_questions()
        elif tag in bank:
            batch = bank.questions_for(tag)
        else:
            continue

        if allow_overlap_counting:
            questions.extend(batch)
        else:
            present = {q.text for q in questions}
            questions.extend(q for q in batch if q.text not in present)

    return QuestionSet(questions, bank_version=bank.version)


# -------------------------------------------------------
# 2. RESULT TYPES
# -------------------------------------------------------
@dataclass(frozen=True)
class CategoryScore:
    percentage: int
    answered_count: int

    @property
    def has_data(self) -> bool:
        return self.answered_count > 0

    def to_dict(self) -> Dict[str, int]:
        return {"percentage": self.percentage, "answered_count": self.answered_count}


class AssessmentResult(Mapping[str, CategoryScore]):
    """Read-only mapping ``category tag -> CategoryScore``."""

    def __init__(self, scores: Mapping[str, CategoryScore]):
        self._scores = MappingProxyType(dict(scores))

    def __getitem__(self, tag: str) -> CategoryScore:
        return self._scores[tag]

    def __iter__(self) -> Iterator[str]:
        return iter(self._scores)

    def __len__(self) -> int:
        return len(self._scores)

    def __repr__(self) -> str:
        return f"AssessmentResult({dict(self._scores)!r})"

    def percentages(self) -> Dict[str, int]:
        return {tag: score.percentage for tag, score in self._scores.items()}

    def answered_counts(self) -> Dict[str, int]:
        return {tag: score.answered_count for tag, score in self._scores.items()}

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {tag: score.to_dict() for tag, score in self._scores.items()}


# -------------------------------------------------------
# 3. SCORING
# -------------------------------------------------------
def option_score(value: Any) -> Optional[int]:
    """Raw 0-4 score for a single Likert answer, None for anything else."""
    if not isinstance(value, str):
        return None
    return OPTION_SCORES.get(value)


def effective_score(question: Question, value: Any) -> Optional[int]:
    raw = option_score(value)
    if raw is None:
        return None
    if question.is_reverse_scored:
        return MAX_OPTION_SCORE - raw
    return raw


def to_percentage(total: int, count: int) -> int:
    if count <= 0:
        return 0
    ratio = total / (count * MAX_OPTION_SCORE) * 100
    # Half-up, not Python's banker's rounding.
    return max(0, min(100, int(math.floor(ratio + 0.5))))


def score_responses(
    question_set: QuestionSet,
    responses: Mapping[int, Any],
    selected_categories: Iterable[str],
    allow_overlap_counting: Optional[bool] = None,
) -> AssessmentResult:
    """
    Reduce a student's answers to per-category percentages.

    Each answered Likert question adds its effective score to its own
    category when that category was selected and, independently, to
    "overall" when overall was selected. Checkbox lists and free text are
    ignored. A category with no scored answers comes out as 0 with an
    ``answered_count`` of 0.

    Only recognised tags (the concrete categories and "overall") get an
    entry in the result; unknown selected tags are dropped rather than
    reported as 0.
    """
    if allow_overlap_counting is None:
        allow_overlap_counting = config.ALLOW_OVERLAP_COUNTING

    totals: Dict[str, List[int]] = {}
    for tag in selected_categories:
        if is_known_tag(tag):
            totals.setdefault(tag, [0, 0])

    scored_texts = set()
    for index in sorted(responses, key=_index_key):
        value = responses[index]
        position = _index_key(index)
        question = question_set.get(position)
        if question is None or not value:
            continue

        score = effective_score(question, value)
        if score is None:
            continue

        if not allow_overlap_counting:
            if question.text in scored_texts:
                continue
            scored_texts.add(question.text)

        category = question_set.category_of(position)
        if category in totals:
            totals[category][0] += score
            totals[category][1] += 1
        if OVERALL in totals:
            totals[OVERALL][0] += score
            totals[OVERALL][1] += 1

    return AssessmentResult({
        tag: CategoryScore(percentage=to_percentage(total, count), answered_count=count)
        for tag, (total, count) in totals.items()
    })


def _index_key(index: Any) -> int:
    try:
        return int(index)
    except (TypeError, ValueError):
        return -1
