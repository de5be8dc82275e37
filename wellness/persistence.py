"""
Storage boundary for finished assessments.

Scoring never depends on this module succeeding: ``save_assessment`` catches
every storage failure and reports it as a warning next to the result that
was already computed.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from pymongo import DESCENDING

from wellness.models import AssessmentInDB, AssessmentPayload
from wellness.processor import AssessmentResult
from wellness.responses import ResponseStore

logger = logging.getLogger(__name__)

NO_USER_WARNING = "No authenticated user found. Assessment not saved."
SAVE_FAILED_WARNING = "Failed to save assessment. Results will still be displayed."


@dataclass
class SaveOutcome:
    saved: bool
    warning: Optional[str] = None


class AssessmentStore(ABC):
    @abstractmethod
    async def save(self, payload: AssessmentPayload) -> None:
        ...

    @abstractmethod
    async def history(self, user_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        ...


class UnavailableAssessmentStore(AssessmentStore):
    """Stand-in used when no database is configured; every save fails."""

    async def save(self, payload: AssessmentPayload) -> None:
        raise RuntimeError("MONGODB_URI is not configured")

    async def history(self, user_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        return []


class MongoAssessmentStore(AssessmentStore):
    """Writes to ``assessment_responses``; attaches demographics when it can."""

    def __init__(self, assessments, demographics=None):
        self.assessments = assessments
        self.demographics = demographics

    async def save(self, payload: AssessmentPayload) -> None:
        demographics = await self._load_demographics(payload.user_id)
        document = AssessmentInDB.from_payload(payload, demographics=demographics)
        await self.assessments.insert_one(document.model_dump())
        logger.info("Assessment %s saved for user %s", document.id, payload.user_id)

    async def history(self, user_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        return await fetch_history(self.assessments, user_id, limit)

    async def _load_demographics(self, user_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if self.demographics is None or not user_id:
            return None
        try:
            document = await self.demographics.find_one({"user_id": user_id}, {"_id": 0})
        except Exception as e:
            logger.warning("Could not fetch demographics for %s, continuing without them: %s", user_id, e)
            return None
        return document


async def fetch_history(assessments, user_id: str, limit: int = 50) -> List[Dict[str, Any]]:
    """A student's saved assessments, newest first."""
    cursor = (
        assessments.find({"user_id": user_id}, {"_id": 0})
        .sort("completed_at", DESCENDING)
        .limit(limit)
    )
    return await cursor.to_list(length=limit)


def build_payload(
    user_id: Optional[str],
    selected_categories: Iterable[str],
    responses: ResponseStore,
    result: AssessmentResult,
    question_bank_version: str = "",
) -> AssessmentPayload:
    return AssessmentPayload(
        user_id=user_id,
        categories=list(selected_categories),
        responses=responses.to_document(),
        results=result.percentages(),
        answered_counts=result.answered_counts(),
        question_bank_version=question_bank_version,
    )


async def save_assessment(store: AssessmentStore, payload: AssessmentPayload) -> SaveOutcome:
    """Persist ``payload``; never raises."""
    if not payload.user_id:
        logger.warning(NO_USER_WARNING)
        return SaveOutcome(saved=False, warning=NO_USER_WARNING)

    try:
        await store.save(payload)
    except Exception:
        logger.exception("Error saving assessment for user %s", payload.user_id)
        return SaveOutcome(saved=False, warning=SAVE_FAILED_WARNING)

    return SaveOutcome(saved=True)
