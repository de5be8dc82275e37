"""
Document models for the assessment collections
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ==================== BASE MODELS ====================
class BaseDocument(BaseModel):
    """Base model for all MongoDB documents"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = Field(default_factory=utcnow)


# ==================== ASSESSMENT MODELS ====================
class AssessmentPayload(BaseModel):
    """Everything handed to the persistence layer after scoring"""
    user_id: Optional[str] = None
    categories: List[str]
    responses: Dict[str, Union[str, List[str]]] = {}
    results: Dict[str, int] = {}
    answered_counts: Dict[str, int] = {}
    question_bank_version: str = ""
    completed_at: datetime = Field(default_factory=utcnow)

    @property
    def timestamp(self) -> int:
        return int(self.completed_at.timestamp() * 1000)


class AssessmentInDB(BaseDocument, AssessmentPayload):
    """Assessment as stored in the assessment_responses collection"""
    user_id: str
    timestamp_ms: int = 0
    demographics: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "assessment_123",
                "user_id": "student_42",
                "categories": ["depression", "overall"],
                "responses": {"0": "Always", "1": "Never"},
                "results": {"depression": 50, "overall": 50},
                "answered_counts": {"depression": 2, "overall": 2},
                "question_bank_version": "v1",
                "completed_at": "2024-01-15T10:30:00Z",
                "timestamp_ms": 1705314600000,
                "created_at": "2024-01-15T10:30:00Z",
            }
        }
    )

    @classmethod
    def from_payload(cls, payload: AssessmentPayload, **extra: Any) -> "AssessmentInDB":
        return cls(
            **payload.model_dump(),
            timestamp_ms=payload.timestamp,
            **extra,
        )


# ==================== PROGRESS MODELS ====================
class CategoryStats(BaseModel):
    average: float = 0.0
    minimum: int = 0
    maximum: int = 0
    std: float = 0.0
    latest: int = 0
    trend: int = 0
    samples: int = 0


class StudentProgressInDB(BaseModel):
    """Per-student aggregate kept in the student_progress collection"""
    user_id: str
    total_assessments: int = 0
    first_assessment: Optional[datetime] = None
    last_assessment: Optional[datetime] = None
    categories: Dict[str, CategoryStats] = {}
    last_updated: datetime = Field(default_factory=utcnow)
