from pydantic import BaseModel
from typing import Dict, List, Optional, Union


class CategorySelection(BaseModel):
    categories: List[str]


class ScoreRequest(CategorySelection):
    responses: Dict[int, Union[str, List[str]]] = {}  # {question index: answer}


class SubmitRequest(ScoreRequest):
    user_id: Optional[str] = None


class CategoryResult(BaseModel):
    percentage: int
    answered_count: int
    label: str
    risk_level: Optional[str] = None


class ScoreResponse(BaseModel):
    results: Dict[str, int]
    details: Dict[str, CategoryResult]
    total_questions: int
    question_bank_version: str


class SubmitResponse(ScoreResponse):
    saved: bool
    warning: Optional[str] = None
