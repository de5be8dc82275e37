import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from wellness import config
from wellness.aggregator import aggregate_history, build_dashboard_summary, update_student_progress
from wellness.db import (
    async_assessments,
    async_demographics,
    async_progress,
    check_database_health,
    close_client,
    create_indexes,
)
from wellness.persistence import (
    AssessmentStore,
    MongoAssessmentStore,
    UnavailableAssessmentStore,
    build_payload,
    save_assessment,
)
from wellness.processor import build_question_set, score_responses
from wellness.question_bank import CATEGORY_INFO, QuestionBank, load_question_bank
from wellness.responses import ResponseStore
from wellness.schemas import CategorySelection, ScoreRequest, ScoreResponse, SubmitRequest, SubmitResponse
from wellness.severity import describe_result

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

ProgressUpdater = Callable[[str], Awaitable[object]]


@asynccontextmanager
async def lifespan(app: FastAPI):
    load_question_bank()
    if config.MONGODB_URI:
        await create_indexes()
    else:
        logger.warning("MONGODB_URI is not set; assessments will not be persisted")
    yield
    close_client()


app = FastAPI(
    title="Student Wellness Assessment",
    description="Scoring service for student mental-wellness assessments",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600,
)


# ==================== DEPENDENCIES ====================
def get_question_bank() -> QuestionBank:
    return load_question_bank()


def get_assessment_store() -> AssessmentStore:
    if not config.MONGODB_URI:
        return UnavailableAssessmentStore()
    return MongoAssessmentStore(async_assessments(), async_demographics())


def get_progress_updater() -> Optional[ProgressUpdater]:
    if not config.MONGODB_URI:
        return None

    async def updater(user_id: str):
        return await update_student_progress(user_id, async_assessments(), async_progress())
    return updater


def _score(request: ScoreRequest, bank: QuestionBank):
    question_set = build_question_set(request.categories, bank)
    # Negative positions can never match a question; skip them like any other absent index.
    responses = ResponseStore({i: v for i, v in request.responses.items() if i >= 0})
    result = score_responses(question_set, responses, request.categories)
    return question_set, responses, result


# ==================== HEALTH & INFO ENDPOINTS ====================
@app.get("/health")
async def health_check():
    """System health check"""
    health_data = await check_database_health()
    if health_data["status"] != "healthy":
        raise HTTPException(status_code=500, detail=f"Unhealthy: {health_data.get('error', 'Unknown error')}")
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": health_data["database"],
        "collections": health_data["collections"],
    }


@app.get("/api/categories")
async def list_categories(bank: QuestionBank = Depends(get_question_bank)):
    counts = bank.question_counts()
    return {
        "question_bank_version": bank.version,
        "categories": [
            {"id": tag, **info, "total_questions": counts.get(tag, 0)}
            for tag, info in CATEGORY_INFO.items()
        ],
    }


# ==================== ASSESSMENT ENDPOINTS ====================
@app.post("/api/assessments/questions")
async def get_questions(selection: CategorySelection, bank: QuestionBank = Depends(get_question_bank)):
    question_set = build_question_set(selection.categories, bank)
    return {
        "categories": selection.categories,
        "questions": question_set.to_list(),
        "total_questions": len(question_set),
        "question_bank_version": question_set.bank_version,
    }


@app.post("/api/assessments/score", response_model=ScoreResponse)
async def score_assessment(request: ScoreRequest, bank: QuestionBank = Depends(get_question_bank)):
    """Score answers without saving them"""
    question_set, _, result = _score(request, bank)
    return ScoreResponse(
        results=result.percentages(),
        details=describe_result(result),
        total_questions=len(question_set),
        question_bank_version=question_set.bank_version,
    )


@app.post("/api/assessments/submit", response_model=SubmitResponse)
async def submit_assessment(
    request: SubmitRequest,
    background_tasks: BackgroundTasks,
    bank: QuestionBank = Depends(get_question_bank),
    store: AssessmentStore = Depends(get_assessment_store),
    progress_updater: Optional[ProgressUpdater] = Depends(get_progress_updater),
):
    """Score a finished assessment, then try to save it"""
    question_set, responses, result = _score(request, bank)
    if not question_set:
        raise HTTPException(status_code=400, detail="No questions available for the selected categories")

    payload = build_payload(request.user_id, request.categories, responses, result, bank.version)
    outcome = await save_assessment(store, payload)

    if outcome.saved and progress_updater is not None:
        background_tasks.add_task(progress_updater, request.user_id)

    return SubmitResponse(
        results=result.percentages(),
        details=describe_result(result),
        total_questions=len(question_set),
        question_bank_version=question_set.bank_version,
        saved=outcome.saved,
        warning=outcome.warning,
    )


# ==================== STUDENT HISTORY ENDPOINTS ====================
@app.get("/api/students/{user_id}/assessments")
async def list_student_assessments(
    user_id: str,
    limit: int = Query(config.HISTORY_LIMIT, ge=1, le=500),
    store: AssessmentStore = Depends(get_assessment_store),
):
    history = await store.history(user_id, limit)
    return {"user_id": user_id, "total": len(history), "assessments": history}


@app.get("/api/students/{user_id}/progress")
async def student_progress(user_id: str, store: AssessmentStore = Depends(get_assessment_store)):
    history = await store.history(user_id, config.HISTORY_LIMIT)
    if not history:
        raise HTTPException(status_code=404, detail="No assessments found")
    return {
        "user_id": user_id,
        "progress": aggregate_history(history),
        "dashboard": build_dashboard_summary(history[0]),
    }
