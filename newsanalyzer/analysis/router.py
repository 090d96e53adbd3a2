import logging
from typing import Callable

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from newsanalyzer.analysis.news_analyzer import DegradedAnalysis, NewsAnalyzer
from newsanalyzer.core.store import HistoryStore, StoreError
from newsanalyzer.schemas import AnalyzeRequest


MIN_CONTENT_LENGTH = 50

MISSING_FIELDS_ERROR = "Both title and content are required and cannot be empty"
CONTENT_TOO_SHORT_ERROR = "Content is too short. Please provide more text for accurate analysis."
SERVER_ERROR = "Server error. Please try again later."


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_router(
    get_analyzer: Callable[[], NewsAnalyzer],
    get_store: Callable[[], HistoryStore],
) -> APIRouter:
    router = APIRouter()

    @router.post("/api/analyze")
    async def analyze_endpoint(req: AnalyzeRequest):
        title, content = req.title, req.content
        if not (title or "").strip() or not (content or "").strip():
            return _error(400, MISSING_FIELDS_ERROR)
        if len(content) < MIN_CONTENT_LENGTH:
            return _error(400, CONTENT_TOO_SHORT_ERROR)

        try:
            outcome = await get_analyzer().analyze(title, content)
            if isinstance(outcome, DegradedAnalysis):
                return _error(500, outcome.explanation)

            try:
                record_id = await get_store().save(title, content, outcome.result)
                logging.info(f"Saved analysis {record_id}")
            except StoreError as e:
                # Persistence is best-effort.
                logging.error(f"Database error: {e}")

            return outcome.result.to_wire()
        except Exception as e:
            logging.error(f"API error: {e}", exc_info=True)
            return _error(500, SERVER_ERROR)

    return router
