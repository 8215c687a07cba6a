"""SEO Tag Analyzer API – FastAPI app and endpoints."""

import logging
import sqlite3

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from analyzer import analyze_tags
from config import CORS_ALLOW_ORIGINS, LOG_LEVEL, RECENT_ANALYSES_LIMIT
from database import get_analysis, get_analysis_by_url, init_db, list_recent_analyses, save_analysis
from models import StoredAnalysis
from schemas import AnalysisHistoryItem, AnalysisResult, AnalyzeRequest
from scraper import FetchError, MarkupParseError, extract_tags, fetch_page

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(
    title="SEO Tag Analyzer API",
    description="Meta tag previews, scores and recommendations for a single page",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup() -> None:
    init_db()


def _storage_unavailable(exc: sqlite3.Error) -> HTTPException:
    logger.error("Analysis storage error: %s", exc)
    return HTTPException(status_code=503, detail="Analysis storage is unavailable.")


def _stored_result(row: StoredAnalysis | None) -> AnalysisResult:
    if row is None:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return AnalysisResult.model_validate(row["result_json"])


@app.post("/api/analyze", response_model=AnalysisResult)
def analyze(body: AnalyzeRequest) -> AnalysisResult:
    """
    Pipeline: fetch page -> extract tags -> analyze -> store -> return report.
    """
    # 1. Fetch and parse
    try:
        markup = fetch_page(body.url)
        tags = extract_tags(markup)
    except FetchError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc
    except MarkupParseError as exc:
        raise HTTPException(status_code=422, detail=exc.message) from exc

    # 2. Analyze
    result = analyze_tags(body.url, tags)

    # 3. Store
    try:
        analysis_id = save_analysis(tags, result)
    except sqlite3.Error as exc:
        raise _storage_unavailable(exc) from exc
    logger.info("Stored analysis %s for %s (overall=%s)", analysis_id, body.url, result.score_data.overall)

    return result


@app.get("/api/recent-analyses", response_model=list[AnalysisHistoryItem])
def get_recent_analyses(limit: int = RECENT_ANALYSES_LIMIT) -> list[AnalysisHistoryItem]:
    """Return recent analyses for the history list."""
    try:
        rows = list_recent_analyses(limit=limit)
    except sqlite3.Error as exc:
        raise _storage_unavailable(exc) from exc
    return [AnalysisHistoryItem(**row) for row in rows]


@app.get("/api/analyses/lookup", response_model=AnalysisResult)
def get_analysis_for_url(url: str) -> AnalysisResult:
    """Return the stored report for a page, matched by normalized URL."""
    try:
        row = get_analysis_by_url(url)
    except sqlite3.Error as exc:
        raise _storage_unavailable(exc) from exc
    return _stored_result(row)


@app.get("/api/analyses/{analysis_id}", response_model=AnalysisResult)
def get_analysis_result(analysis_id: int) -> AnalysisResult:
    """Return a stored report by id."""
    try:
        row = get_analysis(analysis_id)
    except sqlite3.Error as exc:
        raise _storage_unavailable(exc) from exc
    return _stored_result(row)


@app.get("/health")
def health() -> dict:
    """Health check for deployment."""
    return {"status": "ok"}
