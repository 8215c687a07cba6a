"""SQLite database setup and analysis storage.

Table: seo_analyses
- id (integer, primary key)
- url (text)
- normalized_url (text, unique) - one row per page, re-analysis overwrites
- extracted tags (title, meta_description, og_tags, twitter_tags,
  canonical_url, robots_tags, schema_data)
- scores (essential_score, social_score, advanced_score, overall_score)
- recommendations (json)
- result_json (json, the full report)
- created_at (datetime)
"""

import json
import sqlite3
from datetime import datetime, timezone
from urllib.parse import urlsplit

from config import DB_PATH
from models import StoredAnalysis, TagRecord
from schemas import AnalysisResult, host_with_port

_JSON_COLUMNS = ("og_tags", "twitter_tags", "schema_data", "recommendations", "result_json")


def normalize_url(url: str) -> str:
    """Key used to detect repeat analyses of the same page.

    Origin (scheme, host, non-default port; no credentials) plus path,
    lowercased, trailing slash removed, query kept.
    """
    try:
        parsed = urlsplit(url.strip())
        origin_host = host_with_port(parsed)
    except ValueError:
        return url.lower()
    if not parsed.scheme or not origin_host:
        return url.lower()

    normalized = f"{parsed.scheme}://{origin_host}{parsed.path.rstrip('/')}".lower()
    if parsed.query:
        normalized += f"?{parsed.query}"
    return normalized


def get_connection() -> sqlite3.Connection:
    """Return a connection to the SQLite database."""
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> None:
    """Create the seo_analyses table if it does not exist."""
    conn = get_connection()
    try:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS seo_analyses (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                url TEXT NOT NULL,
                normalized_url TEXT NOT NULL UNIQUE,
                title TEXT,
                meta_description TEXT,
                og_tags TEXT NOT NULL,
                twitter_tags TEXT NOT NULL,
                canonical_url TEXT,
                robots_tags TEXT,
                schema_data TEXT NOT NULL,
                essential_score INTEGER NOT NULL,
                social_score INTEGER NOT NULL,
                advanced_score INTEGER NOT NULL,
                overall_score INTEGER NOT NULL,
                recommendations TEXT NOT NULL,
                result_json TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.commit()
    finally:
        conn.close()


def _row_to_analysis(row: sqlite3.Row) -> StoredAnalysis:
    data = {key: row[key] for key in row.keys() if key != "normalized_url"}
    for column in _JSON_COLUMNS:
        data[column] = json.loads(data[column])
    return data


def save_analysis(record: TagRecord, result: AnalysisResult) -> int:
    """Store an analysis and return its id.

    A page that was analyzed before keeps its id; the row is overwritten.
    """
    scores = result.score_data
    values = {
        "url": result.url,
        "normalized_url": normalize_url(result.url),
        "title": record.title,
        "meta_description": record.meta_description,
        "og_tags": json.dumps(dict(record.og_tags)),
        "twitter_tags": json.dumps(dict(record.twitter_tags)),
        "canonical_url": record.canonical_url,
        "robots_tags": record.robots_directive,
        "schema_data": json.dumps(list(record.structured_data_blocks)),
        "essential_score": scores.essential.score,
        "social_score": scores.social.score,
        "advanced_score": scores.advanced.score,
        "overall_score": scores.overall,
        "recommendations": json.dumps([item.model_dump(mode="json") for item in result.recommendations]),
        "result_json": result.model_dump_json(),
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    columns = ", ".join(values)
    placeholders = ", ".join(f":{name}" for name in values)
    updates = ", ".join(f"{name} = excluded.{name}" for name in values if name != "normalized_url")

    conn = get_connection()
    try:
        conn.execute(
            f"""
            INSERT INTO seo_analyses ({columns}) VALUES ({placeholders})
            ON CONFLICT(normalized_url) DO UPDATE SET {updates}
            """,
            values,
        )
        conn.commit()
        row = conn.execute(
            "SELECT id FROM seo_analyses WHERE normalized_url = ?",
            (values["normalized_url"],),
        ).fetchone()
        return row["id"]
    finally:
        conn.close()


def get_analysis(analysis_id: int) -> StoredAnalysis | None:
    """Fetch an analysis by id."""
    conn = get_connection()
    try:
        row = conn.execute("SELECT * FROM seo_analyses WHERE id = ?", (analysis_id,)).fetchone()
        return _row_to_analysis(row) if row is not None else None
    finally:
        conn.close()


def get_analysis_by_url(url: str) -> StoredAnalysis | None:
    """Fetch the latest analysis of the page at `url`."""
    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT * FROM seo_analyses WHERE normalized_url = ?",
            (normalize_url(url),),
        ).fetchone()
        return _row_to_analysis(row) if row is not None else None
    finally:
        conn.close()


def list_recent_analyses(limit: int = 10) -> list[StoredAnalysis]:
    """Return the most recently created analyses, newest first."""
    safe_limit = max(1, min(100, int(limit)))
    conn = get_connection()
    try:
        rows = conn.execute(
            """
            SELECT *
            FROM seo_analyses
            ORDER BY id DESC
            LIMIT ?
            """,
            (safe_limit,),
        ).fetchall()
        return [_row_to_analysis(row) for row in rows]
    finally:
        conn.close()
