"""
Runtime settings for the SEO analyzer backend.

Values may be defined in a .env file in the backend root, e.g.:

SEO_ANALYZER_DB_PATH=/var/lib/seo-analyzer/analyses.db
FETCH_TIMEOUT_SECONDS=12

The app loads environment variables automatically using python-dotenv.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

DB_PATH = Path(os.getenv("SEO_ANALYZER_DB_PATH", "").strip() or Path(__file__).parent / "seo_analyzer.db")
FETCH_TIMEOUT_SECONDS = float(os.getenv("FETCH_TIMEOUT_SECONDS", "12"))
FETCH_USER_AGENT = os.getenv(
    "FETCH_USER_AGENT",
    "Mozilla/5.0 (compatible; SEOTagAnalyzer/1.0; +https://seotaganalyzer.com)",
)
RECENT_ANALYSES_LIMIT = int(os.getenv("RECENT_ANALYSES_LIMIT", "10"))
CORS_ALLOW_ORIGINS = [
    origin.strip() for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if origin.strip()
] or ["*"]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
