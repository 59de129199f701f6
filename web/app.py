"""Minimal FastAPI wrapper that exposes the venue search over HTTP."""

from __future__ import annotations

import logging
import os
from typing import Any

from fastapi import Body, FastAPI
from fastapi.responses import JSONResponse

from venue_scraper.config import ScraperConfig
from venue_scraper.main import ENGINES
from venue_scraper.pipeline import normalize_keywords, search_venues

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

UI_ENGINE = os.getenv("VENUE_SCRAPER_ENGINE", "browser")
if UI_ENGINE not in ENGINES:
    logger.warning("Unknown VENUE_SCRAPER_ENGINE %r; using the browser engine", UI_ENGINE)
    UI_ENGINE = "browser"

ENGINE_FACTORY = ENGINES[UI_ENGINE]
CONFIG = ScraperConfig.from_env()

app = FastAPI(title="Venue scraper")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/search")
async def search(payload: Any = Body(None)):
    if not isinstance(payload, dict):
        return JSONResponse(
            {"error": "Invalid keywords", "details": "Request body must be a JSON object with a keywords list"},
            status_code=400,
        )

    keywords = payload.get("keywords")
    try:
        normalize_keywords(keywords)
    except (TypeError, ValueError) as exc:
        return JSONResponse({"error": "Invalid keywords", "details": str(exc)}, status_code=400)

    details = bool(payload.get("details", False))
    response = await search_venues(
        keywords,
        config=CONFIG,
        engine_factory=ENGINE_FACTORY,
        include_details=details,
    )
    if "error" in response:
        return JSONResponse(response, status_code=500)
    return response
