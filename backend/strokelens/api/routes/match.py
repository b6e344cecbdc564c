# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - POST /match, /match/preprocessed, /match/line
Recognition endpoints. Matching is CPU-bound and synchronous, so the
JSON routes are plain `def` handlers that FastAPI runs in its threadpool.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from strokelens.api.middleware.error_handler import StrokeInputError
from strokelens.config import get_settings
from strokelens.dependencies import MatcherDep
from strokelens.models.api import MatchRequest, MatchResponse, PreprocessedMatchRequest
from strokelens.modules.matching.matcher import Matcher
from strokelens.modules.preprocessing.validator import validate_strokes, validate_vectors
from strokelens.modules.protocol.line_codec import (
    decode_request,
    encode_candidates,
    encode_error,
)
from strokelens.utils.logger import get_logger

router = APIRouter(tags=["match"])
log = get_logger(__name__)


def _resolve_limit(limit: Optional[int]) -> int:
    """Requested candidate count, defaulted and capped by Settings."""
    settings = get_settings()
    if limit is None:
        limit = settings.default_candidates
    return min(limit, settings.max_candidates)


@router.post(
    "/match",
    response_model=MatchResponse,
    summary="Recognise a handwritten character from raw strokes",
    description=(
        "Strokes may use any coordinate system; the drawing is normalised "
        "from its own bounding box. An empty stroke list returns no candidates."
    ),
)
def match_strokes(body: MatchRequest, matcher: MatcherDep) -> MatchResponse:
    strokes = validate_strokes(body.strokes)
    candidates = matcher.match_raw_scored(strokes, _resolve_limit(body.limit))

    log.info(
        "match_complete",
        strokes=len(strokes),
        candidates=len(candidates),
        best=candidates[0].label if candidates else None,
    )
    return MatchResponse(candidates=candidates, count=len(candidates))


@router.post(
    "/match/preprocessed",
    response_model=MatchResponse,
    summary="Rank precomputed feature vectors against the corpus",
    description=(
        "Skips normalisation, resampling and encoding. Use this with vectors "
        "taken from the corpus itself for bit-exact comparisons."
    ),
)
def match_preprocessed(body: PreprocessedMatchRequest, matcher: MatcherDep) -> MatchResponse:
    vectors = validate_vectors(
        body.vectors,
        num_points=matcher.options.num_encoded_points,
        num_values=matcher.options.num_encoded_values,
    )
    candidates = matcher.match_preprocessed_scored(vectors, _resolve_limit(body.limit))

    log.info(
        "match_preprocessed_complete",
        strokes=len(vectors),
        candidates=len(candidates),
    )
    return MatchResponse(candidates=candidates, count=len(candidates))


def _match_line(matcher: Matcher, line: str) -> str:
    request = decode_request(line)
    strokes = validate_strokes(request.strokes)
    labels = matcher.match_raw(strokes, get_settings().default_candidates)
    return encode_candidates(labels)


@router.post(
    "/match/line",
    response_class=PlainTextResponse,
    summary="Recognise strokes sent in the tab-separated line protocol",
    description=(
        "Body: max_width<TAB>max_height<TAB>x0,y0,x1,y1,...<TAB>... "
        "Response: candidate labels separated by tabs, or ERROR<TAB>message."
    ),
)
async def match_line(request: Request, matcher: MatcherDep) -> PlainTextResponse:
    raw = await request.body()
    line = raw.decode("utf-8", errors="replace").split("\n", 1)[0]

    try:
        payload = await run_in_threadpool(_match_line, matcher, line)
    except StrokeInputError as exc:
        log.warning("line_request_rejected", error=str(exc))
        return PlainTextResponse(encode_error(str(exc)), status_code=422)

    return PlainTextResponse(payload)
