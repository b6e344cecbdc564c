# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - GET /corpus + POST /corpus/reload
Inspect the active reference corpus or swap in a freshly loaded one.
"""

from __future__ import annotations

from fastapi import APIRouter

from strokelens.dependencies import MatcherDep, reload_matcher
from strokelens.models.api import CorpusSummary
from strokelens.models.corpus import Corpus
from strokelens.utils.logger import get_logger

router = APIRouter(tags=["corpus"])
log = get_logger(__name__)


def _summary(corpus: Corpus) -> CorpusSummary:
    return CorpusSummary(
        entries=len(corpus),
        max_strokes=corpus.max_strokes,
        stroke_counts=corpus.stroke_count_histogram(),
        source=corpus.source,
    )


@router.get(
    "/corpus",
    response_model=CorpusSummary,
    summary="Describe the active reference corpus",
)
def get_corpus(matcher: MatcherDep) -> CorpusSummary:
    return _summary(matcher.corpus)


@router.post(
    "/corpus/reload",
    response_model=CorpusSummary,
    summary="Reload the reference corpus from CORPUS_PATH",
    description=(
        "Loads and validates the configured file, then replaces the active "
        "corpus. If loading fails the previous corpus stays in service."
    ),
)
def post_reload() -> CorpusSummary:
    matcher = reload_matcher()
    log.info("corpus_reload_request", entries=len(matcher.corpus))
    return _summary(matcher.corpus)
