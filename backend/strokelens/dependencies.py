# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - FastAPI Dependencies
Singleton provider for the Matcher (and the Corpus it owns).
The corpus is loaded once during the lifespan startup in main.py and
stored here as a module-level reference. Reload builds a complete new
Matcher and swaps the reference; the old one is never mutated, so
requests already holding it finish against a consistent corpus.
Route handlers access it via FastAPI's Depends() injection.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

from fastapi import Depends

from strokelens.api.middleware.error_handler import (
    CorpusNotLoadedError,
    CorpusValidationError,
)
from strokelens.config import get_settings
from strokelens.models.matching import MatcherOptions
from strokelens.modules.corpus.loader import load_corpus
from strokelens.modules.matching.matcher import Matcher
from strokelens.utils.logger import get_logger

log = get_logger(__name__)

# ─── Matcher Singleton ────────────────────────────────────────────────────────

_matcher: Matcher | None = None


def build_matcher(corpus_path: Path) -> Matcher:
    """Load corpus_path and wrap it in a Matcher configured from Settings."""
    settings = get_settings()
    options = MatcherOptions.from_settings(settings)
    corpus = load_corpus(corpus_path, num_points=options.num_encoded_points)
    return Matcher(corpus, options)


def set_matcher(matcher: Optional[Matcher]) -> None:
    """Swap the active Matcher reference (None clears it)."""
    global _matcher
    _matcher = matcher


def init_matcher() -> None:
    """
    Load the configured corpus and install the Matcher singleton.
    Called once during application lifespan startup. A missing
    corpus_path leaves the service up without a corpus.
    """
    settings = get_settings()
    if settings.corpus_path is None:
        log.warning("corpus_path_unset", advice="Set CORPUS_PATH to a .json or .tsv corpus.")
        return

    matcher = build_matcher(settings.corpus_path)
    set_matcher(matcher)
    log.info(
        "init_matcher",
        entries=len(matcher.corpus),
        policy=matcher.options.stroke_count_policy.value,
    )


def reload_matcher() -> Matcher:
    """
    Re-read the configured corpus and swap it in.
    On failure the previous Matcher stays active.

    Raises:
        CorpusNotLoadedError:  no corpus_path configured
        CorpusValidationError: file missing or malformed
    """
    settings = get_settings()
    if settings.corpus_path is None:
        raise CorpusNotLoadedError("No corpus path is configured; set CORPUS_PATH.")

    try:
        matcher = build_matcher(settings.corpus_path)
    except FileNotFoundError as exc:
        raise CorpusValidationError(str(exc)) from exc

    set_matcher(matcher)
    log.info("corpus_reloaded", entries=len(matcher.corpus))
    return matcher


def get_matcher() -> Matcher:
    """
    FastAPI dependency: inject the Matcher singleton into route handlers.

    Usage in a route:
        @router.post("/match")
        def match(body: MatchRequest, matcher: MatcherDep):
            ...
    """
    if _matcher is None:
        raise CorpusNotLoadedError(
            "No reference corpus is loaded. Configure CORPUS_PATH and restart "
            "or call POST /corpus/reload."
        )
    return _matcher


# Annotated type alias for clean route signatures
MatcherDep = Annotated[Matcher, Depends(get_matcher)]
