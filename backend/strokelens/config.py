# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Application Configuration
All settings are loaded from environment variables with defaults tuned
for the stock reference corpus. Override via backend/.env or environment.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def default_socket_path() -> Path:
    """Per-user runtime socket location, e.g. /run/user/1000/handwritten/strokelens.socket."""
    return Path(f"/run/user/{os.getuid()}") / "handwritten" / "strokelens.socket"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Corpus ──────────────────────────────────────────────────────────────
    # JSON or tab-separated file of preprocessed reference characters
    corpus_path: Optional[Path] = None

    # ─── Normalisation ───────────────────────────────────────────────────────
    min_width: float = 8.0
    # 1.0 forces a square bounding box; <= 0 disables the aspect constraint
    max_ratio: float = 1.0

    # ─── Scoring ─────────────────────────────────────────────────────────────
    per_stroke_weight: float = 4.0
    stroke_count_policy: Literal["truncate", "reject", "penalize"] = "truncate"
    # Only used by the "penalize" policy, subtracted per unmatched stroke
    stroke_count_penalty: float = 256.0

    # ─── Candidates ──────────────────────────────────────────────────────────
    default_candidates: int = 10
    max_candidates: int = 100

    # ─── Admission Control ───────────────────────────────────────────────────
    max_strokes: int = 64
    max_points_per_stroke: int = 2048

    # ─── Logging ─────────────────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ─── Server ──────────────────────────────────────────────────────────────
    host: str = "127.0.0.1"
    port: int = 8000
    # When set, uvicorn binds to this Unix domain socket instead of host:port
    socket_path: Optional[Path] = None

    # ─── Derived helpers ─────────────────────────────────────────────────────
    @property
    def uses_unix_socket(self) -> bool:
        return self.socket_path is not None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached singleton Settings instance."""
    return Settings()
