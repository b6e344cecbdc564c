# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Reference Corpus
Immutable in-memory collection of preprocessed reference characters.

Lifecycle:
  - Built once from validated records (see modules/corpus/loader.py)
  - Shared read-only by every request thread
  - Replaced wholesale on reload, never mutated in place

Besides the ordered entries, the corpus keeps a zero-padded
(n_entries, max_strokes, 2K+2) array and a stroke-count vector so the
ranker can score every entry in one vectorised pass.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from strokelens.api.middleware.error_handler import CorpusValidationError
from strokelens.models.matching import NUM_ENCODED_POINTS, NUM_ENCODED_VALUES

# (label, [[x0, y0, ..., angle, length], ...])
CorpusRecord = tuple[str, Sequence[Sequence[float]]]


@dataclass(frozen=True)
class CorpusEntry:
    """One reference character: label + (n_strokes, 2K+2) read-only vectors."""
    label: str
    vectors: np.ndarray

    @property
    def stroke_count(self) -> int:
        return int(self.vectors.shape[0])

    def to_record(self) -> CorpusRecord:
        return self.label, self.vectors.tolist()


def _is_number(value: object) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def _validate_vector(
    label: str,
    index: int,
    values: Sequence[float],
    num_points: int,
    num_values: int,
) -> np.ndarray:
    expected = 2 * num_points + 2
    # np.asarray would coerce "160" and true; only real numbers are admitted
    if not isinstance(values, (list, tuple, np.ndarray)) or not all(_is_number(v) for v in values):
        raise CorpusValidationError(
            f"Entry '{label}' stroke {index}: non-numeric feature values."
        )
    vec = np.asarray(values, dtype=np.float64)

    if vec.ndim != 1 or vec.shape[0] != expected:
        raise CorpusValidationError(
            f"Entry '{label}' stroke {index}: expected {expected} values, "
            f"got {vec.size}."
        )
    if not np.all(np.isfinite(vec)):
        raise CorpusValidationError(
            f"Entry '{label}' stroke {index}: non-finite feature values."
        )

    coords = vec[: 2 * num_points]
    angle, length = vec[-2], vec[-1]
    canvas_max = num_values - 1
    if coords.min() < 0 or coords.max() > canvas_max:
        raise CorpusValidationError(
            f"Entry '{label}' stroke {index}: coordinates outside [0, {canvas_max}]."
        )
    if not 0 <= angle < num_values:
        raise CorpusValidationError(
            f"Entry '{label}' stroke {index}: angle code {angle} outside [0, {num_values})."
        )
    if not 0 <= length <= canvas_max:
        raise CorpusValidationError(
            f"Entry '{label}' stroke {index}: length code {length} outside [0, {canvas_max}]."
        )
    return vec


def build_entry(
    label: str,
    strokes: Sequence[Sequence[float]],
    num_points: int = NUM_ENCODED_POINTS,
    num_values: int = NUM_ENCODED_VALUES,
) -> CorpusEntry:
    """
    Validate one record and freeze it into a CorpusEntry.
    Raises CorpusValidationError on an empty label, no strokes,
    or any stroke that is not exactly 2K+2 in-range numbers.
    """
    if not isinstance(label, str) or not label.strip():
        raise CorpusValidationError("Corpus entry has an empty label.")
    if len(strokes) == 0:
        raise CorpusValidationError(f"Entry '{label}' has no strokes.")

    vectors = np.stack([
        _validate_vector(label, i, s, num_points, num_values)
        for i, s in enumerate(strokes)
    ])
    vectors.flags.writeable = False
    return CorpusEntry(label=label, vectors=vectors)


class Corpus:
    """
    Ordered, read-only reference corpus.
    Thread-safe for concurrent reads: nothing is mutable after __init__.
    """

    def __init__(
        self,
        entries: Iterable[CorpusEntry],
        num_points: int = NUM_ENCODED_POINTS,
        source: str | None = None,
    ) -> None:
        self._entries: tuple[CorpusEntry, ...] = tuple(entries)
        self.num_points = num_points
        self.vector_length = 2 * num_points + 2
        self.source = source

        for entry in self._entries:
            if entry.vectors.ndim != 2 or entry.vectors.shape[1] != self.vector_length:
                raise CorpusValidationError(
                    f"Entry '{entry.label}' vectors have shape {entry.vectors.shape}, "
                    f"expected (n, {self.vector_length})."
                )

        n = len(self._entries)
        max_strokes = max((e.stroke_count for e in self._entries), default=0)

        # Pre-stacked matrix for the vectorised ranker
        stacked = np.zeros((n, max_strokes, self.vector_length), dtype=np.float64)
        counts = np.zeros(n, dtype=np.int64)
        for i, entry in enumerate(self._entries):
            stacked[i, : entry.stroke_count] = entry.vectors
            counts[i] = entry.stroke_count
        stacked.flags.writeable = False
        counts.flags.writeable = False

        self._stacked = stacked
        self._stroke_counts = counts
        self._labels: tuple[str, ...] = tuple(e.label for e in self._entries)

    @classmethod
    def from_records(
        cls,
        records: Iterable[CorpusRecord],
        num_points: int = NUM_ENCODED_POINTS,
        num_values: int = NUM_ENCODED_VALUES,
        source: str | None = None,
    ) -> Corpus:
        """Validate every record; the first malformed one fails the whole load."""
        entries = [
            build_entry(label, strokes, num_points, num_values)
            for label, strokes in records
        ]
        return cls(entries, num_points=num_points, source=source)

    # ── Accessors ────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __getitem__(self, index: int) -> CorpusEntry:
        return self._entries[index]

    @property
    def entries(self) -> tuple[CorpusEntry, ...]:
        return self._entries

    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    @property
    def stacked_vectors(self) -> np.ndarray:
        """(n_entries, max_strokes, 2K+2), zero-padded past each entry's stroke count."""
        return self._stacked

    @property
    def stroke_counts(self) -> np.ndarray:
        return self._stroke_counts

    @property
    def max_strokes(self) -> int:
        return int(self._stacked.shape[1])

    def stroke_count_histogram(self) -> dict[int, int]:
        """stroke count → number of entries, ascending by stroke count."""
        hist = Counter(int(c) for c in self._stroke_counts)
        return dict(sorted(hist.items()))

    def find(self, label: str) -> CorpusEntry | None:
        """First entry with this label, or None."""
        for entry in self._entries:
            if entry.label == label:
                return entry
        return None
