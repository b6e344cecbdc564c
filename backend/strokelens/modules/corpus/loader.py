# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Corpus Loader
Reads the preprocessed reference corpus from disk and validates it
before it is admitted. Two on-disk formats are supported:

  JSON  [[label, [[x0, y0, ..., x3, y3, angle, length], ...]], ...]
  TSV   one entry per line:
        label<TAB>x0,y0,...,angle,length<TAB>x0,y0,...<TAB>...

Any malformed record fails the whole load with CorpusValidationError;
a partially loaded corpus is never returned.
"""

from __future__ import annotations

import json
from pathlib import Path

from strokelens.api.middleware.error_handler import CorpusValidationError
from strokelens.models.corpus import Corpus, CorpusRecord
from strokelens.models.matching import NUM_ENCODED_POINTS, NUM_ENCODED_VALUES
from strokelens.utils.logger import get_logger

log = get_logger(__name__)

_TSV_SUFFIXES = {".tsv", ".csv", ".txt"}


def _read_corpus_text(path: Path) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise CorpusValidationError(
            f"Corpus file {path} is not valid UTF-8 (byte offset {exc.start})."
        ) from exc


# ─── JSON ────────────────────────────────────────────────────────────────────

def parse_json_records(text: str) -> list[CorpusRecord]:
    """Parse the JSON corpus layout into (label, strokes) records."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CorpusValidationError(f"Corpus JSON is not valid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise CorpusValidationError("Corpus JSON must be a top-level array.")

    records: list[CorpusRecord] = []
    for i, item in enumerate(data):
        if not isinstance(item, list) or len(item) != 2:
            raise CorpusValidationError(
                f"Corpus JSON entry {i} must be a [label, strokes] pair."
            )
        label, strokes = item
        if not isinstance(label, str):
            raise CorpusValidationError(f"Corpus JSON entry {i} label is not a string.")
        if not isinstance(strokes, list) or not all(isinstance(s, list) for s in strokes):
            raise CorpusValidationError(
                f"Corpus JSON entry {i} ('{label}') strokes must be a list of arrays."
            )
        records.append((label, strokes))
    return records


def load_corpus_json(
    path: Path,
    num_points: int = NUM_ENCODED_POINTS,
    num_values: int = NUM_ENCODED_VALUES,
) -> Corpus:
    records = parse_json_records(_read_corpus_text(path))
    return Corpus.from_records(records, num_points, num_values, source=str(path))


# ─── TSV ─────────────────────────────────────────────────────────────────────

def parse_tsv_records(text: str) -> list[CorpusRecord]:
    """Parse the tab-separated layout. Blank lines are skipped."""
    records: list[CorpusRecord] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        label, *stroke_fields = line.split("\t")
        strokes = []
        for field in stroke_fields:
            try:
                strokes.append([float(v) for v in field.split(",")])
            except ValueError as exc:
                raise CorpusValidationError(
                    f"Corpus TSV line {lineno} ('{label}'): non-numeric stroke value."
                ) from exc
        records.append((label, strokes))
    return records


def load_corpus_tsv(
    path: Path,
    num_points: int = NUM_ENCODED_POINTS,
    num_values: int = NUM_ENCODED_VALUES,
) -> Corpus:
    records = parse_tsv_records(_read_corpus_text(path))
    return Corpus.from_records(records, num_points, num_values, source=str(path))


def _format_value(v: float) -> str:
    # Integral codes are written without a trailing ".0"
    return str(int(v)) if float(v).is_integer() else repr(float(v))


def format_tsv(corpus: Corpus) -> str:
    lines = []
    for entry in corpus:
        fields = [entry.label]
        fields.extend(
            ",".join(_format_value(v) for v in stroke)
            for stroke in entry.vectors.tolist()
        )
        lines.append("\t".join(fields))
    return "\n".join(lines) + ("\n" if lines else "")


def write_corpus_tsv(corpus: Corpus, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_tsv(corpus), encoding="utf-8")
    log.info("corpus_tsv_written", path=str(path), entries=len(corpus))


# ─── Main Entry Points ───────────────────────────────────────────────────────

def load_corpus(
    path: Path,
    num_points: int = NUM_ENCODED_POINTS,
    num_values: int = NUM_ENCODED_VALUES,
) -> Corpus:
    """
    Load and validate a corpus file, choosing the format by suffix
    (.json → JSON, .tsv/.csv/.txt → tab-separated).

    Raises:
        FileNotFoundError:     path does not exist
        CorpusValidationError: unknown suffix or any malformed record
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Corpus file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        corpus = load_corpus_json(path, num_points, num_values)
    elif suffix in _TSV_SUFFIXES:
        corpus = load_corpus_tsv(path, num_points, num_values)
    else:
        raise CorpusValidationError(
            f"Unsupported corpus format '{suffix}'. Use .json, .tsv or .csv."
        )

    log.info(
        "corpus_loaded",
        path=str(path),
        entries=len(corpus),
        max_strokes=corpus.max_strokes,
    )
    return corpus


def json_to_tsv(json_path: Path, tsv_path: Path) -> Corpus:
    """Convert a JSON corpus to the tab-separated layout. Returns the loaded corpus."""
    corpus = load_corpus_json(Path(json_path))
    write_corpus_tsv(corpus, Path(tsv_path))
    return corpus
