# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Corpus Module
Public API for loading, validating and converting reference corpora.
"""

from strokelens.modules.corpus.loader import (
    format_tsv,
    json_to_tsv,
    load_corpus,
    load_corpus_json,
    load_corpus_tsv,
    parse_json_records,
    parse_tsv_records,
    write_corpus_tsv,
)

__all__ = [
    "load_corpus",
    "load_corpus_json",
    "load_corpus_tsv",
    "parse_json_records",
    "parse_tsv_records",
    "format_tsv",
    "write_corpus_tsv",
    "json_to_tsv",
]
