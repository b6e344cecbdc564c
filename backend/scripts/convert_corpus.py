"""
StrokeLens - Corpus Conversion Script
Validates a JSON reference corpus and rewrites it in the tab-separated
layout, which loads faster and diffs line-by-line.
Usage: python scripts/convert_corpus.py graphics.json graphics.tsv
"""

import argparse
import sys
from pathlib import Path

# ─── Paths ───────────────────────────────────────────────────────────────────
SCRIPT_DIR = Path(__file__).parent
BACKEND_DIR = SCRIPT_DIR.parent
sys.path.insert(0, str(BACKEND_DIR))

from strokelens.api.middleware.error_handler import CorpusValidationError  # noqa: E402
from strokelens.modules.corpus.loader import json_to_tsv, load_corpus_tsv  # noqa: E402
from strokelens.utils.logger import configure_logging  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Convert a JSON stroke corpus to TSV.")
    parser.add_argument("json_path", type=Path, help="Source corpus (.json)")
    parser.add_argument("tsv_path", type=Path, help="Destination corpus (.tsv)")
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Re-load the written file and compare it with the source",
    )
    args = parser.parse_args()

    configure_logging("WARNING")
    print("\nStrokeLens - Corpus Conversion\n" + "─" * 40)

    if not args.json_path.is_file():
        print(f"  ✗ {args.json_path} not found.")
        sys.exit(1)

    try:
        corpus = json_to_tsv(args.json_path, args.tsv_path)
    except CorpusValidationError as e:
        print(f"  ✗ Corpus rejected: {e}")
        sys.exit(1)

    print(f"  ✓ {len(corpus)} entries written to {args.tsv_path}")

    if args.verify:
        reloaded = load_corpus_tsv(args.tsv_path)
        mismatched = [
            a.label for a, b in zip(corpus, reloaded)
            if a.label != b.label or a.vectors.shape != b.vectors.shape
            or not (a.vectors == b.vectors).all()
        ]
        if len(reloaded) != len(corpus) or mismatched:
            print(f"  ✗ Verification failed for {len(mismatched)} entries: {mismatched[:10]}")
            sys.exit(1)
        print("  ✓ Verified: TSV matches JSON exactly.")

    print("─" * 40 + "\n")


if __name__ == "__main__":
    main()
