"""
StrokeLens - Corpus Self-Match Check
Feeds every corpus entry's own vectors back through the preprocessed
matching path and reports entries that do not rank themselves first.
Usage: python scripts/check_self_match.py graphics.json [--top 5]
"""

import argparse
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
BACKEND_DIR = SCRIPT_DIR.parent
sys.path.insert(0, str(BACKEND_DIR))

from strokelens.modules.corpus.loader import load_corpus  # noqa: E402
from strokelens.modules.matching.matcher import Matcher  # noqa: E402
from strokelens.utils.logger import configure_logging  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Check that every corpus entry matches itself.")
    parser.add_argument("corpus_path", type=Path)
    parser.add_argument("--top", type=int, default=5, help="Candidates requested per entry")
    args = parser.parse_args()

    configure_logging("WARNING")
    corpus = load_corpus(args.corpus_path)
    matcher = Matcher(corpus)

    failures = []
    for entry in corpus:
        candidates = matcher.match_preprocessed(entry.vectors, args.top)
        if not candidates or candidates[0] != entry.label:
            failures.append((entry.label, candidates))

    total = len(corpus)
    passed = total - len(failures)
    rate = 100.0 * passed / total if total else 0.0
    print(f"Tested: {total}  Passed: {passed}  Failed: {len(failures)}  ({rate:.2f}%)")

    for label, candidates in failures[:10]:
        print(f"  Expected '{label}', got {candidates}")

    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
