"""
Command line front end: referate text files or train the neural model.
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import List, Optional

import pandas as pd

from .config import ReferatorConfig
from .corpus import load_corpus, load_text_from_file
from .errors import ReferatorError
from .language import group_by_language
from .model import NeuralReferator
from .scoring import SentenceExtraction
from .summarize import referate_neural, referate_statistical

logger = logging.getLogger(__name__)


def ratings_table(texts: List[str], config: ReferatorConfig) -> pd.DataFrame:
    """Per-sentence statistical ratings of every document, one row per sentence."""
    buckets = group_by_language(texts)
    ratings = SentenceExtraction(config).ratings(buckets)
    rows = []
    for index in sorted(ratings):
        for r in ratings[index]:
            text = r.sentence.strip()
            rows.append({
                "Document #": index + 1,
                "Sentence #": r.position + 1,
                "Rating": round(r.score, 4),
                "Text Preview": text[:80] + "..." if len(text) > 80 else text,
            })
    return pd.DataFrame(rows, columns=["Document #", "Sentence #", "Rating", "Text Preview"])


def cmd_summarize(args, config: ReferatorConfig) -> int:
    texts = [load_text_from_file(f) for f in args.files]
    output = {}
    if args.method in ("statistical", "both"):
        output["resultSE"] = [r.to_dict() for r in referate_statistical(texts, config)]
    if args.method in ("neural", "both"):
        output["resultNN"] = [r.to_dict() for r in referate_neural(texts, config)]

    print(json.dumps(output, ensure_ascii=False, indent=2))
    if args.ratings:
        print(ratings_table(texts, config).to_string(index=False))
    return 0


def cmd_train(args, config: ReferatorConfig) -> int:
    texts = load_corpus(config.corpus_dir)
    if not texts:
        logger.error("No training texts found in %s", config.corpus_dir)
        return 1
    referator = NeuralReferator(config)
    loss = referator.train(group_by_language(texts))
    path = referator.save(config.model_id)
    print(f"Model saved to {path} (final loss {loss:.6f})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="referator", description="Extractive referates and keywords")
    parser.add_argument("--model-dir", help="Directory holding persisted models")
    parser.add_argument("--model-id", help="Identifier of the persisted model")
    parser.add_argument("--corpus", dest="corpus_dir", help="Training corpus folder")
    parser.add_argument("--workers", type=int, help="Processes used for term statistics")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_sum = sub.add_parser("summarize", help="Referate text files")
    p_sum.add_argument("files", nargs="+", help=".txt, .md or .rtf files")
    p_sum.add_argument("--method", choices=["statistical", "neural", "both"], default="both")
    p_sum.add_argument("--ratings", action="store_true", help="Also print per-sentence ratings")
    p_sum.set_defaults(func=cmd_summarize)

    p_train = sub.add_parser("train", help="Train and save the neural model")
    p_train.add_argument("--epochs", type=int, help="Training epochs")
    p_train.set_defaults(func=cmd_train)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(format="%(asctime)s %(levelname)s:%(message)s",
                        level=logging.DEBUG if args.verbose else logging.INFO)

    config = ReferatorConfig.from_env()
    for name in ("model_dir", "model_id", "corpus_dir", "workers", "epochs"):
        value = getattr(args, name, None)
        if value is not None:
            setattr(config, name, value)

    try:
        return args.func(args, config)
    except ReferatorError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
