from __future__ import annotations
import logging
from typing import Callable, Dict, List, Mapping, Sequence, Tuple

from .config import ReferatorConfig
from .datatypes import BucketStats, Document, Language, Rating, ReferateResult, Sentence, TermStats
from .errors import ReferatorError
from .preprocessing import LanguageProfile, split_sentences

logger = logging.getLogger(__name__)

# (sentences of one document, that document's statistics) -> one rating per sentence
RateFn = Callable[[List[Sentence], TermStats], List[Rating]]


def select_sentences(ratings: Sequence[Rating], limit: int = 10) -> List[Rating]:
    """Top `limit` ratings by score, returned in reading order."""
    # sorted() is stable, so equal scores keep their document order
    ranked = sorted(ratings, key=lambda r: r.score, reverse=True)[:min(limit, len(ratings))]
    ranked.sort(key=lambda r: r.position)
    return ranked


def generate_referate(ratings: Sequence[Rating], limit: int = 10) -> str:
    return "".join(r.sentence for r in select_sentences(ratings, limit))


def extract_keywords(referate: str,
                     doc_stats: TermStats,
                     bucket: BucketStats,
                     profile: LanguageProfile,
                     limit: int = 20,
                     min_length: int = 3) -> List[str]:
    """
    Keywords of a referate, ranked by tf * N / df of their stem in the source
    document. Surface forms are lower-cased and deduplicated, first one wins.
    """
    scored: List[Tuple[str, float]] = []
    visited = set()
    for token in profile.significant_tokens(referate):
        word = token.lower()
        if word in visited:
            continue
        visited.add(word)

        stem = profile.stem(token)
        value = doc_stats.tf.get(stem, 0) * bucket.size / bucket.df.get(stem, 1)
        if value > 0 and len(word) >= min_length:
            scored.append((word, value))

    scored.sort(key=lambda kv: kv[1], reverse=True)
    return [word for word, _ in scored[:limit]]


def build_result(document: Document,
                 ratings: Sequence[Rating],
                 doc_stats: TermStats,
                 bucket: BucketStats,
                 profile: LanguageProfile,
                 config: ReferatorConfig) -> ReferateResult:
    referate = generate_referate(ratings, config.summary_sentences)
    keywords = extract_keywords(referate, doc_stats, bucket, profile,
                                limit=config.max_keywords,
                                min_length=config.min_keyword_length)
    return ReferateResult(referate=referate, keywords=keywords,
                          document=document.text, language=document.language)


def empty_result(document: Document) -> ReferateResult:
    return ReferateResult(referate="", keywords=[], document=document.text, language=document.language)


def referate_bucket(documents: Sequence[Document],
                    bucket: BucketStats,
                    profile: LanguageProfile,
                    rate: RateFn,
                    config: ReferatorConfig) -> List[ReferateResult]:
    """
    Referate every document of one bucket with the given rating function.
    A failing document yields an empty result; configuration errors propagate.
    """
    results: List[ReferateResult] = []
    for document, doc_stats in zip(documents, bucket.documents):
        if doc_stats.tf_max is None:
            # nothing recognizable to rate or to extract keywords from
            results.append(empty_result(document))
            continue
        try:
            sentences = split_sentences(document.text, profile)
            ratings = rate(sentences, doc_stats)
            results.append(build_result(document, ratings, doc_stats, bucket, profile, config))
        except ReferatorError:
            raise
        except Exception:
            logger.exception("Failed to referate document #%d", document.index)
            results.append(empty_result(document))
    return results


def in_input_order(buckets: Mapping[Language, Sequence[Document]],
                   results: Mapping[Language, Sequence[ReferateResult]]) -> List[ReferateResult]:
    indexed: Dict[int, ReferateResult] = {}
    for language, documents in buckets.items():
        for document, result in zip(documents, results[language]):
            indexed[document.index] = result
    return [indexed[i] for i in sorted(indexed)]

