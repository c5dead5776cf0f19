from __future__ import annotations
import math
from typing import Dict, List, Mapping, Optional, Sequence

from .config import ReferatorConfig
from .datatypes import BucketStats, Document, Language, Rating, ReferateResult, Sentence, TermStats
from .extraction import in_input_order, referate_bucket
from .preprocessing import LanguageProfile, resolve_profile, split_sentences
from .statistics import compute_bucket_stats


def rate_sentence(sentence_tf: Mapping[str, int], doc_stats: TermStats, bucket: BucketStats) -> float:
    """
    Closed-form sentence importance:

        sum over stems s:  stf(s) * 0.5 * (1 + tf(s) / tf_max) * ln(N / df(s))

    df defaults to 1 for unseen stems. A document without recognized tokens
    has no tf_max and all of its sentences rate 0.
    """
    if not doc_stats.tf_max:
        return 0.0
    n = bucket.size
    rating = 0.0
    for stem, count in sentence_tf.items():
        rating += (count * 0.5
                   * (1.0 + doc_stats.tf.get(stem, 0) / doc_stats.tf_max)
                   * math.log(n / bucket.df.get(stem, 1)))
    return rating


def rate_document(sentences: Sequence[Sentence], doc_stats: TermStats, bucket: BucketStats) -> List[Rating]:
    return [
        Rating(position=s.position,
               score=rate_sentence(s.term_frequency(), doc_stats, bucket),
               sentence=s.text)
        for s in sentences
    ]


class SentenceExtraction:
    """Statistical referator: ranks sentences with `rate_sentence`."""

    def __init__(self,
                 config: Optional[ReferatorConfig] = None,
                 profiles: Optional[Mapping[Language, LanguageProfile]] = None):
        self.config = config or ReferatorConfig()
        self.profiles = profiles

    def bucket_stats(self, buckets: Mapping[Language, Sequence[Document]]) -> Dict[Language, BucketStats]:
        return {
            language: compute_bucket_stats([d.text for d in documents],
                                           resolve_profile(language, self.profiles),
                                           language,
                                           workers=self.config.workers)
            for language, documents in buckets.items()
        }

    def ratings(self, buckets: Mapping[Language, Sequence[Document]]) -> Dict[int, List[Rating]]:
        """Per-sentence ratings keyed by document index."""
        stats = self.bucket_stats(buckets)
        out: Dict[int, List[Rating]] = {}
        for language, documents in buckets.items():
            profile = resolve_profile(language, self.profiles)
            bucket = stats[language]
            for document, doc_stats in zip(documents, bucket.documents):
                out[document.index] = rate_document(split_sentences(document.text, profile), doc_stats, bucket)
        return out

    def referate(self, buckets: Mapping[Language, Sequence[Document]]) -> List[ReferateResult]:
        stats = self.bucket_stats(buckets)
        results = {}
        for language, documents in buckets.items():
            bucket = stats[language]
            results[language] = referate_bucket(
                documents, bucket, resolve_profile(language, self.profiles),
                lambda sentences, doc_stats, bucket=bucket: rate_document(sentences, doc_stats, bucket),
                self.config,
            )
        return in_input_order(buckets, results)
