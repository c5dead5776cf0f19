from __future__ import annotations
import logging
from collections import Counter
from functools import partial
from multiprocessing import Pool
from types import MappingProxyType
from typing import Dict, List, Sequence

from .datatypes import BucketStats, Language, TermStats
from .preprocessing import LanguageProfile

logger = logging.getLogger(__name__)


def _stem_counts(text: str, profile: LanguageProfile) -> Dict[str, int]:
    return dict(Counter(profile.stems(text)))


def count_terms(text: str, profile: LanguageProfile) -> TermStats:
    """tf and tf_max of a single document."""
    return TermStats.from_counts(_stem_counts(text, profile))


def compute_bucket_stats(texts: Sequence[str],
                         profile: LanguageProfile,
                         language: Language,
                         workers: int = 1) -> BucketStats:
    """
    Term statistics for one language bucket.

    Per-document counting is independent and may run in a process pool; the
    df and overall tf merge runs afterwards in document order.
    """
    texts = list(texts)
    if workers > 1 and len(texts) > 1:
        with Pool(min(workers, len(texts))) as pool:
            counts = pool.map(partial(_stem_counts, profile=profile), texts)
        documents: List[TermStats] = [TermStats.from_counts(c) for c in counts]
    else:
        documents = [count_terms(t, profile) for t in texts]

    df: Counter = Counter()
    overall_tf: Counter = Counter()
    for stats in documents:
        df.update(stats.tf.keys())  # once per document, not per occurrence
        overall_tf.update(stats.tf)

    logger.debug("Bucket %s: %d documents, %d distinct stems", language.value, len(texts), len(df))
    return BucketStats(
        language=language,
        size=len(texts),
        documents=tuple(documents),
        df=MappingProxyType(dict(df)),
        overall_tf=MappingProxyType(dict(overall_tf)),
    )
