from __future__ import annotations
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

import numpy as np

from .datatypes import BucketStats, FeatureVector, TermStats


def stem_weights(bucket: BucketStats) -> Dict[str, float]:
    """Weight of every stem in a bucket: overall tf * N / df."""
    n = bucket.size
    return {stem: count * n / bucket.df[stem] for stem, count in bucket.overall_tf.items()}


def significant_stems(bucket: BucketStats) -> List[str]:
    """Stems whose weight is strictly above the bucket's mean weight."""
    weights = stem_weights(bucket)
    if not weights:
        return []
    average = sum(weights.values()) / len(weights)
    return [stem for stem, w in weights.items() if w > average]


def build_dictionary(buckets: Iterable[BucketStats]) -> Tuple[str, ...]:
    """
    Feature basis of the learned scorer: the sorted union of significant stems
    across all language buckets of one training run.
    """
    stems = set()
    for bucket in buckets:
        stems.update(significant_stems(bucket))
    return tuple(sorted(stems))


def feature_width(dictionary: Sequence[str]) -> int:
    return 3 * len(dictionary) + 2


def feature_vector(sentence_tf: Mapping[str, int],
                   doc_stats: TermStats,
                   bucket: BucketStats,
                   dictionary: Sequence[str]) -> FeatureVector:
    """
    [sentence tf] ++ [document tf] ++ [df] over the dictionary, followed by the
    document's tf_max (0 if it has none) and the bucket size.
    """
    values: List[float] = []
    values.extend(sentence_tf.get(stem, 0) for stem in dictionary)
    values.extend(doc_stats.tf.get(stem, 0) for stem in dictionary)
    values.extend(bucket.df.get(stem, 0) for stem in dictionary)
    values.append(doc_stats.tf_max or 0)
    values.append(bucket.size)
    return np.asarray(values, dtype=np.float32)


def feature_matrix(vectors: Sequence[FeatureVector], width: int) -> np.ndarray:
    if not vectors:
        return np.zeros((0, width), dtype=np.float32)
    return np.stack(vectors).astype(np.float32, copy=False)
