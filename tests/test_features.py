"""
Tests for dictionary construction and feature vectors
"""

from types import MappingProxyType

import numpy as np
import pytest

from referator.datatypes import BucketStats, Language, TermStats
from referator.features import (build_dictionary, feature_vector, feature_width,
                                significant_stems, stem_weights)
from referator.statistics import compute_bucket_stats

from conftest import ENGLISH_TEXT, ENGLISH_TEXT_2, RUSSIAN_TEXT, RUSSIAN_TEXT_2


def _bucket(language, documents, df, overall_tf):
    return BucketStats(language=language, size=len(documents), documents=tuple(documents),
                       df=MappingProxyType(df), overall_tf=MappingProxyType(overall_tf))


def test_stem_weights_and_threshold():
    docs = [TermStats.from_counts({"a": 4, "b": 1}), TermStats.from_counts({"a": 2, "c": 1})]
    bucket = _bucket(Language.ENGLISH, docs, {"a": 2, "b": 1, "c": 1}, {"a": 6, "b": 1, "c": 1})

    # a: 6*2/2 = 6, b: 1*2/1 = 2, c: 2 ; mean 10/3
    assert stem_weights(bucket) == {"a": 6.0, "b": 2.0, "c": 2.0}
    assert significant_stems(bucket) == ["a"]


def test_weight_equal_to_mean_is_not_significant():
    docs = [TermStats.from_counts({"a": 1, "b": 1})]
    bucket = _bucket(Language.ENGLISH, docs, {"a": 1, "b": 1}, {"a": 1, "b": 1})
    assert significant_stems(bucket) == []


def test_empty_bucket_has_no_significant_stems():
    bucket = _bucket(Language.ENGLISH, [TermStats.from_counts({})], {}, {})
    assert significant_stems(bucket) == []
    assert build_dictionary([bucket]) == ()


def test_dictionary_is_sorted_union_and_deterministic(english_profile, russian_profile):
    def run():
        en = compute_bucket_stats([ENGLISH_TEXT, ENGLISH_TEXT_2], english_profile, Language.ENGLISH)
        ru = compute_bucket_stats([RUSSIAN_TEXT, RUSSIAN_TEXT_2], russian_profile, Language.RUSSIAN)
        return build_dictionary([en, ru]), en, ru

    dictionary, en, ru = run()
    assert dictionary == run()[0]
    assert list(dictionary) == sorted(set(dictionary))
    assert set(dictionary) == set(significant_stems(en)) | set(significant_stems(ru))
    assert any("Ѐ" <= stem[0] <= "ӿ" for stem in dictionary)


def test_feature_vector_layout():
    doc = TermStats.from_counts({"a": 3, "b": 1})
    bucket = _bucket(Language.ENGLISH, [doc, TermStats.from_counts({"a": 1})],
                     {"a": 2, "b": 1}, {"a": 4, "b": 1})
    dictionary = ("a", "b", "z")

    vector = feature_vector({"a": 2}, doc, bucket, dictionary)

    assert vector.dtype == np.float32
    assert len(vector) == feature_width(dictionary) == 11
    np.testing.assert_array_equal(vector, [2, 0, 0, 3, 1, 0, 2, 1, 0, 3, 2])


def test_feature_vector_without_tf_max():
    empty = TermStats.from_counts({})
    bucket = _bucket(Language.ENGLISH, [empty], {}, {})
    vector = feature_vector({}, empty, bucket, ("a",))
    np.testing.assert_array_equal(vector, [0, 0, 0, 0, 1])


@pytest.mark.parametrize("size", [0, 1, 50])
def test_feature_width(size):
    dictionary = tuple(f"s{i}" for i in range(size))
    doc = TermStats.from_counts({"s0": 1})
    bucket = _bucket(Language.ENGLISH, [doc], {"s0": 1}, {"s0": 1})
    assert len(feature_vector({}, doc, bucket, dictionary)) == feature_width(dictionary) == 3 * size + 2
