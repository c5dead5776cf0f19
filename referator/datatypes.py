from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np


class Language(str, Enum):
    ENGLISH = "en"
    RUSSIAN = "ru"


@dataclass(frozen=True)
class Document:
    index: int  # position in the caller's input
    text: str
    language: Language


@dataclass
class Sentence:
    position: int
    text: str
    stems: List[str] = field(default_factory=list)

    def term_frequency(self) -> Dict[str, int]:
        return dict(Counter(self.stems))


@dataclass(frozen=True)
class TermStats:
    tf: Mapping[str, int]
    tf_max: Optional[int]  # None when the document has no recognized tokens

    @classmethod
    def from_counts(cls, counts: Mapping[str, int]) -> "TermStats":
        tf_max = max(counts.values()) if counts else None
        return cls(tf=MappingProxyType(dict(counts)), tf_max=tf_max)


@dataclass(frozen=True)
class BucketStats:
    language: Language
    size: int  # N, documents in the bucket
    documents: Tuple[TermStats, ...]
    df: Mapping[str, int]
    overall_tf: Mapping[str, int]


@dataclass
class Rating:
    position: int
    score: float
    sentence: str


@dataclass
class ReferateResult:
    referate: str
    keywords: List[str]
    document: str
    language: Language

    def to_dict(self) -> Dict[str, object]:
        return {
            "referate": self.referate,
            "keywords": list(self.keywords),
            "document": self.document,
            "language": self.language.value,
        }


FeatureVector = np.ndarray  # float32, length 3*|dictionary| + 2
