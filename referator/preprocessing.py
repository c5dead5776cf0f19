from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import FrozenSet, Iterable, List, Mapping, Optional, Pattern

import nltk
import razdel
from nltk.stem import PorterStemmer, SnowballStemmer

from .datatypes import Language, Sentence

logger = logging.getLogger(__name__)

RE_RUSSIAN_WORD = re.compile(r"[а-яА-ЯёЁ]+")
RE_ENGLISH_WORD = re.compile(r"[a-zA-Z]+")

NLTK_STOPWORDS = {
    Language.ENGLISH: "english",
    Language.RUSSIAN: "russian",
}


def ensure_nltk_data(resource: str = "corpora/stopwords", package: str = "stopwords") -> None:
    try:
        nltk.data.find(resource)
    except LookupError:
        logger.info("NLTK resource %s not found, downloading '%s'", resource, package)
        if not nltk.download(package, quiet=True):
            raise LookupError(f"Could not download NLTK package '{package}'")


def load_stopwords(language: Language) -> FrozenSet[str]:
    ensure_nltk_data()
    from nltk.corpus import stopwords
    return frozenset(w.lower() for w in stopwords.words(NLTK_STOPWORDS[language]))


def make_stemmer(language: Language):
    if language == Language.RUSSIAN:
        return SnowballStemmer("russian")
    return PorterStemmer()


@dataclass(frozen=True)
class LanguageProfile:
    """Tokenizer pattern, stopword set and stemmer for one language."""
    language: Language
    pattern: Pattern[str]
    stopwords: FrozenSet[str]
    stemmer: object

    @classmethod
    def build(cls, language: Language, stopwords: Optional[Iterable[str]] = None) -> "LanguageProfile":
        pattern = RE_RUSSIAN_WORD if language == Language.RUSSIAN else RE_ENGLISH_WORD
        if stopwords is None:
            stop = load_stopwords(language)
        else:
            stop = frozenset(w.lower() for w in stopwords)
        return cls(language=language, pattern=pattern, stopwords=stop, stemmer=make_stemmer(language))

    def tokenize(self, text: str) -> List[str]:
        return self.pattern.findall(text)

    def remove_stopwords(self, tokens: Iterable[str]) -> List[str]:
        # surface tokens are kept; the comparison ignores case
        return [t for t in tokens if t.lower() not in self.stopwords]

    def stem(self, token: str) -> str:
        return self.stemmer.stem(token)

    def significant_tokens(self, text: str) -> List[str]:
        return self.remove_stopwords(self.tokenize(text))

    def stems(self, text: str) -> List[str]:
        return [self.stem(t) for t in self.significant_tokens(text)]


@lru_cache(maxsize=None)
def get_profile(language: Language) -> LanguageProfile:
    return LanguageProfile.build(language)


def split_sentences(text: str, profile: LanguageProfile) -> List[Sentence]:
    """
    Split `text` into sentences. Each sentence keeps the text up to the start
    of the next one, and the first one starts at offset 0, so joining any
    ordered subset never loses the original separators.
    """
    if not text or not text.strip():
        return []
    starts = [s.start for s in razdel.sentenize(text)]
    starts[0] = 0
    sentences: List[Sentence] = []
    for i, start in enumerate(starts):
        end = starts[i + 1] if i + 1 < len(starts) else len(text)
        chunk = text[start:end]
        sentences.append(Sentence(position=i, text=chunk, stems=profile.stems(chunk)))
    return sentences


def resolve_profile(language: Language,
                    profiles: Optional[Mapping[Language, LanguageProfile]] = None) -> LanguageProfile:
    """Profile override from `profiles` if present, otherwise the shared default."""
    if profiles and language in profiles:
        return profiles[language]
    return get_profile(language)
