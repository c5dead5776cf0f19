from __future__ import annotations
import logging
from functools import lru_cache
from typing import Dict, Iterable, List, Optional

from lingua import Language as LinguaLanguage
from lingua import LanguageDetectorBuilder

from .datatypes import Document, Language

logger = logging.getLogger(__name__)

LINGUA_LANGUAGES = {
    LinguaLanguage.ENGLISH: Language.ENGLISH,
    LinguaLanguage.RUSSIAN: Language.RUSSIAN,
}


@lru_cache(maxsize=1)
def default_detector():
    return LanguageDetectorBuilder.from_languages(*LINGUA_LANGUAGES).build()


def _confidences(text: str, detector) -> Dict[Language, float]:
    scores: Dict[Language, float] = {}
    for entry in detector.compute_language_confidence_values(text):
        language = LINGUA_LANGUAGES.get(entry.language)
        # a zero confidence means the detector has no opinion for that language
        if language is not None and entry.value > 0:
            scores[language] = entry.value
    return scores


def detect_language(text: str, detector=None) -> Language:
    """
    Classify `text` as English or Russian.

    Without a Russian score the text is English, without an English score it
    is Russian, with both the higher score wins (ties go to English), and with
    neither it falls back to English.
    """
    detector = detector or default_detector()
    scores = _confidences(text, detector)
    english = scores.get(Language.ENGLISH)
    russian = scores.get(Language.RUSSIAN)

    if russian is None:
        return Language.ENGLISH
    if english is None:
        return Language.RUSSIAN
    return Language.ENGLISH if english >= russian else Language.RUSSIAN


def group_by_language(texts: Iterable[str], detector=None) -> Dict[Language, List[Document]]:
    buckets: Dict[Language, List[Document]] = {}
    for index, text in enumerate(texts):
        language = detect_language(text or "", detector)
        buckets.setdefault(language, []).append(Document(index=index, text=text or "", language=language))
    logger.debug("Grouped documents: %s", {lang.value: len(docs) for lang, docs in buckets.items()})
    return buckets
