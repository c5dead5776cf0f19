"""
Tests for language routing
"""

from types import SimpleNamespace

from lingua import Language as LinguaLanguage

from referator.datatypes import Language
from referator.language import detect_language, group_by_language


class FixedDetector:
    def __init__(self, **scores):
        self.scores = scores

    def compute_language_confidence_values(self, text):
        mapping = {"english": LinguaLanguage.ENGLISH, "russian": LinguaLanguage.RUSSIAN}
        return [SimpleNamespace(language=mapping[k], value=v) for k, v in self.scores.items()]


def test_no_russian_score_means_english():
    assert detect_language("text", FixedDetector(english=0.3)) == Language.ENGLISH
    assert detect_language("text", FixedDetector(english=0.3, russian=0.0)) == Language.ENGLISH


def test_no_english_score_means_russian():
    assert detect_language("text", FixedDetector(russian=0.4)) == Language.RUSSIAN


def test_higher_score_wins():
    assert detect_language("text", FixedDetector(english=0.2, russian=0.8)) == Language.RUSSIAN
    assert detect_language("text", FixedDetector(english=0.7, russian=0.3)) == Language.ENGLISH


def test_tie_goes_to_english():
    assert detect_language("text", FixedDetector(english=0.5, russian=0.5)) == Language.ENGLISH


def test_no_scores_defaults_to_english():
    assert detect_language("12345", FixedDetector()) == Language.ENGLISH


def test_lingua_detects_clear_texts():
    assert detect_language("This is a simple English sentence about the weather today.") == Language.ENGLISH
    assert detect_language("Это простое предложение на русском языке о погоде.") == Language.RUSSIAN


def test_group_by_language_keeps_insertion_order(detector):
    texts = ["First English text.", "Первый русский текст.", "Second English text.", ""]
    buckets = group_by_language(texts, detector)

    assert list(buckets) == [Language.ENGLISH, Language.RUSSIAN]
    assert [d.index for d in buckets[Language.ENGLISH]] == [0, 2, 3]
    assert [d.text for d in buckets[Language.RUSSIAN]] == ["Первый русский текст."]
    assert all(d.language == Language.ENGLISH for d in buckets[Language.ENGLISH])
