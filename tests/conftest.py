import re
from types import SimpleNamespace

import pytest
from lingua import Language as LinguaLanguage

from referator import preprocessing
from referator.datatypes import Language
from referator.preprocessing import LanguageProfile

EN_STOPWORDS = {"the", "a", "an", "and", "or", "of", "to", "in", "on", "is", "are", "was", "it", "this", "that", "with", "for", "by", "as", "at"}
RU_STOPWORDS = {"и", "в", "на", "не", "что", "это", "с", "по", "как", "а", "но", "к", "у", "из", "за", "о"}

ENGLISH_TEXT = (
    "Neural networks learn representations from data. "
    "Training a network requires data and a loss function. "
    "The loss function measures prediction errors on training data. "
    "Gradient descent updates network weights to reduce the loss. "
    "Cats sleep most of the day."
)

ENGLISH_TEXT_2 = (
    "Rivers carry water from mountains to the sea. "
    "Mountain snow melts in spring and feeds the rivers. "
    "Fish swim upstream in rivers every spring."
)

RUSSIAN_TEXT = (
    "Нейронные сети обучаются на данных. "
    "Обучение сети требует данных и функции потерь. "
    "Функция потерь измеряет ошибки предсказания. "
    "Кошки спят большую часть дня."
)

RUSSIAN_TEXT_2 = (
    "Реки несут воду с гор к морю. "
    "Весной снег в горах тает и питает реки."
)


class ScriptDetector:
    """Confidence values from the share of Cyrillic and Latin letters."""

    def compute_language_confidence_values(self, text):
        cyrillic = len(re.findall(r"[а-яА-ЯёЁ]", text))
        latin = len(re.findall(r"[a-zA-Z]", text))
        total = cyrillic + latin
        if not total:
            return [SimpleNamespace(language=LinguaLanguage.ENGLISH, value=0.0),
                    SimpleNamespace(language=LinguaLanguage.RUSSIAN, value=0.0)]
        return [SimpleNamespace(language=LinguaLanguage.RUSSIAN, value=cyrillic / total),
                SimpleNamespace(language=LinguaLanguage.ENGLISH, value=latin / total)]


@pytest.fixture
def detector():
    return ScriptDetector()


@pytest.fixture
def english_profile():
    return LanguageProfile.build(Language.ENGLISH, stopwords=EN_STOPWORDS)


@pytest.fixture
def russian_profile():
    return LanguageProfile.build(Language.RUSSIAN, stopwords=RU_STOPWORDS)


@pytest.fixture
def profiles(english_profile, russian_profile):
    return {Language.ENGLISH: english_profile, Language.RUSSIAN: russian_profile}


@pytest.fixture
def offline_stopwords(monkeypatch):
    """Default profiles built from the test stopword sets instead of the NLTK corpus."""
    sets = {Language.ENGLISH: frozenset(EN_STOPWORDS), Language.RUSSIAN: frozenset(RU_STOPWORDS)}
    monkeypatch.setattr(preprocessing, "load_stopwords", lambda language: sets[language])
    preprocessing.get_profile.cache_clear()
    yield
    preprocessing.get_profile.cache_clear()
