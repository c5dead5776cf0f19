from __future__ import annotations
import logging
from typing import Iterable, List, Mapping, Optional

from .config import ReferatorConfig
from .corpus import load_corpus
from .datatypes import Language, ReferateResult
from .errors import TrainingError
from .language import group_by_language
from .model import NeuralReferator
from .preprocessing import LanguageProfile
from .scoring import SentenceExtraction

logger = logging.getLogger(__name__)


def referate_statistical(texts: Iterable[str],
                         config: Optional[ReferatorConfig] = None,
                         profiles: Optional[Mapping[Language, LanguageProfile]] = None,
                         detector=None) -> List[ReferateResult]:
    # Pipeline glue
    buckets = group_by_language(texts, detector)
    return SentenceExtraction(config, profiles).referate(buckets)


def load_or_train(config: Optional[ReferatorConfig] = None,
                  profiles: Optional[Mapping[Language, LanguageProfile]] = None,
                  detector=None) -> NeuralReferator:
    """
    Load the persisted model `config.model_id`; when that is not possible,
    train a fresh one on `config.corpus_dir` and persist it.
    """
    config = config or ReferatorConfig()
    referator = NeuralReferator(config, profiles)
    if referator.load(config.model_id):
        return referator

    texts = load_corpus(config.corpus_dir)
    if not texts:
        raise TrainingError(f"No training texts found in {config.corpus_dir}")
    logger.info("Training model %r on %d texts", config.model_id, len(texts))
    referator.train(group_by_language(texts, detector))
    referator.save(config.model_id)
    return referator


def referate_neural(texts: Iterable[str],
                    config: Optional[ReferatorConfig] = None,
                    profiles: Optional[Mapping[Language, LanguageProfile]] = None,
                    referator: Optional[NeuralReferator] = None,
                    detector=None) -> List[ReferateResult]:
    referator = referator or load_or_train(config, profiles, detector)
    return referator.referate(group_by_language(texts, detector))
