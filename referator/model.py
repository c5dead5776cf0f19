from __future__ import annotations
import json
import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import torch
from torch import nn
from torch.utils.data import DataLoader, TensorDataset

from .config import ReferatorConfig
from .datatypes import BucketStats, Document, Language, Rating, ReferateResult, Sentence, TermStats
from .errors import DictionaryMismatchError, ModelNotTrainedError, TrainingError
from .extraction import in_input_order, referate_bucket
from .features import build_dictionary, feature_matrix, feature_vector, feature_width
from .preprocessing import LanguageProfile, resolve_profile, split_sentences
from .scoring import rate_sentence
from .statistics import compute_bucket_stats

logger = logging.getLogger(__name__)

MODEL_FILE = "model.pt"
DICTIONARY_FILE = "dictionary.json"


class ModelState(str, Enum):
    UNTRAINED = "untrained"
    TRAINING = "training"
    TRAINED = "trained"
    LOADED = "loaded"


def build_network(width: int, hidden_units: int = 32) -> nn.Sequential:
    # two dense layers, linear activations
    return nn.Sequential(
        nn.Linear(width, hidden_units),
        nn.Linear(hidden_units, 1),
    )


class NeuralReferator:
    """
    Referator whose sentence ratings come from a small regression network
    trained to reproduce `rate_sentence` from feature vectors.

    The instance moves UNTRAINED -> TRAINING -> TRAINED, or UNTRAINED -> LOADED
    through `load`. A failed load puts it back to UNTRAINED and
    `needs_training` tells the caller to train again.
    """

    def __init__(self,
                 config: Optional[ReferatorConfig] = None,
                 profiles: Optional[Mapping[Language, LanguageProfile]] = None):
        self.config = config or ReferatorConfig()
        self.profiles = profiles
        self.dictionary: Tuple[str, ...] = ()
        self.network: Optional[nn.Module] = None
        self.width: Optional[int] = None
        self.state = ModelState.UNTRAINED
        self._lock = threading.Lock()

    @property
    def needs_training(self) -> bool:
        return self.network is None

    def _reset(self) -> None:
        self.dictionary = ()
        self.network = None
        self.width = None
        self.state = ModelState.UNTRAINED

    def _bucket_stats(self, buckets: Mapping[Language, Sequence[Document]]) -> Dict[Language, BucketStats]:
        return {
            language: compute_bucket_stats([d.text for d in documents],
                                           resolve_profile(language, self.profiles),
                                           language,
                                           workers=self.config.workers)
            for language, documents in buckets.items()
        }

    # ---- training ----

    def _examples(self,
                  buckets: Mapping[Language, Sequence[Document]],
                  stats: Mapping[Language, BucketStats],
                  dictionary: Sequence[str]) -> Tuple[List[np.ndarray], List[float]]:
        vectors: List[np.ndarray] = []
        labels: List[float] = []
        for language, documents in buckets.items():
            profile = resolve_profile(language, self.profiles)
            bucket = stats[language]
            for document, doc_stats in zip(documents, bucket.documents):
                if doc_stats.tf_max is None:
                    continue
                for sentence in split_sentences(document.text, profile):
                    sentence_tf = sentence.term_frequency()
                    vectors.append(feature_vector(sentence_tf, doc_stats, bucket, dictionary))
                    labels.append(rate_sentence(sentence_tf, doc_stats, bucket))
        return vectors, labels

    def _fit(self, network: nn.Module, x: np.ndarray, y: np.ndarray) -> float:
        cfg = self.config
        xs = torch.from_numpy(x)
        ys = torch.from_numpy(y).unsqueeze(1)
        generator = torch.Generator().manual_seed(cfg.seed)
        loader = DataLoader(TensorDataset(xs, ys), batch_size=cfg.batch_size, shuffle=True, generator=generator)
        optimizer = torch.optim.Adam(network.parameters(), lr=cfg.learning_rate)
        loss_fn = nn.MSELoss()

        network.train()
        epoch_loss = float("nan")
        for epoch in range(cfg.epochs):
            total = 0.0
            for batch_x, batch_y in loader:
                optimizer.zero_grad()
                loss = loss_fn(network(batch_x), batch_y)
                loss.backward()
                optimizer.step()
                total += loss.item() * len(batch_x)
            epoch_loss = total / len(xs)
            logger.debug("Epoch %d/%d: loss=%.6f", epoch + 1, cfg.epochs, epoch_loss)
        network.eval()
        return epoch_loss

    def train(self, buckets: Mapping[Language, Sequence[Document]]) -> float:
        """
        Build the dictionary and fit the network on every sentence of `buckets`,
        labelled with its closed-form rating. Returns the last epoch's loss.

        If training fails, a previously trained or loaded network is kept
        together with its dictionary and state.
        """
        with self._lock:
            previous = self.state
            self.state = ModelState.TRAINING
            try:
                stats = self._bucket_stats(buckets)
                dictionary = build_dictionary(stats.values())
                vectors, labels = self._examples(buckets, stats, dictionary)
                if not vectors:
                    raise TrainingError("Training corpus contains no sentences")

                width = feature_width(dictionary)
                logger.info("Training on %d sentences, dictionary of %d stems (input width %d)",
                            len(vectors), len(dictionary), width)
                torch.manual_seed(self.config.seed)
                network = build_network(width, self.config.hidden_units)
                loss = self._fit(network,
                                 feature_matrix(vectors, width),
                                 np.asarray(labels, dtype=np.float32))
            except Exception:
                if self.network is None:
                    self._reset()
                else:
                    self.state = previous
                raise

            self.dictionary = dictionary
            self.network = network
            self.width = width
            self.state = ModelState.TRAINED
            logger.info("Training finished, final loss %.6f", loss)
            return loss

    # ---- inference ----

    @staticmethod
    def _predict(network: nn.Module, width: int, vectors: np.ndarray) -> np.ndarray:
        matrix = np.atleast_2d(np.asarray(vectors, dtype=np.float32))
        if matrix.shape[1] != width:
            raise DictionaryMismatchError(width, matrix.shape[1])
        with torch.no_grad():
            return network(torch.from_numpy(matrix)).squeeze(1).numpy()

    def predict(self, vectors: np.ndarray) -> np.ndarray:
        """Predicted ratings for a batch of feature vectors."""
        with self._lock:
            network, width = self.network, self.width
        if network is None:
            raise ModelNotTrainedError("No trained model; call train() or load() first")
        return self._predict(network, width, vectors)

    def referate(self, buckets: Mapping[Language, Sequence[Document]]) -> List[ReferateResult]:
        with self._lock:
            network, width, dictionary = self.network, self.width, self.dictionary
        if network is None:
            raise ModelNotTrainedError("No trained model; call train() or load() first")

        stats = self._bucket_stats(buckets)
        results = {}
        for language, documents in buckets.items():
            bucket = stats[language]

            def rate(sentences: List[Sentence], doc_stats: TermStats, bucket: BucketStats = bucket) -> List[Rating]:
                if not sentences:
                    return []
                vectors = [feature_vector(s.term_frequency(), doc_stats, bucket, dictionary) for s in sentences]
                scores = self._predict(network, width, feature_matrix(vectors, width))
                return [Rating(position=s.position, score=float(v), sentence=s.text)
                        for s, v in zip(sentences, scores)]

            results[language] = referate_bucket(documents, bucket, resolve_profile(language, self.profiles),
                                                rate, self.config)
        return in_input_order(buckets, results)

    # ---- persistence ----

    def model_path(self, model_id: Optional[str] = None) -> Path:
        return Path(self.config.model_dir) / (model_id or self.config.model_id)

    def save(self, model_id: Optional[str] = None) -> Path:
        with self._lock:
            network, width, dictionary = self.network, self.width, self.dictionary
        if network is None:
            raise ModelNotTrainedError("Nothing to save, the model is not trained")

        path = self.model_path(model_id)
        path.mkdir(parents=True, exist_ok=True)
        torch.save({
            "width": width,
            "hidden_units": self.config.hidden_units,
            "state_dict": network.state_dict(),
        }, path / MODEL_FILE)
        (path / DICTIONARY_FILE).write_text(json.dumps(list(dictionary), ensure_ascii=False, indent=2),
                                            encoding="utf-8")
        logger.info("Saved model to %s", path)
        return path

    def load(self, model_id: Optional[str] = None) -> bool:
        """
        Restore the network and dictionary saved under `model_id`. Returns False
        and leaves the instance UNTRAINED if anything is missing or inconsistent.
        """
        path = self.model_path(model_id)
        try:
            checkpoint = torch.load(path / MODEL_FILE, map_location="cpu", weights_only=True)
            dictionary = json.loads((path / DICTIONARY_FILE).read_text(encoding="utf-8"))
            if not isinstance(dictionary, list) or not all(isinstance(s, str) for s in dictionary):
                raise ValueError("dictionary must be a list of stems")
            if dictionary != sorted(set(dictionary)):
                raise ValueError("dictionary must be sorted and unique")
            width = int(checkpoint["width"])
            if width != feature_width(dictionary):
                raise DictionaryMismatchError(width, feature_width(dictionary))
            network = build_network(width, int(checkpoint["hidden_units"]))
            network.load_state_dict(checkpoint["state_dict"])
            network.eval()
        except Exception as e:
            logger.warning("Could not load model from %s, retraining required: %s", path, e)
            with self._lock:
                self._reset()
            return False

        with self._lock:
            self.dictionary = tuple(dictionary)
            self.network = network
            self.width = width
            self.state = ModelState.LOADED
        logger.info("Loaded model from %s (%d dictionary stems)", path, len(dictionary))
        return True
