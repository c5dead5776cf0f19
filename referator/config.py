from __future__ import annotations
import os
from dataclasses import dataclass, fields

from dotenv import load_dotenv

ENV_PREFIX = "REFERATOR_"


@dataclass
class ReferatorConfig:
    # selection
    summary_sentences: int = 10
    max_keywords: int = 20
    min_keyword_length: int = 3  # keywords must be longer than 2 characters

    # learned scorer
    hidden_units: int = 32
    epochs: int = 100
    batch_size: int = 32
    learning_rate: float = 1e-3
    seed: int = 0

    # statistics
    workers: int = 1

    # persistence and training corpus
    model_dir: str = "models"
    model_id: str = "nn_model"
    corpus_dir: str = "toTrain"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "ReferatorConfig":
        """
        Build a config from REFERATOR_* environment variables, e.g.
        REFERATOR_EPOCHS=200 or REFERATOR_MODEL_DIR=/var/lib/referator.
        Values from a local .env file are loaded first when `dotenv` is set.
        """
        if dotenv:
            load_dotenv()
        overrides = {}
        for f in fields(cls):
            raw = os.getenv(ENV_PREFIX + f.name.upper())
            if raw is None or raw == "":
                continue
            kind = type(f.default)
            try:
                overrides[f.name] = kind(raw)
            except ValueError as e:
                raise ValueError(f"Invalid value for {ENV_PREFIX}{f.name.upper()}: {raw!r}") from e
        return cls(**overrides)
