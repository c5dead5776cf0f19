class ReferatorError(Exception):
    """Base class for configuration and model-state failures."""


class ModelNotTrainedError(ReferatorError):
    """Inference was requested but no trained or persisted model is available."""


class DictionaryMismatchError(ReferatorError):
    """A feature vector does not match the input width of the loaded model."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"feature vector has length {actual}, model expects {expected}")
        self.expected = expected
        self.actual = actual


class TrainingError(ReferatorError):
    """The training corpus cannot produce a model."""
