from .datatypes import Language, Document, Sentence, TermStats, BucketStats, Rating, ReferateResult, FeatureVector
from .config import ReferatorConfig
from .errors import ReferatorError, ModelNotTrainedError, DictionaryMismatchError, TrainingError
from .language import detect_language, group_by_language
from .preprocessing import LanguageProfile, get_profile, split_sentences
from .statistics import count_terms, compute_bucket_stats
from .scoring import rate_sentence, rate_document, SentenceExtraction
from .features import build_dictionary, feature_vector, feature_width
from .model import ModelState, NeuralReferator
from .summarize import referate_statistical, referate_neural, load_or_train
