"""envylint: Feature Envy Detector

Flags methods whose references look more like another class than their own,
using TF-IDF vectors and cosine similarity over the project's classes.
"""

from envylint.config import Config, DetectorConfig, get_detector_config, load_config
from envylint.corpus import CorpusStateError, CorpusStatistics
from envylint.detector import (
    DEFAULT_THRESHOLD,
    EnvyDetector,
    UnknownClassError,
    detect_feature_envy,
    exceeds_margin,
)
from envylint.models import CandidateRecord, ClassContext, Context, MethodContext
from envylint.similarity import cosine_similarity
from envylint.tokens import TokenKind, extract_class_context, extract_method_context, make_token
from envylint.vectors import build_vector, idf

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "Config",
    "DetectorConfig",
    "load_config",
    "get_detector_config",
    # Data model
    "Context",
    "ClassContext",
    "MethodContext",
    "CandidateRecord",
    # Tokens
    "TokenKind",
    "make_token",
    "extract_class_context",
    "extract_method_context",
    # Scoring
    "CorpusStatistics",
    "CorpusStateError",
    "build_vector",
    "idf",
    "cosine_similarity",
    # Detection
    "DEFAULT_THRESHOLD",
    "EnvyDetector",
    "UnknownClassError",
    "detect_feature_envy",
    "exceeds_margin",
]
