# Text analysis module
from .classifier import (
    ClassificationResult,
    TextClassifier,
    classify,
    complexity_score,
    default_classifier,
)

__all__ = [
    "ClassificationResult",
    "TextClassifier",
    "classify",
    "complexity_score",
    "default_classifier",
]
