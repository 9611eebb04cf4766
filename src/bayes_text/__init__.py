"""bayes-text -- naive Bayes text classification with incremental training."""

__version__ = "0.1.0"

from .classifier import BayesClassifier, ClassificationResult
from .errors import (
    BayesTextError,
    CategoryExistsError,
    CategoryNotFoundError,
    CorruptModelError,
    InvalidArgumentError,
)
from .stemmer import Stemmer, identity_stem, porter_stem
from .tokenizer import SKIP_WORDS, Tokenizer, tokenize

__all__ = [
    # Core
    "BayesClassifier",
    "ClassificationResult",
    # Tokenization
    "Tokenizer",
    "tokenize",
    "SKIP_WORDS",
    "Stemmer",
    "porter_stem",
    "identity_stem",
    # Errors
    "BayesTextError",
    "InvalidArgumentError",
    "CategoryNotFoundError",
    "CategoryExistsError",
    "CorruptModelError",
]
