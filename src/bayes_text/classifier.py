"""Naive Bayes text classifier with incremental training.

The model keeps, per category, a table of feature counts, the number of
training events applied, and the total word-mass of the table. Training
and untraining update those tables additively; classification reads them
to compute an unnormalized joint log-likelihood per category.

Example::

    classifier = BayesClassifier(["spam", "ham"])
    classifier.train("spam", "Cheap pills, buy now!!!")
    classifier.train("ham", "Meeting moved to Thursday afternoon.")

    classifier.classify_label("buy cheap pills")   # "spam"
    classifier.classify("buy cheap pills")         # {"spam": -9.2, "ham": -13.8}

    classifier.save("model.json")
    loaded = BayesClassifier.load("model.json")
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Optional, Union

from .errors import CategoryExistsError, CategoryNotFoundError, InvalidArgumentError
from .tokenizer import Tokenizer

logger = logging.getLogger(__name__)

TextSource = Union[str, IO[str]]

# Stand-in count for features and categories never seen in training.
SMOOTHING_FLOOR = 0.1


def _normalize_category(name: Optional[str]) -> str:
    if name is None:
        raise InvalidArgumentError("Category name must not be None")
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError(f"Invalid category name: {name!r}")
    return name.lower()


def _read_text(source: Optional[TextSource]) -> str:
    """Accept raw text or a readable text stream."""
    if source is None:
        raise InvalidArgumentError("Text must not be None")
    if isinstance(source, str):
        return source
    if hasattr(source, "read"):
        return source.read()
    raise InvalidArgumentError(
        f"Expected str or readable text stream, got {type(source).__name__}"
    )


def _read_file(path: str | Path) -> str:
    if path is None:
        raise InvalidArgumentError("File path must not be None")
    return Path(path).read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Classification Result
# ---------------------------------------------------------------------------

@dataclass
class ClassificationResult:
    """Outcome of classifying a single text.

    Attributes:
        label: Category with the highest score.
        scores: Unnormalized joint log-likelihood per category.
        probabilities: Scores normalized with log-sum-exp; for display
            only, the decision is made on ``scores``.
    """

    label: str
    scores: dict[str, float]
    probabilities: dict[str, float]

    @property
    def confidence(self) -> float:
        return self.probabilities[self.label]

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "confidence": round(self.confidence, 4),
            "scores": {k: round(v, 4) for k, v in self.scores.items()},
            "probabilities": {
                k: round(v, 4) for k, v in sorted(
                    self.probabilities.items(),
                    key=lambda x: x[1],
                    reverse=True,
                )
            },
        }


def _normalize_scores(scores: dict[str, float]) -> dict[str, float]:
    """Convert log scores into probabilities summing to one."""
    finite = [s for s in scores.values() if math.isfinite(s)]
    if not finite:
        return {cls: 1.0 / len(scores) for cls in scores}

    max_score = max(finite)
    exp_scores = {
        cls: math.exp(s - max_score) if math.isfinite(s) else 0.0
        for cls, s in scores.items()
    }
    total = sum(exp_scores.values())
    return {cls: score / total for cls, score in exp_scores.items()}


# ---------------------------------------------------------------------------
# Bayes Classifier
# ---------------------------------------------------------------------------

class BayesClassifier:
    """Multinomial naive Bayes over per-category feature counts.

    Categories are case-insensitive and kept in insertion order, which is
    also the order used to break ties between equal scores.

    The model is not thread-safe; guard a shared instance with a lock.

    Args:
        categories: Non-empty iterable of category names. Duplicates
            (after lowercasing) are collapsed.
        tokenizer: Tokenizer used to turn text into features.

    Raises:
        InvalidArgumentError: If ``categories`` is ``None`` or empty.
    """

    def __init__(
        self,
        categories: Iterable[str],
        tokenizer: Optional[Tokenizer] = None,
    ) -> None:
        if categories is None:
            raise InvalidArgumentError("categories must not be None")
        if isinstance(categories, str):
            categories = [categories]

        names = [_normalize_category(c) for c in categories]
        if not names:
            raise InvalidArgumentError("Must provide at least one category")

        self.tokenizer = tokenizer or Tokenizer()
        self._features: dict[str, dict[str, int]] = {}
        self._documents: dict[str, int] = {}
        self._words: dict[str, int] = {}
        self._total_words = 0

        for name in dict.fromkeys(names):
            self._init_category(name)

    def _init_category(self, name: str) -> None:
        self._features[name] = {}
        self._documents[name] = 0
        self._words[name] = 0

    def _require(self, category: Optional[str]) -> str:
        name = _normalize_category(category)
        if name not in self._features:
            raise CategoryNotFoundError(name)
        return name

    # -- read-only views ---------------------------------------------------

    @property
    def categories(self) -> list[str]:
        """Category names in insertion order."""
        return list(self._features)

    @property
    def total_words(self) -> int:
        """Word-mass summed over every category."""
        return self._total_words

    @property
    def total_documents(self) -> int:
        return sum(self._documents.values())

    def document_count(self, category: str) -> int:
        return self._documents[self._require(category)]

    def word_count(self, category: str) -> int:
        return self._words[self._require(category)]

    def feature_count(self, category: str, feature: str) -> int:
        return self._features[self._require(category)].get(feature, 0)

    def features(self, category: str) -> dict[str, int]:
        """Copy of the feature table for ``category``."""
        return dict(self._features[self._require(category)])

    def __contains__(self, category: object) -> bool:
        return isinstance(category, str) and category.lower() in self._features

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BayesClassifier):
            return NotImplemented
        return (
            self.categories == other.categories
            and self._features == other._features
            and self._documents == other._documents
            and self._words == other._words
            and self._total_words == other._total_words
        )

    def __repr__(self) -> str:
        return (
            f"BayesClassifier(categories={self.categories!r}, "
            f"documents={self.total_documents}, words={self._total_words})"
        )

    # -- mutation ------------------------------------------------------------

    def add_category(self, name: str) -> None:
        """Add a new, untrained category.

        An untrained category scores every feature at the smoothing floor,
        so it can outrank sparsely trained categories on unfamiliar text.

        Raises:
            CategoryExistsError: If the category already exists.
        """
        name = _normalize_category(name)
        if name in self._features:
            raise CategoryExistsError(name)
        self._init_category(name)
        logger.debug("Added category %r", name)

    def train(self, category: str, text: TextSource) -> None:
        """Add the features of ``text`` to ``category``.

        Args:
            category: Existing category name (case-insensitive).
            text: Raw text or a readable text stream.

        Raises:
            InvalidArgumentError: If ``category`` or ``text`` is ``None``.
            CategoryNotFoundError: If ``category`` does not exist.
        """
        name = self._require(category)
        features = self.tokenizer.tokenize(_read_text(text))

        table = self._features[name]
        self._documents[name] += 1
        for feature, count in features.items():
            table[feature] = table.get(feature, 0) + count
            self._words[name] += count
            self._total_words += count

        logger.debug("Trained %r with %d distinct features", name, len(features))

    def untrain(self, category: str, text: TextSource) -> None:
        """Remove the features of ``text`` from ``category``.

        The inverse of :meth:`train`. A feature driven to zero or below is
        dropped from the table, and only the count it actually held is
        taken off the word-mass. The document count stops at zero.

        Raises:
            InvalidArgumentError: If ``category`` or ``text`` is ``None``.
            CategoryNotFoundError: If ``category`` does not exist.
        """
        name = self._require(category)
        features = self.tokenizer.tokenize(_read_text(text))

        if self._documents[name] > 0:
            self._documents[name] -= 1
        else:
            logger.warning(
                "Untraining %r, which has no training documents; "
                "document count stays at 0", name,
            )

        table = self._features[name]
        for feature, count in features.items():
            stored = table.get(feature)
            if stored is None:
                continue
            if stored - count <= 0:
                del table[feature]
                count = stored
            else:
                table[feature] = stored - count
            self._words[name] -= count
            self._total_words -= count

        logger.debug("Untrained %r with %d distinct features", name, len(features))

    def train_file(self, category: str, path: str | Path) -> None:
        """Train ``category`` with the UTF-8 contents of ``path``."""
        self.train(category, _read_file(path))

    def untrain_file(self, category: str, path: str | Path) -> None:
        """Untrain ``category`` with the UTF-8 contents of ``path``."""
        self.untrain(category, _read_file(path))

    # -- scoring -------------------------------------------------------------

    def classify(self, text: TextSource) -> dict[str, float]:
        """Score ``text`` against every category.

        Each distinct feature contributes ``ln(count / word_mass)`` once,
        regardless of how often it occurs in ``text``; unseen features
        count as 0.1. The category prior ``ln(documents / total)`` is
        added last, with 0.1 standing in for untrained categories.

        Returns:
            Dict of category name to log score, in category order. Higher
            is more probable; scores are not normalized.
        """
        features = self.tokenizer.tokenize(_read_text(text))
        total_documents = float(self.total_documents)

        scores: dict[str, float] = {}
        for name, table in self._features.items():
            word_mass = self._words[name] or 1.0

            score = 0.0
            for feature in features:
                likelihood = table.get(feature, SMOOTHING_FLOOR)
                score += math.log(likelihood / word_mass)

            if total_documents > 0:
                documents = self._documents[name] or SMOOTHING_FLOOR
                score += math.log(documents / total_documents)
            else:
                score += math.log(1.0 / len(self._features))

            scores[name] = score

        return scores

    def classify_label(self, text: TextSource) -> str:
        """Return the most probable category for ``text``."""
        scores = self.classify(text)
        return max(scores, key=scores.get)  # type: ignore[arg-type]

    def classify_result(self, text: TextSource) -> ClassificationResult:
        """Classify ``text`` and return label, scores and probabilities."""
        scores = self.classify(text)
        label = max(scores, key=scores.get)  # type: ignore[arg-type]
        return ClassificationResult(
            label=label,
            scores=scores,
            probabilities=_normalize_scores(scores),
        )

    def classify_file(self, path: str | Path) -> dict[str, float]:
        return self.classify(_read_file(path))

    def classify_label_file(self, path: str | Path) -> str:
        return self.classify_label(_read_file(path))

    def most_informative_features(
        self,
        category: str,
        top_n: int = 20,
    ) -> list[tuple[str, float]]:
        """Return the features that most favour ``category``.

        Measures how much more likely a feature is under the target
        category than on average under the others, using the same
        smoothing as :meth:`classify`.

        Args:
            category: Target category.
            top_n: Number of features to return.

        Returns:
            List of ``(feature, log_likelihood_ratio)`` tuples, sorted by
            ratio (descending).
        """
        name = self._require(category)
        others = [c for c in self._features if c != name]

        def log_prob(cat: str, feature: str) -> float:
            word_mass = self._words[cat] or 1.0
            return math.log(self._features[cat].get(feature, SMOOTHING_FLOOR) / word_mass)

        ratios: list[tuple[str, float]] = []
        for feature in self._features[name]:
            target = log_prob(name, feature)
            if others:
                target -= sum(log_prob(c, feature) for c in others) / len(others)
            ratios.append((feature, round(target, 4)))

        ratios.sort(key=lambda x: (-x[1], x[0]))
        return ratios[:top_n]

    # -- persistence -----------------------------------------------------------

    def to_dict(self) -> dict:
        """Serialize the model to a JSON-compatible dictionary."""
        from .persistence import model_to_dict

        return model_to_dict(self)

    @classmethod
    def from_dict(
        cls,
        data: dict,
        tokenizer: Optional[Tokenizer] = None,
    ) -> "BayesClassifier":
        """Rebuild a model from :meth:`to_dict` output.

        Raises:
            CorruptModelError: If ``data`` is not a well-formed model.
        """
        from .persistence import model_from_dict

        return model_from_dict(data, tokenizer=tokenizer)

    def save(self, target: str | Path | IO[str]) -> None:
        """Write the model as JSON to a path or writable text stream."""
        from .persistence import dump

        dump(self, target)

    @classmethod
    def load(
        cls,
        source: str | Path | IO[str],
        tokenizer: Optional[Tokenizer] = None,
    ) -> "BayesClassifier":
        """Load a model saved with :meth:`save`.

        Args:
            source: Path or readable text stream.
            tokenizer: Tokenizer to attach, e.g. with a custom stemmer.
                When omitted, one is built from the persisted options.

        Raises:
            CorruptModelError: If the payload is not a well-formed model.
        """
        from .persistence import load

        return load(source, tokenizer=tokenizer)

    @classmethod
    def _restore(
        cls,
        categories: list[tuple[str, int, int, dict[str, int]]],
        total_words: int,
        tokenizer: Tokenizer,
    ) -> "BayesClassifier":
        """Build a model directly from validated state."""
        model = cls([name for name, _, _, _ in categories], tokenizer=tokenizer)
        for name, documents, words, features in categories:
            model._documents[name] = documents
            model._words[name] = words
            model._features[name] = dict(features)
        model._total_words = total_words
        return model
