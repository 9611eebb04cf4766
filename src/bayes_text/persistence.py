"""JSON persistence for :class:`~bayes_text.classifier.BayesClassifier`.

The on-disk format is a versioned, explicit schema::

    {
      "format": "bayes-text-model",
      "version": 1,
      "tokenizer": {"keep_empty_symbols": false},
      "total_words": 7,
      "categories": [
        {"name": "x", "documents": 1, "words": 4, "features": {"appl": 2, ...}},
        ...
      ]
    }

Categories are stored as a list so their order, which breaks ties during
classification, survives the round trip. Loading validates every field
and raises :class:`~bayes_text.errors.CorruptModelError` rather than
returning a half-built model.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import IO, Any, Optional

from .classifier import BayesClassifier
from .errors import CorruptModelError, InvalidArgumentError
from .tokenizer import Tokenizer

logger = logging.getLogger(__name__)

FORMAT_NAME = "bayes-text-model"
FORMAT_VERSION = 1


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def model_to_dict(model: BayesClassifier) -> dict:
    """Serialize ``model`` to a JSON-compatible dictionary."""
    return {
        "format": FORMAT_NAME,
        "version": FORMAT_VERSION,
        "tokenizer": model.tokenizer.to_dict(),
        "total_words": model.total_words,
        "categories": [
            {
                "name": name,
                "documents": model.document_count(name),
                "words": model.word_count(name),
                "features": model.features(name),
            }
            for name in model.categories
        ],
    }


def dump(model: BayesClassifier, target: str | Path | IO[str]) -> None:
    """Write ``model`` as JSON to a path or a writable text stream.

    Paths are written through a temporary file in the same directory and
    moved into place, so an interrupted save leaves any previous file
    untouched.
    """
    if target is None:
        raise InvalidArgumentError("Save target must not be None")

    data = model_to_dict(model)

    if hasattr(target, "write"):
        json.dump(data, target, indent=2, ensure_ascii=False)
        return

    path = Path(target)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.debug("Saved model with %d categories to %s", len(data["categories"]), path)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _count(value: Any, what: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise CorruptModelError(f"{what} must be a non-negative integer, got {value!r}")
    return value


def _field(data: dict, key: str, what: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise CorruptModelError(f"{what} is missing field '{key}'") from None


def _decode_category(entry: Any, index: int) -> tuple[str, int, int, dict[str, int]]:
    what = f"categories[{index}]"
    if not isinstance(entry, dict):
        raise CorruptModelError(f"{what} must be an object")

    name = _field(entry, "name", what)
    if not isinstance(name, str) or not name.strip() or name != name.lower():
        raise CorruptModelError(f"{what} has invalid name {name!r}")

    documents = _count(_field(entry, "documents", what), f"{what}.documents")
    words = _count(_field(entry, "words", what), f"{what}.words")

    raw_features = _field(entry, "features", what)
    if not isinstance(raw_features, dict):
        raise CorruptModelError(f"{what}.features must be an object")

    features: dict[str, int] = {}
    for feature, count in raw_features.items():
        count = _count(count, f"{what}.features[{feature!r}]")
        if count == 0:
            raise CorruptModelError(f"{what}.features[{feature!r}] must be positive")
        features[feature] = count

    if sum(features.values()) != words:
        raise CorruptModelError(
            f"{what}.words ({words}) does not match its feature counts "
            f"({sum(features.values())})"
        )

    return name, documents, words, features


def model_from_dict(
    data: Any,
    tokenizer: Optional[Tokenizer] = None,
) -> BayesClassifier:
    """Rebuild a model from :func:`model_to_dict` output.

    Args:
        data: Decoded JSON payload.
        tokenizer: Tokenizer to attach. Defaults to one built from the
            persisted options with the Porter stemmer.

    Raises:
        CorruptModelError: If ``data`` is not a well-formed model.
    """
    if not isinstance(data, dict):
        raise CorruptModelError("Model payload must be a JSON object")
    if data.get("format") != FORMAT_NAME:
        raise CorruptModelError(f"Not a bayes-text model (format={data.get('format')!r})")

    version = data.get("version")
    if isinstance(version, bool) or version != FORMAT_VERSION:
        raise CorruptModelError(f"Unsupported model version: {version!r}")

    options = data.get("tokenizer", {})
    if not isinstance(options, dict):
        raise CorruptModelError("tokenizer must be an object")
    if tokenizer is None:
        keep_empty = options.get("keep_empty_symbols", False)
        if not isinstance(keep_empty, bool):
            raise CorruptModelError("tokenizer.keep_empty_symbols must be a boolean")
        tokenizer = Tokenizer(keep_empty_symbols=keep_empty)

    raw_categories = _field(data, "categories", "model")
    if not isinstance(raw_categories, list) or not raw_categories:
        raise CorruptModelError("categories must be a non-empty list")

    categories = [_decode_category(entry, i) for i, entry in enumerate(raw_categories)]

    names = [name for name, _, _, _ in categories]
    if len(set(names)) != len(names):
        raise CorruptModelError("categories contains duplicate names")

    total_words = _count(_field(data, "total_words", "model"), "total_words")
    category_words = sum(words for _, _, words, _ in categories)
    if total_words != category_words:
        raise CorruptModelError(
            f"total_words ({total_words}) does not match category word counts "
            f"({category_words})"
        )

    return BayesClassifier._restore(categories, total_words, tokenizer)


def load(
    source: str | Path | IO[str],
    tokenizer: Optional[Tokenizer] = None,
) -> BayesClassifier:
    """Load a model from a path or a readable text stream.

    Raises:
        FileNotFoundError: If ``source`` is a path that does not exist.
        CorruptModelError: If the content is not a well-formed model.
    """
    if source is None:
        raise InvalidArgumentError("Load source must not be None")

    try:
        if hasattr(source, "read"):
            data = json.load(source)
        else:
            with open(source, "r", encoding="utf-8") as f:
                data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise CorruptModelError(f"Cannot decode model: {exc}") from exc

    model = model_from_dict(data, tokenizer=tokenizer)
    logger.debug("Loaded model with %d categories", len(model.categories))
    return model
