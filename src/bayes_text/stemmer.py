"""Stemming capability used by the tokenizer.

A stemmer is any callable taking a lowercase word and returning its root,
or the word unchanged when it cannot be reduced. The default is the
original Porter algorithm as implemented by ``nltk``.
"""

from __future__ import annotations

from typing import Callable

from nltk.stem.porter import PorterStemmer

Stemmer = Callable[[str], str]

_PORTER = PorterStemmer(mode=PorterStemmer.ORIGINAL_ALGORITHM)


def porter_stem(word: str) -> str:
    """Stem ``word`` with the Porter algorithm.

    Words of two characters or fewer are returned as-is, matching the
    reference algorithm.
    """
    if len(word) <= 2:
        return word
    return _PORTER.stem(word)


def identity_stem(word: str) -> str:
    """Return ``word`` unchanged."""
    return word
