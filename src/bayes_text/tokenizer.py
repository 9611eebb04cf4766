"""Text tokenization into countable features.

Turns raw text into a bag of features: stemmed words plus runs of
punctuation/symbol characters. The output of :meth:`Tokenizer.tokenize`
is what the classifier trains on and scores against.

Two passes are made over the text:

- a word pass, which strips every non-word, non-space character and
  splits on single spaces; each candidate is lowercased, stemmed and kept
  only if it is not a skip word and is longer than two characters;
- a symbol pass, which blanks every word character and splits on single
  spaces; each resulting run is counted verbatim.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass

from .stemmer import Stemmer, porter_stem

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_NON_WORD_RE = re.compile(r"[^\w\s]")
_WORD_CHAR_RE = re.compile(r"\w")

# Compared against the stemmed form, hence entries such as "sinc" and "th".
SKIP_WORDS: frozenset[str] = frozenset({
    "a", "again", "all", "along", "are", "also", "an", "and", "as", "at",
    "but", "by", "came", "can", "cant", "couldnt", "did", "didn", "didnt",
    "do", "doesnt", "dont", "ever", "first", "from", "have", "her", "here",
    "him", "how", "i", "if", "in", "into", "is", "isnt", "it", "itll",
    "just", "last", "least", "like", "most", "my", "new", "no", "not", "now",
    "of", "on", "or", "should", "sinc", "so", "some", "th", "than", "this",
    "that", "the", "their", "then", "those", "to", "told", "too", "true",
    "try", "until", "url", "us", "were", "when", "whether", "while", "with",
    "within", "yes", "you", "youll",
})

MIN_WORD_LENGTH = 3


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Tokenizer:
    """Stateless text-to-features converter.

    Args:
        stemmer: Callable reducing a lowercase word to its root.
        keep_empty_symbols: Count the empty string produced by adjacent
            separators in the symbol pass. Off by default.
    """

    stemmer: Stemmer = porter_stem
    keep_empty_symbols: bool = False

    def tokenize(self, text: str) -> Counter[str]:
        """Return a mapping of feature to occurrence count for ``text``."""
        features: Counter[str] = Counter()

        for word in _NON_WORD_RE.sub("", text).split(" "):
            stemmed = self.stemmer(word.lower())
            if stemmed in SKIP_WORDS or len(stemmed) < MIN_WORD_LENGTH:
                continue
            features[stemmed] += 1

        for symbol in _WORD_CHAR_RE.sub(" ", text).split(" "):
            if not symbol and not self.keep_empty_symbols:
                continue
            features[symbol] += 1

        return features

    def to_dict(self) -> dict:
        """Serializable options (the stemmer itself is not persisted)."""
        return {"keep_empty_symbols": self.keep_empty_symbols}


_DEFAULT_TOKENIZER = Tokenizer()


def tokenize(text: str, stemmer: Stemmer | None = None) -> Counter[str]:
    """Tokenize ``text`` with the default options.

    Args:
        text: Raw text.
        stemmer: Optional replacement for the Porter stemmer.

    Returns:
        Counter of feature occurrences.
    """
    if stemmer is None:
        return _DEFAULT_TOKENIZER.tokenize(text)
    return Tokenizer(stemmer=stemmer).tokenize(text)
