# helpers.py
"""
Text helpers shared by training and inference.

The normalizer must behave identically when the vectorizer is fit and when it
is applied, so both go through `normalize` with the same `Lexicon`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import FrozenSet, Optional, Tuple

import emoji

NON_ALPHA_RE = re.compile(r"[^a-z]+")

STOP_WORDS = frozenset(
    """
    about above after again against all also and any are because been before
    being below between both but can could did does doing down during each
    few for from further had has have having her here hers herself him
    himself his how into its itself just more most myself nor not now off
    once only other ours ourselves out over own same she should some such
    than that the their theirs them themselves then there these they this
    those through too under until very was were what when where which while
    who whom why will with would you your yours yourself yourselves
    """.split()
)

# Applied in this order, each at most once per pass.
SUFFIX_RULES = (
    ("ing", ""),
    ("ed", ""),
    ("s", ""),
)


class Label(IntEnum):
    """Class labels; the lower value wins ties."""

    GENUINE = 0
    FAKE = 1

    def __str__(self):
        return self.name.lower()


@dataclass(frozen=True)
class Lexicon:
    """Lexical resources used by `normalize`."""

    stop_words: FrozenSet[str] = field(default=STOP_WORDS)
    suffix_rules: Tuple[Tuple[str, str], ...] = SUFFIX_RULES
    min_token_length: int = 3
    min_stem_length: int = 3

    def keep(self, token: str) -> bool:
        return len(token) >= self.min_token_length and token not in self.stop_words

    def stem(self, token: str) -> str:
        """Strip suffixes until no rule fires anymore."""
        while True:
            stemmed = token
            for suffix, replacement in self.suffix_rules:
                if stemmed.endswith(suffix):
                    candidate = stemmed[: -len(suffix)]
                    if len(candidate) >= self.min_stem_length:
                        stemmed = candidate + replacement
            if stemmed == token:
                return token
            token = stemmed


DEFAULT_LEXICON = Lexicon()


def emoji_to_text(text):
    """Spell emoji out as words, e.g. a thumbs-up becomes ':thumbs_up:'."""
    return emoji.demojize(text or "")


def normalize(
    text: Optional[str],
    lexicon: Lexicon = DEFAULT_LEXICON,
    expand_emoji: bool = False,
) -> str:
    """Map raw review text to a cleaned, space separated token string.

    Lowercase, replace non-letters with spaces, drop stop words and short
    tokens, strip suffixes, then drop again whatever stripping made short or
    turned into a stop word. Never raises; `None` gives an empty string.
    """
    if not text:
        return ""
    if expand_emoji:
        text = emoji_to_text(text)

    tokens = NON_ALPHA_RE.sub(" ", text.lower()).split()
    tokens = [lexicon.stem(t) for t in tokens if lexicon.keep(t)]
    return " ".join(t for t in tokens if lexicon.keep(t))


def parse_label(value) -> Label:
    """'1' means fake, anything else is genuine."""
    if value is None:
        return Label.GENUINE
    return Label.FAKE if str(value).strip() == "1" else Label.GENUINE
