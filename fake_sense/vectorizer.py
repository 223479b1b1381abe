"""TF-IDF feature extraction over normalized review text."""

from __future__ import annotations

import hashlib
from typing import Dict, Iterable, List, Sequence

import numpy as np
import structlog
from sklearn.exceptions import NotFittedError
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.utils.validation import check_is_fitted

from fake_sense.exceptions import InvalidInputError, NotReadyError

logger = structlog.get_logger(__name__)

# Normalized text is already lowercase letters separated by single spaces,
# so every whitespace separated token is a term.
TOKEN_PATTERN = r"(?u)\b\w+\b"


def vocabulary_fingerprint(feature_names: Iterable[str]) -> str:
    """Stable digest of an ordered vocabulary."""
    digest = hashlib.sha1()
    for name in feature_names:
        digest.update(name.encode("utf-8"))
        digest.update(b"\0")
    return digest.hexdigest()


class TextVectorizer:
    """
    Fit/apply wrapper around scikit-learn's TfidfVectorizer.

    Weighting: raw term counts, smoothed idf ln((1 + n) / (1 + df)) + 1,
    rows L2-normalized. The vocabulary keeps the `max_features` terms with
    the highest corpus frequency among unigrams and bigrams.
    """

    def __init__(self, max_features=5000, ngram_range=(1, 2)):
        self.max_features = max_features
        self.ngram_range = tuple(ngram_range)
        self._tfidf = None
        self._fingerprint = None

    def _build(self) -> TfidfVectorizer:
        return TfidfVectorizer(
            lowercase=False,
            token_pattern=TOKEN_PATTERN,
            ngram_range=self.ngram_range,
            max_features=self.max_features,
            sublinear_tf=False,
            smooth_idf=True,
            use_idf=True,
            norm="l2",
        )

    @property
    def is_fitted(self) -> bool:
        return self._tfidf is not None

    def _require_fitted(self) -> TfidfVectorizer:
        if self._tfidf is None:
            raise NotReadyError("TextVectorizer")
        try:
            check_is_fitted(self._tfidf)
        except NotFittedError as e:
            raise NotReadyError("TextVectorizer") from e
        return self._tfidf

    def fit_transform(self, corpus: Sequence[str]):
        """Learn vocabulary and idf weights, returning the document-term matrix.

        On failure the previous state is kept.
        """
        corpus = list(corpus)
        if not corpus:
            raise InvalidInputError("cannot fit a vocabulary on an empty corpus")

        tfidf = self._build()
        try:
            matrix = tfidf.fit_transform(corpus)
        except ValueError as e:
            # raised when every document is empty after normalization
            raise InvalidInputError(f"no vocabulary could be built: {e}") from e

        self._tfidf = tfidf
        self._fingerprint = vocabulary_fingerprint(tfidf.get_feature_names_out())
        logger.debug(
            "vectorizer_fitted",
            documents=len(corpus),
            vocabulary_size=len(tfidf.vocabulary_),
        )
        return matrix

    def fit(self, corpus: Sequence[str]):
        """Same as `fit_transform`, returning `(self, matrix)`."""
        matrix = self.fit_transform(corpus)
        return self, matrix

    def transform(self, texts: Sequence[str]):
        """Vectorize several normalized texts without touching fitted state."""
        return self._require_fitted().transform(list(texts))

    def apply(self, text: str):
        """Vectorize a single normalized text; unseen terms contribute zero."""
        return self.transform([text or ""])

    @property
    def vocabulary(self) -> Dict[str, int]:
        return dict(self._require_fitted().vocabulary_)

    @property
    def feature_names(self) -> List[str]:
        return list(self._require_fitted().get_feature_names_out())

    @property
    def idf(self) -> np.ndarray:
        return self._require_fitted().idf_.copy()

    @property
    def n_features(self) -> int:
        return len(self._require_fitted().vocabulary_)

    @property
    def fingerprint(self) -> str:
        self._require_fitted()
        return self._fingerprint
