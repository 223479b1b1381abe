"""Binary multinomial Naive Bayes over TF-IDF features."""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np
import structlog
from sklearn.naive_bayes import MultinomialNB

from fake_sense.exceptions import (
    IncompatibleArtifactError,
    InvalidInputError,
    NotReadyError,
)
from fake_sense.helpers import Label

logger = structlog.get_logger(__name__)

CLASSES = np.array([Label.GENUINE, Label.FAKE], dtype=int)


class NaiveBayesClassifier:
    """
    Wraps MultinomialNB with the pipeline's contract.

    Class scores are log prior + sum of feature log likelihoods (Laplace
    smoothed with `alpha`). The argmax is taken over classes in Label order,
    so a tie goes to GENUINE.
    """

    def __init__(self, alpha=1.0):
        self.alpha = alpha
        self._nb = None
        self.fingerprint = None

    @property
    def is_trained(self) -> bool:
        return self._nb is not None

    def _require_trained(self) -> MultinomialNB:
        if self._nb is None:
            raise NotReadyError("NaiveBayesClassifier")
        return self._nb

    def train(self, vectors, labels: Sequence[Label], fingerprint: Optional[str] = None):
        """Estimate priors and likelihoods.

        Both classes must be present; otherwise the model would only ever
        predict one label.
        """
        y = np.asarray([int(label) for label in labels], dtype=int)
        n_rows = vectors.shape[0]
        if n_rows == 0:
            raise InvalidInputError("cannot train on zero examples")
        if n_rows != len(y):
            raise InvalidInputError(
                f"got {n_rows} feature vectors but {len(y)} labels"
            )
        present = set(y.tolist())
        if present != {int(Label.GENUINE), int(Label.FAKE)}:
            only = ", ".join(str(Label(v)) for v in sorted(present))
            raise InvalidInputError(
                f"training data needs both genuine and fake examples, got only: {only}"
            )

        nb = MultinomialNB(alpha=self.alpha)
        nb.fit(vectors, y)

        self._nb = nb
        self.fingerprint = fingerprint
        logger.debug(
            "classifier_trained",
            examples=n_rows,
            features=vectors.shape[1],
            fake=int((y == Label.FAKE).sum()),
            genuine=int((y == Label.GENUINE).sum()),
        )
        return self

    def _check_width(self, vectors) -> None:
        expected = self._require_trained().n_features_in_
        if vectors.shape[1] != expected:
            raise IncompatibleArtifactError(
                f"feature vector has {vectors.shape[1]} entries, model expects {expected}"
            )

    def _log_posteriors(self, vectors) -> np.ndarray:
        """Rows are examples, columns follow CLASSES."""
        nb = self._require_trained()
        self._check_width(vectors)
        log_proba = nb.predict_log_proba(vectors)
        # sklearn orders columns by nb.classes_, which is sorted like CLASSES
        order = [list(nb.classes_).index(c) for c in CLASSES]
        return log_proba[:, order]

    def predict_many(self, vectors) -> List[Label]:
        # np.argmax returns the first maximum, i.e. GENUINE on a tie
        best = np.argmax(self._log_posteriors(vectors), axis=1)
        return [Label(int(CLASSES[i])) for i in best]

    def predict(self, vector) -> Label:
        return self.predict_many(vector)[0]

    def fake_probability(self, vector) -> float:
        """Posterior probability of FAKE for a single vector."""
        log_posteriors = self._log_posteriors(vector)[0]
        return float(np.exp(log_posteriors[list(CLASSES).index(Label.FAKE)]))

    def feature_log_ratios(self) -> np.ndarray:
        """log P(feature | fake) - log P(feature | genuine) for every feature."""
        nb = self._require_trained()
        classes = list(nb.classes_)
        log_prob = nb.feature_log_prob_
        return (
            log_prob[classes.index(Label.FAKE)] - log_prob[classes.index(Label.GENUINE)]
        )

    @property
    def class_log_prior(self) -> np.ndarray:
        nb = self._require_trained()
        classes = list(nb.classes_)
        return np.array([nb.class_log_prior_[classes.index(c)] for c in CLASSES])
