"""Tests for TextVectorizer"""

from __future__ import annotations

import numpy as np
import pytest

from fake_sense.exceptions import InvalidInputError, NotReadyError
from fake_sense.vectorizer import TextVectorizer, vocabulary_fingerprint

CORPUS = ["great product love", "bad product broken", "great value"]


class TestFit:
    def test_empty_corpus(self) -> None:
        with pytest.raises(InvalidInputError):
            TextVectorizer().fit([])

    def test_corpus_without_terms(self) -> None:
        with pytest.raises(InvalidInputError):
            TextVectorizer().fit(["", ""])

    def test_returns_one_row_per_document(self) -> None:
        vectorizer, matrix = TextVectorizer().fit(CORPUS)
        assert vectorizer.is_fitted
        assert matrix.shape == (3, vectorizer.n_features)

    def test_unigrams_and_bigrams(self) -> None:
        vectorizer = TextVectorizer()
        vectorizer.fit_transform(CORPUS)
        vocabulary = vectorizer.vocabulary
        assert "great" in vocabulary
        assert "great product" in vocabulary
        assert not any(len(term.split()) > 2 for term in vocabulary)

    def test_max_features_caps_vocabulary(self) -> None:
        vectorizer = TextVectorizer(max_features=2)
        matrix = vectorizer.fit_transform(CORPUS)
        assert vectorizer.n_features == 2
        # the two most frequent terms
        assert set(vectorizer.feature_names) == {"great", "product"}
        assert matrix.shape == (3, 2)

    def test_rows_are_l2_normalized(self) -> None:
        _, matrix = TextVectorizer().fit(CORPUS)
        norms = np.linalg.norm(matrix.toarray(), axis=1)
        assert np.allclose(norms, 1.0)

    def test_smoothed_idf(self) -> None:
        vectorizer = TextVectorizer()
        vectorizer.fit_transform(CORPUS)
        idf = dict(zip(vectorizer.feature_names, vectorizer.idf))
        # n = 3 documents, "great" in 2 of them
        assert idf["great"] == pytest.approx(np.log(4 / 3) + 1)
        assert idf["love"] == pytest.approx(np.log(4 / 2) + 1)

    def test_failed_refit_keeps_previous_state(self) -> None:
        vectorizer = TextVectorizer()
        vectorizer.fit_transform(CORPUS)
        before = vectorizer.vocabulary
        with pytest.raises(InvalidInputError):
            vectorizer.fit_transform([])
        assert vectorizer.vocabulary == before


class TestApply:
    def test_before_fit(self) -> None:
        with pytest.raises(NotReadyError):
            TextVectorizer().apply("great product")

    def test_accessors_before_fit(self) -> None:
        vectorizer = TextVectorizer()
        with pytest.raises(NotReadyError):
            vectorizer.vocabulary
        with pytest.raises(NotReadyError):
            vectorizer.fingerprint

    def test_unseen_terms_are_zero(self) -> None:
        vectorizer = TextVectorizer()
        vectorizer.fit_transform(CORPUS)
        vector = vectorizer.apply("completely unknown words")
        assert vector.shape == (1, vectorizer.n_features)
        assert vector.nnz == 0

    def test_matches_training_rows(self) -> None:
        vectorizer, matrix = TextVectorizer().fit(CORPUS)
        assert np.allclose(vectorizer.apply(CORPUS[0]).toarray(), matrix[0].toarray())

    def test_does_not_change_state(self) -> None:
        vectorizer = TextVectorizer()
        vectorizer.fit_transform(CORPUS)
        fingerprint = vectorizer.fingerprint
        idf = vectorizer.idf
        vectorizer.apply("brand new terms great")
        assert vectorizer.fingerprint == fingerprint
        assert np.array_equal(vectorizer.idf, idf)


class TestFingerprint:
    def test_same_vocabulary_same_fingerprint(self) -> None:
        a = TextVectorizer()
        a.fit_transform(CORPUS)
        b = TextVectorizer()
        b.fit_transform(list(reversed(CORPUS)))
        assert a.fingerprint == b.fingerprint

    def test_different_vocabulary(self) -> None:
        a = TextVectorizer()
        a.fit_transform(CORPUS)
        b = TextVectorizer()
        b.fit_transform(["something else entirely"])
        assert a.fingerprint != b.fingerprint

    def test_order_matters(self) -> None:
        assert vocabulary_fingerprint(["a", "b"]) != vocabulary_fingerprint(["b", "a"])
        assert vocabulary_fingerprint(["ab"]) != vocabulary_fingerprint(["a", "b"])
