"""
Training, inference and evaluation for the fake review classifier.

Flow: raw records -> normalize -> TextVectorizer -> NaiveBayesClassifier.
The fitted vectorizer and model travel together in a TrainedPipeline and
are persisted as a single joblib artifact.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import joblib
import numpy as np
import pandas as pd
import structlog
from sklearn.metrics import accuracy_score, confusion_matrix
from sklearn.model_selection import train_test_split

from fake_sense.classifier import NaiveBayesClassifier
from fake_sense.config import PipelineConfig
from fake_sense.exceptions import IncompatibleArtifactError, InvalidInputError
from fake_sense.helpers import Label, normalize, parse_label
from fake_sense.vectorizer import TextVectorizer

logger = structlog.get_logger(__name__)

ARTIFACT_KEYS = ("vectorizer", "model", "metadata")


@dataclass(frozen=True)
class RawRecord:
    text: str
    label: Label


@dataclass
class TrainedPipeline:
    """A fitted vectorizer and the model trained on its output."""

    vectorizer: TextVectorizer
    model: NaiveBayesClassifier
    config: PipelineConfig = field(default_factory=PipelineConfig)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def check_compatible(self) -> None:
        if self.model.fingerprint != self.vectorizer.fingerprint:
            raise IncompatibleArtifactError(
                "model was trained with a different vectorizer fit"
            )

    def normalize(self, text: Optional[str]) -> str:
        return normalize(text, expand_emoji=self.config.expand_emoji)


@dataclass(frozen=True)
class EvaluationResult:
    accuracy: float
    confusion_matrix: np.ndarray  # rows: true label, columns: predicted
    total: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "accuracy": self.accuracy,
            "confusion_matrix": self.confusion_matrix.tolist(),
            "total": self.total,
        }


# -----------------------------
# Loading
# -----------------------------
def _keep_first_two(fields: List[str]) -> List[str]:
    return fields[:2]


def load_records(path) -> List[RawRecord]:
    """
    Read a CSV with a header row and two columns: review text, label.

    Label "1" is fake, anything else (empty or "NA" included) is genuine.
    Only rows with fewer than two fields are skipped; extra fields are
    ignored. Strings like "NA" or "null" are kept as text.
    """
    path = Path(path)
    if not path.exists():
        raise InvalidInputError(f"data file not found: {path}")

    try:
        df = pd.read_csv(
            path,
            header=0,
            dtype=str,
            keep_default_na=False,
            engine="python",
            skipinitialspace=True,
            on_bad_lines=_keep_first_two,
        )
    except pd.errors.EmptyDataError as e:
        raise InvalidInputError(f"data file is empty: {path}") from e

    if df.shape[1] < 2:
        raise InvalidInputError(f"{path} must have two columns: text and label")

    df = df.iloc[:, :2].set_axis(["text", "label"], axis=1)
    kept = df.dropna(subset=["label"])

    records = [
        RawRecord(text=text, label=parse_label(label))
        for text, label in zip(kept["text"].fillna(""), kept["label"])
    ]
    logger.info(
        "records_loaded",
        path=str(path),
        records=len(records),
        skipped=len(df) - len(records),
    )
    return records


def split_records(
    records: Sequence[RawRecord], test_size=None, random_state=None
) -> Tuple[List[RawRecord], List[RawRecord]]:
    """Stratified train/test split; unstratified when a class is too small.

    `test_size` and `random_state` default to the PipelineConfig values.
    """
    defaults = PipelineConfig()
    test_size = defaults.test_size if test_size is None else test_size
    random_state = defaults.random_state if random_state is None else random_state
    if not 0 < test_size < 1:
        raise InvalidInputError(f"test_size must be between 0 and 1, got {test_size}")
    records = list(records)
    if len(records) < 2:
        raise InvalidInputError("need at least two records to split")

    labels = [r.label for r in records]
    counts = Counter(labels)
    stratify = labels if len(counts) > 1 and min(counts.values()) >= 2 else None
    try:
        train, test = train_test_split(
            records, test_size=test_size, stratify=stratify, random_state=random_state
        )
    except ValueError:
        # test split too small to hold one of each class
        train, test = train_test_split(
            records, test_size=test_size, random_state=random_state
        )
    return list(train), list(test)


# -----------------------------
# Training / inference
# -----------------------------
def train_pipeline(
    records: Sequence[RawRecord], config: Optional[PipelineConfig] = None
) -> TrainedPipeline:
    """Normalize, fit the vectorizer, train the classifier.

    Everything is built on fresh objects, so a failure leaves nothing
    half-fitted behind.
    """
    config = config or PipelineConfig()
    records = list(records)
    if not records:
        raise InvalidInputError("no training records")

    corpus = [normalize(r.text, expand_emoji=config.expand_emoji) for r in records]
    labels = [r.label for r in records]

    vectorizer = TextVectorizer(
        max_features=config.max_features, ngram_range=config.ngram_range
    )
    vectors = vectorizer.fit_transform(corpus)
    model = NaiveBayesClassifier(alpha=config.alpha).train(
        vectors, labels, fingerprint=vectorizer.fingerprint
    )

    distribution = Counter(str(label) for label in labels)
    metadata = {
        "records": len(records),
        "distribution": dict(distribution),
        "vocabulary_size": vectorizer.n_features,
        "config": config.to_dict(),
    }
    logger.info("pipeline_trained", **metadata)
    return TrainedPipeline(vectorizer, model, config=config, metadata=metadata)


def predict_one(pipeline: TrainedPipeline, text: Optional[str]) -> Label:
    pipeline.check_compatible()
    vector = pipeline.vectorizer.apply(pipeline.normalize(text))
    return pipeline.model.predict(vector)


def predict_many(pipeline: TrainedPipeline, texts: Sequence[Optional[str]]) -> List[Label]:
    pipeline.check_compatible()
    if not texts:
        return []
    vectors = pipeline.vectorizer.transform([pipeline.normalize(t) for t in texts])
    return pipeline.model.predict_many(vectors)


def fake_score(pipeline: TrainedPipeline, text: Optional[str]) -> float:
    """Probability that `text` is fake."""
    pipeline.check_compatible()
    vector = pipeline.vectorizer.apply(pipeline.normalize(text))
    return pipeline.model.fake_probability(vector)


def evaluate(pipeline: TrainedPipeline, records: Sequence[RawRecord]) -> EvaluationResult:
    """Accuracy and confusion matrix over labeled records. No learning happens."""
    records = list(records)
    labels = [int(Label.GENUINE), int(Label.FAKE)]
    if not records:
        return EvaluationResult(0.0, np.zeros((2, 2), dtype=int), 0)

    y_true = [int(r.label) for r in records]
    y_pred = [int(label) for label in predict_many(pipeline, [r.text for r in records])]

    cm = confusion_matrix(y_true, y_pred, labels=labels)
    result = EvaluationResult(float(accuracy_score(y_true, y_pred)), cm, len(records))
    logger.info("pipeline_evaluated", **result.as_dict())
    return result


# -----------------------------
# Persistence
# -----------------------------
def save_pipeline(pipeline: TrainedPipeline, path) -> Path:
    pipeline.check_compatible()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    artifact = {
        "vectorizer": pipeline.vectorizer,
        "model": pipeline.model,
        "metadata": {**pipeline.metadata, "pipeline_config": pipeline.config},
    }
    joblib.dump(artifact, path)
    logger.info("pipeline_saved", path=str(path))
    return path


def load_pipeline(path) -> TrainedPipeline:
    path = Path(path)
    if not path.exists():
        raise InvalidInputError(f"model artifact not found: {path}")

    artifact = joblib.load(path)
    if not isinstance(artifact, dict) or any(k not in artifact for k in ARTIFACT_KEYS):
        raise InvalidInputError(
            f"{path} is not a fake-sense artifact (expected keys {ARTIFACT_KEYS})"
        )

    metadata = dict(artifact["metadata"])
    config = metadata.pop("pipeline_config", None)
    if not isinstance(config, PipelineConfig):
        config = PipelineConfig()
    pipeline = TrainedPipeline(
        artifact["vectorizer"], artifact["model"], config=config, metadata=metadata
    )
    pipeline.check_compatible()
    return pipeline


# -----------------------------
# Explanations
# -----------------------------
def explain(pipeline: TrainedPipeline, text: Optional[str], top_n=5) -> Dict[str, Any]:
    """
    Which terms pushed a review towards fake or genuine.

    contribution = tf-idf value * (log P(term | fake) - log P(term | genuine)),
    so positive values point at fake and negative values at genuine.
    """
    pipeline.check_compatible()
    vector = pipeline.vectorizer.apply(pipeline.normalize(text))
    values = vector.toarray()[0]
    contributions = values * pipeline.model.feature_log_ratios()
    names = pipeline.vectorizer.feature_names

    contrib_list = [(names[i], float(contributions[i])) for i in np.flatnonzero(values)]
    contrib_list = [c for c in contrib_list if c[1] != 0]
    contrib_list.sort(key=lambda x: x[1], reverse=True)

    top_fake = [c for c in contrib_list if c[1] > 0][:top_n]
    top_genuine = sorted((c for c in contrib_list if c[1] < 0), key=lambda x: x[1])[:top_n]

    label = pipeline.model.predict(vector)
    data = {
        "label": str(label),
        "fake_probability": pipeline.model.fake_probability(vector),
        "top_fake_drivers": [
            {"feature": name, "contribution": round(val, 3)} for name, val in top_fake
        ],
        "top_genuine_drivers": [
            {"feature": name, "contribution": round(val, 3)} for name, val in top_genuine
        ],
    }
    data["explanation_text"] = explanation_text(data)
    return data


def explanation_text(data: Dict[str, Any]) -> str:
    """One sentence summarizing `explain` output."""
    top_fake = data.get("top_fake_drivers", [])
    top_genuine = data.get("top_genuine_drivers", [])

    if data["label"] == "fake":
        drivers, others, name, other_name = top_fake, top_genuine, "Fake", "Genuine"
    else:
        drivers, others, name, other_name = top_genuine, top_fake, "Genuine", "Fake"

    if not drivers:
        return f"The model rated this as {name}, but could not identify a strong reason."

    text = (
        f"The model rated this as {name}. "
        f"The strongest '{name}' factor was the word '{drivers[0]['feature']}'."
    )
    if others:
        text += f" This outweighed '{other_name}' factors like '{others[0]['feature']}'."
    return text
