"""Genuine vs. fake review classification with TF-IDF and Naive Bayes."""

from fake_sense.exceptions import (
    FakeSenseError,
    IncompatibleArtifactError,
    InvalidInputError,
    NotReadyError,
)
from fake_sense.helpers import Label, normalize
from fake_sense.pipeline import (
    RawRecord,
    TrainedPipeline,
    evaluate,
    load_pipeline,
    load_records,
    predict_one,
    save_pipeline,
    train_pipeline,
)

__version__ = "0.1.0"
