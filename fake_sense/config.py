"""Pipeline configuration.

Defaults can be overridden through environment variables, and the CLI
overrides both.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Tuple

TRAIN_DATA_PATH = "./data/dataset.csv"
MODEL_PATH = "fake_sense_model.joblib"


@dataclass(frozen=True)
class PipelineConfig:
    """Settings for training and inference."""

    max_features: int = 5000  # top-K vocabulary cap
    ngram_range: Tuple[int, int] = (1, 2)
    alpha: float = 1.0  # Laplace smoothing
    expand_emoji: bool = False
    test_size: float = 0.2  # held-out fraction
    random_state: int = 42
    train_data_path: str = TRAIN_DATA_PATH
    model_path: str = MODEL_PATH

    @classmethod
    def from_env(cls) -> PipelineConfig:
        """Read overrides from the environment, ignoring values that do not parse."""

        def get_int(key: str, default: int) -> int:
            value = os.getenv(key)
            if value:
                try:
                    return int(value)
                except ValueError:
                    pass
            return default

        def get_float(key: str, default: float) -> float:
            value = os.getenv(key)
            if value:
                try:
                    return float(value)
                except ValueError:
                    pass
            return default

        def get_fraction(key: str, default: float) -> float:
            value = get_float(key, default)
            return value if 0 < value < 1 else default

        def get_bool(key: str, default: bool) -> bool:
            value = os.getenv(key)
            if value is None:
                return default
            return value.strip().lower() in ("1", "true", "yes", "on")

        return cls(
            max_features=get_int("FAKE_SENSE_MAX_FEATURES", 5000),
            alpha=get_float("FAKE_SENSE_ALPHA", 1.0),
            expand_emoji=get_bool("FAKE_SENSE_EXPAND_EMOJI", False),
            test_size=get_fraction("FAKE_SENSE_TEST_SIZE", 0.2),
            train_data_path=os.getenv("TRAIN_DATA_PATH", TRAIN_DATA_PATH),
            model_path=os.getenv("MODEL_PATH", MODEL_PATH),
        )

    def with_overrides(self, **overrides: Any) -> PipelineConfig:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> dict:
        return {
            "max_features": self.max_features,
            "ngram_range": list(self.ngram_range),
            "alpha": self.alpha,
            "expand_emoji": self.expand_emoji,
        }
