"""Shared test fixtures"""

from __future__ import annotations

import csv

import pytest
import structlog

from fake_sense.helpers import Label
from fake_sense.pipeline import RawRecord, train_pipeline

GENUINE_REVIEWS = [
    "Great quality shoes, very comfortable and I love them",
    "Comfortable fit and great quality, would recommend",
    "Love the color, great quality stitching",
    "Really comfortable, great value, love it",
    "Solid quality, comfortable every day",
    "Great gift, my daughter loves the quality",
]

FAKE_REVIEWS = [
    "Buy now! Free money, click the link for a free offer",
    "Best offer ever click here free gift card money",
    "Click link now, free money offer guaranteed",
    "Free free free, buy cheap offer now click",
    "Amazing offer click now free shipping money back",
    "Guaranteed money offer, click the link to buy",
]


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "TRAIN_DATA_PATH",
        "MODEL_PATH",
        "FAKE_SENSE_MAX_FEATURES",
        "FAKE_SENSE_ALPHA",
        "FAKE_SENSE_EXPAND_EMOJI",
        "FAKE_SENSE_TEST_SIZE",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def tiny_records() -> list[RawRecord]:
    return [
        RawRecord("great amazing love it", Label.GENUINE),
        RawRecord("buy now fake spam free money", Label.FAKE),
    ]


@pytest.fixture
def review_records() -> list[RawRecord]:
    return [RawRecord(t, Label.GENUINE) for t in GENUINE_REVIEWS] + [
        RawRecord(t, Label.FAKE) for t in FAKE_REVIEWS
    ]


@pytest.fixture
def trained(review_records):
    return train_pipeline(review_records)


@pytest.fixture
def dataset_csv(tmp_path, review_records):
    """CSV in the input format: header row, text, label ("1" = fake)."""
    path = tmp_path / "dataset.csv"
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["text", "label"])
        for record in review_records:
            writer.writerow([record.text, "1" if record.label == Label.FAKE else "0"])
    return path
