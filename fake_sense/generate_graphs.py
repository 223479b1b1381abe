"""Diagnostic plots for an evaluated pipeline."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")  # file output only, no display

import matplotlib.pyplot as plt  # noqa: E402
from sklearn.metrics import ConfusionMatrixDisplay  # noqa: E402

from fake_sense.pipeline import EvaluationResult  # noqa: E402

DISPLAY_LABELS = ["Genuine", "Fake"]


def save_confusion_matrix(result: EvaluationResult, path) -> Path:
    """Render the confusion matrix of `result` to a PNG file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(6, 5))
    disp = ConfusionMatrixDisplay(
        confusion_matrix=result.confusion_matrix, display_labels=DISPLAY_LABELS
    )
    disp.plot(ax=ax, cmap="Blues", colorbar=False, values_format="d")
    ax.set_title(f"Confusion Matrix (n={result.total}, accuracy={result.accuracy:.2f})")
    plt.tight_layout()
    plt.savefig(path)
    plt.close(fig)
    return path
