"""Errors raised by the fake-sense pipeline.

Malformed CSV rows are not represented here: they are dropped while loading
and never surface to the caller.
"""

from __future__ import annotations


class FakeSenseError(Exception):
    """Base class for every pipeline error."""


class InvalidInputError(FakeSenseError):
    """The data handed to a pipeline step cannot be used.

    Empty or missing data files, empty corpora, single-class training sets.
    """


class IncompatibleArtifactError(InvalidInputError):
    """A model and a vectorizer from different fits were combined."""


class NotReadyError(FakeSenseError):
    """A fitted component was used before it was fitted."""

    def __init__(self, component: str) -> None:
        self.component = component
        super().__init__(f"{component} has not been fitted yet")
