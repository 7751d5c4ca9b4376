"""Exceptions raised by the drafting flows."""
from __future__ import annotations

from typing import List


class PlannerError(Exception):
    """Base class for errors surfaced to the user as a single message."""


class GenerationError(PlannerError):
    """The model call failed or returned something unusable."""


class MissingInputError(PlannerError):
    """A required user input (study title, API key) was not supplied."""


class MissingPrerequisiteError(PlannerError):
    """One or more sections a flow depends on have not been generated yet."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(
            "Please generate the following sections first: " + ", ".join(self.missing) + "."
        )
