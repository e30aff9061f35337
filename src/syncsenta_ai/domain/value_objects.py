"""Value objects — self-validating domain primitives."""

from __future__ import annotations

from dataclasses import dataclass

from syncsenta_ai.domain.entities import ResourceTier
from syncsenta_ai.domain.exceptions import InvalidTutoringContextError

MIN_GRADE = 1
MAX_GRADE = 12


@dataclass(frozen=True, slots=True)
class TutoringContext:
    """Who the tutor is talking to.

    Rejects grade levels outside 1–12 and blank subjects, so prompt
    construction can assume a well-formed context.
    """

    grade_level: int
    subject: str
    resource_tier: ResourceTier
    school_id: str | None = None
    customization: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.grade_level, bool) or not MIN_GRADE <= self.grade_level <= MAX_GRADE:
            raise InvalidTutoringContextError(
                f"Invalid grade level: {self.grade_level!r}. "
                f"Expected an integer between {MIN_GRADE} and {MAX_GRADE}."
            )
        if not self.subject or not self.subject.strip():
            raise InvalidTutoringContextError("Subject must not be empty.")

    @property
    def is_low_resource(self) -> bool:
        return self.resource_tier is ResourceTier.LOW


@dataclass(frozen=True, slots=True)
class Completion:
    """Outcome of a non-streaming completion.

    ``degraded`` is set when the upstream call failed and ``text`` holds the
    canned apology instead of model output.
    """

    text: str
    degraded: bool = False

    @classmethod
    def fallback(cls, text: str) -> Completion:
        return cls(text=text, degraded=True)
