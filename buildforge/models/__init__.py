"""Buildforge data models: all Pydantic v2, all frozen (immutable)."""

from buildforge.models.targets import (
    VALID_TRANSITIONS,
    RunResult,
    Target,
    TargetState,
    TargetTiming,
)
from buildforge.models.versioning import VersionDescriptor, VersionOverrides

__all__ = [
    # versioning
    "VersionDescriptor",
    "VersionOverrides",
    # targets
    "Target",
    "TargetState",
    "TargetTiming",
    "RunResult",
    "VALID_TRANSITIONS",
]
