"""Pipeline run request models."""

from __future__ import annotations

from enum import Enum

from pydantic import ConfigDict, Field

from ..exceptions import InvalidPriorityError, InvalidRegionError
from .base import BuddyModel


class Priority(str, Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"

    @classmethod
    def parse(cls, value: str) -> Priority:
        """Case-insensitive lookup; raises :class:`InvalidPriorityError`."""
        try:
            return cls(value.upper())
        except ValueError:
            raise InvalidPriorityError(value, [p.value for p in cls]) from None


class Region(str, Enum):
    EU = "EU"
    US = "US"
    AP = "AP"

    @classmethod
    def parse(cls, value: str) -> Region:
        """Case-insensitive lookup; raises :class:`InvalidRegionError`."""
        try:
            return cls(value.upper())
        except ValueError:
            raise InvalidRegionError(value, [r.value for r in cls]) from None


class PipelineInputs(BuddyModel):
    """One pipeline run request, as supplied through the action inputs.

    Optional values stay raw strings here; they are validated while the
    ``bdy`` argument list is built.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    workspace: str = Field(min_length=1)
    project: str = Field(min_length=1)
    identifier: str = Field(min_length=1)
    comment: str | None = None
    wait: str | None = None
    branch: str | None = None
    tag: str | None = None
    revision: str | None = None
    pull_request: str | None = Field(default=None, alias="pull-request")
    refresh: bool = False
    clear_cache: bool = Field(default=False, alias="clear-cache")
    priority: str | None = None
    region: str | None = None
    variable: str | None = None
    variable_masked: str | None = Field(default=None, alias="variable-masked")
    schedule: str | None = None
    action: str | None = None
    api: str | None = None
