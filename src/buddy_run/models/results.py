"""Execution and action result models."""

from __future__ import annotations

from pydantic import Field

from .base import BuddyModel


class CommandResult(BuddyModel):
    exit_code: int
    stdout: str = ""
    stderr: str = ""


class PipelineOutputs(BuddyModel):
    run_url: str | None = None


class ActionResult(BuddyModel):
    """Outcome of one action run; the CLI maps it to a process exit code."""

    exit_code: int = 0
    message: str = ""
    outputs: PipelineOutputs = Field(default_factory=PipelineOutputs)

    @property
    def ok(self) -> bool:
        return self.exit_code == 0
