"""GitHub Actions runner conventions: inputs, outputs, masking and failures.

Inputs arrive as ``INPUT_<NAME>`` environment variables. Outputs and exported
variables are appended to the files named by ``GITHUB_OUTPUT`` and
``GITHUB_ENV``; everything else is a ``::command::`` line on stdout.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import MutableMapping
from typing import TextIO

import click

from .exceptions import MissingInputError
from .models.inputs import PipelineInputs

OPTIONAL_INPUTS = (
    "comment",
    "wait",
    "branch",
    "tag",
    "revision",
    "pull-request",
    "priority",
    "region",
    "variable",
    "variable-masked",
    "schedule",
    "action",
    "api",
)
BOOLEAN_INPUTS = ("refresh", "clear-cache")
REQUIRED_INPUTS = ("workspace", "project", "identifier")


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


class ActionsPlatform:
    """The host CI platform as seen by the action."""

    def __init__(
        self,
        env: MutableMapping[str, str] | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self.env = os.environ if env is None else env
        self.stream = stream
        self._secrets: list[str] = []

    # ── Inputs ────────────────────────────────────────────────────

    def get_input(self, name: str, *, required: bool = False) -> str:
        key = "INPUT_" + name.replace(" ", "_").upper()
        value = self.env.get(key, "").strip()
        if required and not value:
            raise MissingInputError(name)
        return value

    def get_boolean_input(self, name: str) -> bool:
        return self.get_input(name).lower() == "true"

    def read_pipeline_inputs(self) -> PipelineInputs:
        """Collect the pipeline run request from the action inputs.

        Empty optional inputs are treated as absent.
        """
        data: dict[str, object] = {
            name: self.get_input(name, required=True) for name in REQUIRED_INPUTS
        }
        for name in OPTIONAL_INPUTS:
            value = self.get_input(name)
            if value:
                data[name] = value
        for name in BOOLEAN_INPUTS:
            data[name] = self.get_boolean_input(name)
        return PipelineInputs.model_validate(data)

    # ── Secrets ───────────────────────────────────────────────────

    def set_secret(self, value: str) -> None:
        """Register *value* for redaction. Registering twice is a no-op."""
        if not value or value in self._secrets:
            return
        self._secrets.append(value)
        self.issue_command("add-mask", value)

    def mask(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, "***")
        return text

    # ── Outputs ───────────────────────────────────────────────────

    def set_output(self, name: str, value: str) -> None:
        path = self.env.get("GITHUB_OUTPUT", "")
        if path:
            self._append_file_command(path, name, value)
        else:
            self.issue_command("set-output", value, name=name)

    def export_variable(self, name: str, value: str) -> None:
        self.env[name] = value
        path = self.env.get("GITHUB_ENV", "")
        if path:
            self._append_file_command(path, name, value)
        else:
            self.issue_command("set-env", value, name=name)

    def set_failed(self, message: str) -> None:
        self.issue_command("error", self.mask(message))

    def issue_command(self, command: str, message: str = "", **properties: str) -> None:
        line = f"::{command}"
        if properties:
            line += " " + ",".join(
                f"{key}={_escape_property(value)}" for key, value in properties.items()
            )
        line += f"::{_escape_data(message)}"
        click.echo(line, file=self.stream)

    @staticmethod
    def _append_file_command(path: str, name: str, value: str) -> None:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        if delimiter in name or delimiter in value:
            msg = f"Unexpected input: value for {name} contains the delimiter"
            raise ValueError(msg)
        with open(path, "a", encoding="utf-8") as fh:
            fh.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
