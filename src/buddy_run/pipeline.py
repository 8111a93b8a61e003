"""Validate pipeline run inputs and translate them into ``bdy`` arguments."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from .exceptions import InvalidVariableFormatError, InvalidWaitTimeError
from .models.inputs import PipelineInputs, Priority, Region
from .models.results import PipelineOutputs
from .runner import Runner, run_command

if TYPE_CHECKING:
    from .actions import ActionsPlatform
    from .config import BuddyConfig

logger = logging.getLogger(__name__)

VARIABLE = "variable"
MASKED_VARIABLE = "masked variable"

# Whether a list input may also be split on commas. Variable values often
# contain commas, so variables are one entry per line.
LIST_DELIMITERS = {
    "variable": False,
    "variable_masked": False,
    "action": True,
}

_URL_RE = re.compile(r"https?://\S+")
_INT_RE = re.compile(r"^[+-]?[0-9]+$")


def parse_list(text: str, allow_commas: bool = True) -> list[str]:
    delimiter = r"[\n,]" if allow_commas else r"\n"
    return [item.strip() for item in re.split(delimiter, text) if item.strip()]


def validate_priority(priority: str) -> str:
    return Priority.parse(priority).value


def validate_region(region: str) -> str:
    return Region.parse(region).value


def validate_wait_time(wait: str) -> int:
    value = wait.strip()
    if not _INT_RE.match(value):
        raise InvalidWaitTimeError(wait)
    wait_time = int(value)
    if wait_time < 0:
        raise InvalidWaitTimeError(wait, negative=True)
    return wait_time


def validate_variable(variable: str, variable_type: str = VARIABLE) -> None:
    if ":" not in variable:
        raise InvalidVariableFormatError(variable, variable_type)


def build_reference_info(inputs: PipelineInputs) -> str:
    refs: list[str] = []
    if inputs.branch:
        refs.append(f"branch '{inputs.branch}'")
    if inputs.tag:
        refs.append(f"tag '{inputs.tag}'")
    if inputs.revision:
        refs.append(f"revision '{inputs.revision}'")
    if inputs.pull_request:
        refs.append(f"pull request '{inputs.pull_request}'")
    return f" (on {', '.join(refs)})" if refs else ""


def describe_run(inputs: PipelineInputs) -> str:
    return (
        f"Running pipeline: {inputs.identifier} in "
        f"{inputs.workspace}/{inputs.project}{build_reference_info(inputs)}"
    )


def _variable_args(text: str, flag: str, field: str, variable_type: str) -> list[str]:
    args: list[str] = []
    for variable in parse_list(text, LIST_DELIMITERS[field]):
        validate_variable(variable, variable_type)
        args.extend((flag, variable))
    return args


def build_args(inputs: PipelineInputs) -> tuple[list[str], list[str]]:
    """Build the ``bdy pipeline run`` argument list for *inputs*.

    Returns the arguments and a list of notices worth logging. The flag order
    is fixed; ``--wait`` is always last. Any invalid input raises before
    anything is returned, so a partial command is never produced.
    """
    notices: list[str] = []
    args = [
        "pipeline",
        "run",
        inputs.identifier,
        "--workspace",
        inputs.workspace,
        "--project",
        inputs.project,
    ]

    for flag, value in (
        ("--comment", inputs.comment),
        ("--branch", inputs.branch),
        ("--tag", inputs.tag),
        ("--revision", inputs.revision),
        ("--pull-request", inputs.pull_request),
    ):
        if value:
            args.extend((flag, value))

    if inputs.refresh:
        args.append("--refresh")
    if inputs.clear_cache:
        args.append("--clear-cache")

    if inputs.priority:
        args.extend(("--priority", validate_priority(inputs.priority)))
    if inputs.region:
        region = validate_region(inputs.region)
        notices.append(f"Overriding region to: {region}")
        args.extend(("--region", region))

    if inputs.variable:
        args.extend(_variable_args(inputs.variable, "--variable", "variable", VARIABLE))
    if inputs.variable_masked:
        args.extend(
            _variable_args(
                inputs.variable_masked, "--variable-masked", "variable_masked", MASKED_VARIABLE
            )
        )

    if inputs.schedule:
        args.extend(("--schedule", inputs.schedule))
    if inputs.action:
        for action in parse_list(inputs.action, LIST_DELIMITERS["action"]):
            args.extend(("--action", action))
    if inputs.api:
        args.extend(("--api", inputs.api))

    if inputs.wait:
        args.extend(("--wait", str(validate_wait_time(inputs.wait))))

    return args, notices


def extract_run_url(output: str) -> str | None:
    match = _URL_RE.search(output)
    return match.group(0) if match else None


def run_pipeline(
    inputs: PipelineInputs,
    config: BuddyConfig,
    platform: ActionsPlatform,
    runner: Runner = run_command,
) -> PipelineOutputs:
    """Run the pipeline through ``bdy`` and publish the run URL, if any."""
    logger.info(describe_run(inputs))
    args, notices = build_args(inputs)
    for notice in notices:
        logger.info(notice)

    output = runner(config.bdy_path, args, mask=platform.mask)

    outputs = PipelineOutputs(run_url=extract_run_url(output))
    if outputs.run_url:
        platform.set_output("run_url", outputs.run_url)
        platform.export_variable("BUDDY_RUN_URL", outputs.run_url)
    return outputs
