"""Sequence one action run and turn failures into a result."""

from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError

from .actions import ActionsPlatform
from .config import BuddyConfig, check_credentials
from .exceptions import BuddyError, normalize_error
from .installer import BdyInstaller
from .models.results import ActionResult
from .pipeline import run_pipeline
from .runner import Runner, run_command

logger = logging.getLogger(__name__)


def run_action(
    platform: ActionsPlatform,
    config: BuddyConfig | None = None,
    *,
    installer: BdyInstaller | None = None,
    runner: Runner = run_command,
    skip_install: bool = False,
) -> ActionResult:
    """Install bdy, check credentials, run the pipeline and report the outcome.

    Each step stops the run on failure. The failure message is reported
    through ``platform.set_failed`` and carried in the returned result.
    """
    try:
        config = config or BuddyConfig.from_env(platform.env)
        if not skip_install:
            installer = installer or BdyInstaller(config)
            config.bdy_path = installer.ensure_installed()
        check_credentials(config, platform)
        inputs = platform.read_pipeline_inputs()
        outputs = run_pipeline(inputs, config, platform, runner=runner)
    except PydanticValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        return _failed(platform, f"Invalid action inputs: {fields}")
    except BuddyError as e:
        return _failed(platform, normalize_error(e))
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        return _failed(platform, normalize_error(e))

    if not inputs.wait:
        logger.info("Pipeline run initiated successfully")
    logger.debug("Action outputs: %s", outputs.to_dict())
    return ActionResult(exit_code=0, outputs=outputs)


def _failed(platform: ActionsPlatform, message: str) -> ActionResult:
    platform.set_failed(message)
    return ActionResult(exit_code=1, message=message)
