"""GitHub Action that runs a Buddy pipeline through the bdy CLI."""

import os
import sys

import click
from dotenv import load_dotenv


@click.command()
@click.option("--bdy-path", envvar="BDY_PATH", help="Path to the bdy executable")
@click.option("--skip-install", is_flag=True, help="Do not install bdy when it is missing")
@click.option(
    "--log-level",
    envvar="BUDDY_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    help="Verbosity of the action log",
)
def main(bdy_path: str | None, skip_install: bool, log_level: str) -> None:
    """Run a Buddy pipeline from GitHub Actions inputs."""
    load_dotenv()

    if bdy_path:
        os.environ["BDY_PATH"] = bdy_path

    from .actions import ActionsPlatform
    from .log import configure_logging
    from .orchestrator import run_action

    platform = ActionsPlatform()
    configure_logging(platform, log_level)

    result = run_action(platform, skip_install=skip_install)
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
