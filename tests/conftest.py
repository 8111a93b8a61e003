"""Shared test fixtures for buddy-run-pipeline."""

from __future__ import annotations

import io
import logging

import pytest

from buddy_run.actions import ActionsPlatform
from buddy_run.config import BuddyConfig
from buddy_run.log import LOGGER_NAME

TEST_TOKEN = "test-token-123"
TEST_ENDPOINT = "https://api.buddy.works"


@pytest.fixture
def config() -> BuddyConfig:
    return BuddyConfig(token=TEST_TOKEN, api_endpoint=TEST_ENDPOINT, install_dir="/tmp/bdy")


@pytest.fixture
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def env() -> dict[str, str]:
    return {
        "BUDDY_TOKEN": TEST_TOKEN,
        "BUDDY_API_ENDPOINT": TEST_ENDPOINT,
        "INPUT_WORKSPACE": "w",
        "INPUT_PROJECT": "p",
        "INPUT_IDENTIFIER": "id",
    }


@pytest.fixture
def platform(env: dict[str, str], stream: io.StringIO) -> ActionsPlatform:
    return ActionsPlatform(env=env, stream=stream)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
