"""Buddy pipeline action configuration."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from .exceptions import InvalidConfigError, MissingCredentialError

if TYPE_CHECKING:
    from .actions import ActionsPlatform

logger = logging.getLogger(__name__)

TOKEN_ENV = "BUDDY_TOKEN"
API_ENDPOINT_ENV = "BUDDY_API_ENDPOINT"
DEFAULT_BDY_PATH = "bdy"
DEFAULT_RELEASE_CHANNEL = "prod"
DEFAULT_TIMEOUT = 60


def _default_install_dir() -> str:
    if sys.platform == "win32":
        return os.getcwd()
    return "/usr/local/bin"


def _timeout(value: str) -> int:
    value = value.strip()
    if not value:
        return DEFAULT_TIMEOUT
    if not value.isascii() or not value.isdigit() or int(value) == 0:
        raise InvalidConfigError("BDY_DOWNLOAD_TIMEOUT", value, "a positive number of seconds")
    return int(value)


class CredentialPair(NamedTuple):
    token: str
    api_endpoint: str


@dataclass
class BuddyConfig:
    """Configuration for the pipeline action, loaded from environment variables."""

    token: str = ""
    api_endpoint: str = ""
    bdy_path: str = DEFAULT_BDY_PATH
    bdy_path_override: bool = False
    install_dir: str = ""
    release_channel: str = DEFAULT_RELEASE_CHANNEL
    timeout: int = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> BuddyConfig:
        source = os.environ if env is None else env
        bdy_path = source.get("BDY_PATH", "").strip()
        return cls(
            token=source.get(TOKEN_ENV, ""),
            api_endpoint=source.get(API_ENDPOINT_ENV, ""),
            bdy_path=bdy_path or DEFAULT_BDY_PATH,
            bdy_path_override=bool(bdy_path),
            install_dir=source.get("BDY_INSTALL_DIR", "") or _default_install_dir(),
            release_channel=source.get("BDY_ENV", "") or DEFAULT_RELEASE_CHANNEL,
            timeout=_timeout(source.get("BDY_DOWNLOAD_TIMEOUT", "")),
        )

    @property
    def credentials(self) -> CredentialPair:
        return CredentialPair(self.token, self.api_endpoint)

    def validate(self) -> None:
        if not self.token:
            raise MissingCredentialError(TOKEN_ENV)
        if not self.api_endpoint:
            raise MissingCredentialError(API_ENDPOINT_ENV)


def check_credentials(config: BuddyConfig, platform: ActionsPlatform) -> CredentialPair:
    """Verify both credentials are present and mask the token.

    Masking goes through the platform, so the token is redacted from every
    later log line and from the forwarded output of the bdy process.
    """
    config.validate()
    platform.set_secret(config.token)
    logger.info("Buddy credentials found")
    return config.credentials
