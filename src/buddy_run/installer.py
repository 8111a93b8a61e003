"""Install the bdy CLI when it is not already available on the runner."""

from __future__ import annotations

import io
import logging
import os
import platform as host
import re
import shutil
import tarfile
import tempfile
import zipfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import httpx

from .config import BuddyConfig
from .exceptions import CommandFailedError, InstallError, UnsupportedPlatformError
from .models.results import CommandResult
from .runner import execute

logger = logging.getLogger(__name__)

DOWNLOAD_BASE = "https://es.buddy.works/bdy"
VERSION_RE = re.compile(r"^\d+\.\d+\.\d+(-[\w.]+)?")

PLATFORMS = {
    "linux": "linux",
    "darwin": "darwin",
    "windows": "win32",
    "win32": "win32",
}
ARCHITECTURES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "arm64": "arm64",
    "aarch64": "arm64",
}


@dataclass(frozen=True)
class PlatformInfo:
    platform: str
    architecture: str

    @property
    def is_windows(self) -> bool:
        return self.platform == "win32"

    @property
    def file_extension(self) -> str:
        return ".zip" if self.is_windows else ".tar.gz"

    @property
    def download_prefix(self) -> str:
        name = "win" if self.is_windows else self.platform
        return f"{name}-{self.architecture}"

    @property
    def binary_name(self) -> str:
        return "bdy.exe" if self.is_windows else "bdy"


def detect_platform(system: str | None = None, machine: str | None = None) -> PlatformInfo:
    """Map the host OS/CPU onto a published bdy build.

    Only linux-x64, linux-arm64, darwin-arm64 and win-x64 binaries exist.
    """
    system = (system or host.system()).lower()
    machine = (machine or host.machine()).lower()

    detected_platform = PLATFORMS.get(system)
    detected_arch = ARCHITECTURES.get(machine)
    if detected_platform is None:
        msg = f"Unsupported platform: {system}. Only linux, darwin, and win32 are supported."
        raise UnsupportedPlatformError(msg, system, machine)
    if detected_arch is None:
        msg = f"Unsupported architecture: {machine}. Only x64 and arm64 are supported."
        raise UnsupportedPlatformError(msg, system, machine)
    if detected_platform == "darwin" and detected_arch == "x64":
        msg = "macOS x64 is not supported. Only darwin-arm64 binaries are available."
        raise UnsupportedPlatformError(msg, detected_platform, detected_arch)
    if detected_platform == "win32" and detected_arch == "arm64":
        msg = "Windows ARM64 is not supported. Only win-x64 binaries are available."
        raise UnsupportedPlatformError(msg, detected_platform, detected_arch)
    return PlatformInfo(detected_platform, detected_arch)


def _silent(runner: Callable[..., CommandResult], command: str, args: list[str]) -> CommandResult:
    return runner(command, args, stdout=io.StringIO(), stderr=io.StringIO())


class BdyInstaller:
    """Checks for, downloads and unpacks the bdy CLI."""

    def __init__(
        self,
        config: BuddyConfig,
        *,
        client: httpx.Client | None = None,
        runner: Callable[..., CommandResult] = execute,
        platform_info: PlatformInfo | None = None,
    ) -> None:
        self.config = config
        self._client = client
        self._runner = runner
        self._platform_info = platform_info

    @property
    def platform_info(self) -> PlatformInfo:
        if self._platform_info is None:
            self._platform_info = detect_platform()
        return self._platform_info

    @contextmanager
    def _http(self) -> Iterator[httpx.Client]:
        if self._client is not None:
            yield self._client
            return
        with httpx.Client(timeout=self.config.timeout, follow_redirects=True) as client:
            yield client

    # ── Detection ─────────────────────────────────────────────────

    def is_installed(self) -> bool:
        if self.config.bdy_path_override:
            try:
                result = _silent(self._runner, self.config.bdy_path, ["version"])
            except CommandFailedError:
                return False
            return result.exit_code == 0
        return shutil.which("bdy") is not None

    def get_version(self, bdy_path: str | None = None) -> str:
        """Return the installed version, or ``unknown`` if it cannot be read."""
        try:
            result = _silent(self._runner, bdy_path or self.config.bdy_path, ["version"])
        except CommandFailedError:
            return "unknown"
        if result.exit_code != 0:
            return "unknown"

        output = result.stdout.strip()
        for line in reversed(output.splitlines()):
            line = line.strip()
            if line and VERSION_RE.match(line):
                return line
        return output

    # ── Installation ──────────────────────────────────────────────

    def fetch_latest_version(self) -> str:
        url = f"{DOWNLOAD_BASE}/{self.config.release_channel}/latest"
        try:
            with self._http() as client:
                resp = client.get(url)
        except httpx.HTTPError as e:
            raise InstallError(f"Failed to fetch latest version from {url}: {e}", url) from e
        if not resp.is_success:
            msg = (
                f"Failed to fetch latest version from {url}: "
                f"{resp.status_code} {resp.reason_phrase}"
            )
            raise InstallError(msg, url)
        return resp.text.strip()

    def download_url(self, version: str) -> str:
        info = self.platform_info
        return (
            f"{DOWNLOAD_BASE}/{self.config.release_channel}/{version}/"
            f"{info.download_prefix}{info.file_extension}"
        )

    def _download(self, url: str, dest: Path) -> None:
        try:
            with self._http() as client, client.stream("GET", url) as resp:
                resp.raise_for_status()
                with dest.open("wb") as fh:
                    for chunk in resp.iter_bytes():
                        fh.write(chunk)
        except httpx.HTTPError as e:
            raise InstallError(f"Failed to download BDY CLI. URL: {url}", url) from e

    def _extract(self, archive: Path, install_dir: Path) -> None:
        if self.platform_info.is_windows:
            with zipfile.ZipFile(archive) as zf:
                zf.extractall(install_dir)
            return
        try:
            install_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
            with tarfile.open(archive, "r:gz") as tf:
                tf.extractall(install_dir, filter="data")
        except PermissionError:
            logger.debug("%s is not writable, extracting with sudo", install_dir)
            self._sudo(["mkdir", "-p", "-m", "755", str(install_dir)])
            self._sudo(["tar", "-zxf", str(archive), "-C", str(install_dir)])

    def _sudo(self, args: list[str]) -> None:
        result = self._runner("sudo", args)
        if result.exit_code != 0:
            msg = f"Failed to install BDY CLI: sudo {' '.join(args)} exited with {result.exit_code}"
            raise InstallError(msg)

    def install(self) -> str:
        """Download and unpack the latest bdy release; return the binary path."""
        info = self.platform_info
        version = self.fetch_latest_version()
        logger.info("Installing BDY CLI (%s) for %s...", version, info.download_prefix)

        url = self.download_url(version)
        install_dir = Path(self.config.install_dir)
        with tempfile.TemporaryDirectory(prefix="bdy-") as tmp:
            archive = Path(tmp) / f"bdy{info.file_extension}"
            self._download(url, archive)
            try:
                self._extract(archive, install_dir)
            except (tarfile.TarError, zipfile.BadZipFile) as e:
                raise InstallError(f"Failed to extract BDY CLI archive: {e}", url) from e

        binary = install_dir / info.binary_name
        if not info.is_windows and binary.exists() and os.access(binary, os.W_OK):
            binary.chmod(binary.stat().st_mode | 0o111)
        return os.fspath(binary)

    def ensure_installed(self) -> str:
        """Make sure bdy is runnable and return the command to invoke it."""
        if self.is_installed():
            version = self.get_version()
            logger.info("BDY CLI is already installed (version: %s)", version)
            return self.config.bdy_path

        logger.info("BDY CLI not found, installing...")
        bdy_path = self.install()
        version = self.get_version(bdy_path)
        logger.info("BDY CLI installed successfully (version: %s)", version)
        return bdy_path
