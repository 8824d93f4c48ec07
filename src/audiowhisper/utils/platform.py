"""Platform detection used to gate platform-restricted backends."""

import platform

from .logger import get_logger

logger = get_logger(__name__)

_APPLE_SILICON_MACHINES = {"arm64", "aarch64"}


def get_platform() -> str:
    system = platform.system()
    if system == "Darwin":
        return "macos"
    return system.lower()


def get_architecture() -> str:
    return platform.machine().lower()


def is_apple_silicon() -> bool:
    """True on macOS running natively on an ARM (M-series) CPU."""
    if get_platform() != "macos":
        return False

    arch = get_architecture()
    supported = arch in _APPLE_SILICON_MACHINES
    if not supported:
        logger.debug(f"Not Apple Silicon: machine reported as '{arch}'")
    return supported
