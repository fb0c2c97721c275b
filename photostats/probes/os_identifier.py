"""Host OS identification, normalized to a small stable vocabulary."""

import logging
import platform
from collections.abc import Callable

import distro

from photostats.probes.containment import ContainmentDetector

logger = logging.getLogger(__name__)

DOCKER_LABEL = "docker"
UNKNOWN_LABEL = "unknown"
WINDOWS_11_MIN_BUILD = 22000

# Evaluated top to bottom, first match wins.
OS_RULES: list[tuple[Callable[[str], bool], str]] = [
    (lambda raw: "windows" in raw.lower() and "11" in raw, "Microsoft Windows 11"),
    (lambda raw: "windows" in raw.lower() and "10" in raw, "Microsoft Windows 10"),
    (lambda raw: "windows" in raw.lower(), "Microsoft Windows"),
]


def clean_label(raw: str) -> str:
    """Strip non-ASCII characters and surrounding whitespace."""
    cleaned = raw.encode("ascii", errors="ignore").decode("ascii").strip()
    return cleaned or UNKNOWN_LABEL


def normalize_os_name(raw: str) -> str:
    """Map a raw distro/platform string to an OS label."""
    for predicate, label in OS_RULES:
        if predicate(raw):
            return label
    return clean_label(raw)


def windows_release(version: str, release: str) -> str:
    """Windows release name from the ``major.minor.build`` version string.

    Windows 11 still reports NT 10.0; only the build number tells it apart.
    """
    parts = version.split(".")
    if len(parts) >= 3 and parts[0] == "10" and parts[2].isdigit() and int(parts[2]) >= WINDOWS_11_MIN_BUILD:
        return "11"
    return release


def host_os_name() -> str:
    """Ask the host for its distro or platform name."""
    system = platform.system()
    if system == "Windows":
        return f"{system} {windows_release(platform.version(), platform.release())}"
    return distro.name(pretty=True) or system or UNKNOWN_LABEL


class OSIdentifier:
    """Resolve a human-readable OS label; ``identify`` never raises."""

    def __init__(
        self,
        detector: ContainmentDetector | None = None,
        query: Callable[[], str] = host_os_name,
    ) -> None:
        self.detector = detector or ContainmentDetector()
        self.query = query

    def identify(self) -> str:
        try:
            if self.detector.detect():
                return DOCKER_LABEL
            raw = self.query()
        except Exception as exc:
            logger.warning("Failed to get OS info: %s", exc)
            return UNKNOWN_LABEL
        return normalize_os_name(raw or UNKNOWN_LABEL)
