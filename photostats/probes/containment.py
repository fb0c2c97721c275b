"""Container runtime detection via marker artifacts."""

import logging
from pathlib import Path

from photostats.config import get_settings

logger = logging.getLogger(__name__)

# Substrings in PID 1's cgroup file that indicate a container runtime
CGROUP_MARKERS = ("docker", "kubepods", "containerd", "lxc")


class ContainmentDetector:
    """Decide whether this process runs inside a container.

    Checks the Docker marker file first, then PID 1's cgroup membership.
    Unreadable or missing files count as "not detected"; ``detect`` never raises.
    """

    def __init__(self, marker_path: str | None = None, cgroup_path: str | None = None) -> None:
        if marker_path is None or cgroup_path is None:
            settings = get_settings()
            marker_path = marker_path or settings.docker_marker_path
            cgroup_path = cgroup_path or settings.cgroup_path
        self.marker_path = Path(marker_path)
        self.cgroup_path = Path(cgroup_path)

    def detect(self) -> bool:
        return self._has_marker_file() or self._has_container_cgroup()

    def _has_marker_file(self) -> bool:
        try:
            return self.marker_path.exists()
        except OSError as exc:
            logger.debug("Cannot stat %s: %s", self.marker_path, exc)
            return False

    def _has_container_cgroup(self) -> bool:
        try:
            content = self.cgroup_path.read_text(encoding="utf-8", errors="replace").lower()
        except OSError as exc:
            logger.debug("Cannot read %s: %s", self.cgroup_path, exc)
            return False
        return any(marker in content for marker in CGROUP_MARKERS)
