"""Best-effort memory usage probe.

Memory visibility differs between a bare host, a container and a restricted
sandbox, so the probe walks a fallback chain ordered from most accurate inside
containers to least accurate but always available:

1. ``/proc/meminfo`` (only when running in a container, where psutil would
   report the host's figures rather than the container's view)
2. ``psutil.virtual_memory()`` for the whole host
3. the current process's own RSS / VMS
4. ``{used: 0, total: 0}``
"""

import logging
from pathlib import Path

import psutil

from photostats.config import get_settings
from photostats.probes.chain import Strategy, run_chain
from photostats.probes.containment import ContainmentDetector
from photostats.report.models import MemoryInfo

logger = logging.getLogger(__name__)


def parse_meminfo(text: str) -> MemoryInfo | None:
    """Parse ``/proc/meminfo`` content into a MemoryInfo.

    Returns None when ``MemTotal`` is missing or zero.
    """
    total_kb = 0
    available_kb = 0
    for line in text.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        if parts[0] == "MemTotal:":
            total_kb = int(parts[1])
        elif parts[0] == "MemAvailable:":
            available_kb = int(parts[1])

    total = total_kb * 1024
    if total <= 0:
        return None
    used = total - available_kb * 1024
    return MemoryInfo(used=min(max(used, 0), total), total=total)


class MemoryProbe:
    """Produce a structurally valid MemoryInfo; ``probe`` never raises."""

    def __init__(self, detector: ContainmentDetector | None = None, meminfo_path: str | None = None) -> None:
        self.detector = detector or ContainmentDetector()
        self.meminfo_path = Path(meminfo_path or get_settings().meminfo_path)

    def probe(self) -> MemoryInfo:
        strategies: list[Strategy[MemoryInfo]] = [
            ("container_meminfo", self._container_meminfo),
            ("host_memory", self._host_memory),
            ("process_memory", self._process_memory),
        ]
        return run_chain(strategies, default=MemoryInfo(used=0, total=0))

    def _container_meminfo(self) -> MemoryInfo | None:
        if not self.detector.detect():
            return None
        try:
            text = self.meminfo_path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning("Failed to read %s: %s", self.meminfo_path, exc)
            return None
        return parse_meminfo(text)

    @staticmethod
    def _host_memory() -> MemoryInfo | None:
        vm = psutil.virtual_memory()
        return MemoryInfo(used=min(vm.used, vm.total), total=vm.total)

    @staticmethod
    def _process_memory() -> MemoryInfo | None:
        info = psutil.Process().memory_info()
        return MemoryInfo(used=min(info.rss, info.vms), total=info.vms)
