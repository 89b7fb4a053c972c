from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Tuple

from .env import PATHS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MountEntry:
    device_spec: str
    mount_point: str


def parse_mounts(text: str) -> List[MountEntry]:
    """Parse a /proc/mounts style table; short lines are ignored."""

    entries: List[MountEntry] = []
    for line in text.splitlines():
        parts = line.split()
        if len(parts) >= 2:
            entries.append(MountEntry(device_spec=parts[0], mount_point=parts[1]))
    return entries


class SystemInfo(Protocol):
    """Read-only view of the host's block-device metadata.

    The operating system is the only writer of everything exposed here, so
    implementations never lock.
    """

    def mount_entries(self) -> List[MountEntry]:
        ...

    def canonical_path(self, path: str, *, strict: bool = False) -> str:
        """Resolve symlinks. With ``strict``, raise OSError if the path does not exist."""
        ...

    def block_slaves(self, name: str) -> Optional[List[str]]:
        """Slave names of a sysfs block record, or None when the record is missing."""
        ...

    def namespace_links(self, directory: str) -> Optional[List[Tuple[str, Optional[str]]]]:
        """(entry name, raw link target) pairs, or None when the directory is missing.

        The target is None for entries that are not symlinks.
        """
        ...


class HostSystemInfo:
    """SystemInfo backed by the live /proc, /sys and /dev trees."""

    def __init__(
        self,
        *,
        mounts_path: str = PATHS.mounts,
        sysfs_block: str = PATHS.sysfs_block,
    ) -> None:
        self.mounts_path = Path(mounts_path)
        self.sysfs_block = Path(sysfs_block)

    def mount_entries(self) -> List[MountEntry]:
        return parse_mounts(self.mounts_path.read_text(encoding="utf-8"))

    def canonical_path(self, path: str, *, strict: bool = False) -> str:
        return str(Path(path).resolve(strict=strict))

    def block_slaves(self, name: str) -> Optional[List[str]]:
        record = self.sysfs_block / name
        if not record.exists():
            return None
        slaves_dir = record / "slaves"
        if not slaves_dir.is_dir():
            return []
        # Kernel listing order; sorting would change which slave is "first".
        return [entry.name for entry in os.scandir(slaves_dir)]

    def namespace_links(self, directory: str) -> Optional[List[Tuple[str, Optional[str]]]]:
        d = Path(directory)
        if not d.is_dir():
            return None
        links: List[Tuple[str, Optional[str]]] = []
        for entry in os.scandir(d):
            target: Optional[str] = None
            if entry.is_symlink():
                try:
                    target = os.readlink(entry.path)
                except OSError as e:
                    logger.debug("Unreadable link %s: %s", entry.path, e)
            links.append((entry.name, target))
        return links
