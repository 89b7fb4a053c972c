from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Optional, Set

from ..errors import IdNotFound, MountEntryNotFound, PreflightError, SymlinkUnresolved, SysfsEntryMissing
from .env import PATHS
from .sysinfo import HostSystemInfo, SystemInfo

logger = logging.getLogger(__name__)


class IdNamespace(Enum):
    PARTUUID = "by-partuuid"
    UUID = "by-uuid"


def is_mapped_device(device: str) -> bool:
    """True for device-mapper nodes (LUKS, LVM)."""

    return device.startswith("/dev/mapper/") or device.startswith("/dev/dm-")


class BlockDeviceResolver:
    """Walk from the root mount down to a physical partition and its stable ids.

    All methods are pure queries against ``SystemInfo``; failures are raised
    as ``DeviceResolutionError`` subclasses without retrying.
    """

    def __init__(
        self,
        system: Optional[SystemInfo] = None,
        *,
        dev_dir: str = "/dev",
        disk_ids: str = PATHS.disk_ids,
    ) -> None:
        self.system = system if system is not None else HostSystemInfo()
        self.dev_dir = dev_dir
        self.disk_ids = disk_ids

    def resolve_root_device(self) -> str:
        try:
            entries = self.system.mount_entries()
        except OSError as e:
            raise MountEntryNotFound(f"Could not read mount table: {e}") from e

        for entry in entries:
            if entry.mount_point == "/":
                return entry.device_spec
        raise MountEntryNotFound("Could not identify root filesystem in the mount table")

    def trace_to_physical(self, device: str) -> str:
        """Follow sysfs slaves from ``device`` until a node without slaves is reached."""

        visited: Set[str] = set()
        current = device
        while True:
            canon = self.system.canonical_path(current)
            if canon in visited:
                raise SysfsEntryMissing(f"Device {device} loops back to {canon} while tracing slaves")
            visited.add(canon)

            name = os.path.basename(canon)
            slaves = self.system.block_slaves(name)
            if slaves is None:
                raise SysfsEntryMissing(f"Device {current} (resolved: {canon}) has no sysfs block record")
            if not slaves:
                logger.debug("Physical device for %s is %s", device, canon)
                return canon

            if len(slaves) > 1:
                logger.warning("%s has %d slaves (%s); following %s only", canon, len(slaves), ", ".join(slaves), slaves[0])
            logger.debug("%s -> %s", canon, slaves[0])
            current = os.path.join(self.dev_dir, slaves[0])

    def resolve_stable_id(self, device: str, namespace: IdNamespace) -> str:
        """Return the namespace entry whose link target is ``device``."""

        try:
            target = self.system.canonical_path(device, strict=True)
        except OSError as e:
            raise SymlinkUnresolved(f"Could not resolve device path {device}: {e}") from e

        directory = os.path.join(self.disk_ids, namespace.value)
        links = self.system.namespace_links(directory)
        if links is None:
            raise SysfsEntryMissing(f"{directory} does not exist - needed to resolve {namespace.name}")

        for name, link in links:
            if link is None:
                continue
            try:
                resolved = self.system.canonical_path(os.path.join(directory, link), strict=True)
            except OSError:
                continue
            if resolved == target:
                return name

        raise IdNotFound(f"Could not find {namespace.name} for device {device}")

    def detect_root_id(self, namespace: IdNamespace, *, require_mapped: bool = True) -> str:
        """Root mount -> physical partition -> stable id."""

        root = self.resolve_root_device()
        if require_mapped and not is_mapped_device(root):
            raise PreflightError(
                f"Root device is {root}, not a mapped device. "
                "Slate requires a LUKS encrypted root partition."
            )
        physical = self.trace_to_physical(root)
        ident = self.resolve_stable_id(physical, namespace)
        logger.info("Root %s -> %s -> %s=%s", root, physical, namespace.name, ident)
        return ident
