from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import pytest

from slate.config_store import AppEntry, Hardware, Palette, ReloadSignal, SlateConfig
from slate.lib.command import CmdResult
from slate.lib.sysinfo import MountEntry


@dataclass
class FakeSystemInfo:
    """In-memory SystemInfo: alias symlinks, sysfs slave lists and id directories."""

    mounts: List[MountEntry] = field(default_factory=list)
    aliases: Dict[str, str] = field(default_factory=dict)
    devices: Dict[str, List[str]] = field(default_factory=dict)
    namespaces: Dict[str, List[Tuple[str, Optional[str]]]] = field(default_factory=dict)
    slave_lookups: List[str] = field(default_factory=list)

    def mount_entries(self) -> List[MountEntry]:
        return list(self.mounts)

    def canonical_path(self, path: str, *, strict: bool = False) -> str:
        p = posixpath.normpath(path)
        seen = set()
        while p in self.aliases and p not in seen:
            seen.add(p)
            p = posixpath.normpath(self.aliases[p])
        if strict and posixpath.basename(p) not in self.devices:
            raise FileNotFoundError(p)
        return p

    def block_slaves(self, name: str) -> Optional[List[str]]:
        self.slave_lookups.append(name)
        slaves = self.devices.get(name)
        return None if slaves is None else list(slaves)

    def namespace_links(self, directory: str) -> Optional[List[Tuple[str, Optional[str]]]]:
        links = self.namespaces.get(directory)
        return None if links is None else list(links)


@pytest.fixture
def luks_system() -> FakeSystemInfo:
    """Root on /dev/mapper/root -> dm-0 -> nvme0n1p2."""

    return FakeSystemInfo(
        mounts=[
            MountEntry("proc", "/proc"),
            MountEntry("/dev/mapper/root", "/"),
            MountEntry("/dev/nvme0n1p1", "/boot"),
        ],
        aliases={"/dev/mapper/root": "/dev/dm-0"},
        devices={"dm-0": ["nvme0n1p2"], "nvme0n1p2": [], "nvme0n1p1": []},
        namespaces={
            "/dev/disk/by-partuuid": [
                ("0f1e2d3c-01", "../../nvme0n1p1"),
                ("0f1e2d3c-02", "../../nvme0n1p2"),
            ],
            "/dev/disk/by-uuid": [
                ("ABCD-1234", "../../nvme0n1p1"),
                ("6a7b8c9d-luks", "../../nvme0n1p2"),
                ("e1f2a3b4-root", "../../dm-0"),
            ],
        },
    )


class RecordingRunner:
    def __init__(self, fail: Tuple[str, ...] = ()) -> None:
        self.calls: List[List[str]] = []
        self.fail = fail

    def __call__(self, argv, *, check: bool = True, timeout=None) -> CmdResult:
        argv = list(argv)
        self.calls.append(argv)
        if argv[0] in self.fail or argv[-1] in self.fail:
            raise RuntimeError(f"Command failed (1): {' '.join(argv)}")
        return CmdResult(argv=argv, returncode=0, stdout="", stderr="")


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


def make_config(*apps: AppEntry) -> SlateConfig:
    return SlateConfig(
        palette=Palette(
            bg_void="#0a0b0f",
            bg_void_transparent="#0a0b0f99",
            foreground="#c5c8d4",
            accent="#5F87AF",
        ),
        hardware=Hardware(monitor_scale=1.25, root_uuid="6a7b8c9d-luks"),
        apps=tuple(apps),
    )


def app(name: str, template: str, dest: str, signal: ReloadSignal = ReloadSignal(), enabled: bool = True) -> AppEntry:
    return AppEntry(name=name, template_path=template, config_path=dest, enabled=enabled, reload_signal=signal)
