from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Paths:
    config_dir: str = "~/.config/slate"
    config_name: str = "slate.yaml"
    config_root: str = "~/.config"
    log_default: str = "~/.local/state/slate/slate.log"
    wallpaper_dir: str = "~/Pictures/Wallpapers"
    mounts: str = "/proc/mounts"
    sysfs_block: str = "/sys/class/block"
    disk_ids: str = "/dev/disk"
    os_release: str = "/etc/os-release"


PATHS = Paths()
