from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional

from ..config_store import load_config, save_config, set_config_value
from ..errors import WallpaperError
from ..lib.command import CmdResult, run_cmd
from ..lib.env import PATHS
from ..lib.palette import generate_palette
from ..lib.reload import ReloadDispatcher
from .reload import reload

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ("png", "jpg", "jpeg", "webp", "bmp")


def wall_set(
    config_path: str | Path,
    image_path: str,
    *,
    wallpaper_dir: str | Path = PATHS.wallpaper_dir,
    config_root: str | Path = PATHS.config_root,
    dispatcher: Optional[ReloadDispatcher] = None,
    runner: Callable[..., CmdResult] = run_cmd,
) -> Path:
    """Install a wallpaper, regenerate the palette in matugen mode, and redeploy."""

    source = Path(os.path.expanduser(image_path))
    if not source.exists():
        raise WallpaperError(f"Wallpaper not found: {source}")

    ext = source.suffix.lower().lstrip(".")
    if ext not in IMAGE_EXTENSIONS:
        raise WallpaperError(
            f"Unsupported image format: .{ext}\nSupported: {', '.join(IMAGE_EXTENSIONS)}"
        )

    p = Path(config_path)
    config = load_config(p)

    wall_dir = Path(os.path.expanduser(os.fspath(wallpaper_dir)))
    wall_dir.mkdir(parents=True, exist_ok=True)
    dest = wall_dir / source.name
    if source.resolve() != dest.resolve():
        shutil.copy2(source, dest)
        logger.info("Copied wallpaper to %s", dest)
    else:
        logger.info("Wallpaper is already in the target directory.")

    # Keep the home-relative form in the config when possible.
    home = Path.home()
    try:
        stored = "~/" + str(dest.relative_to(home))
    except ValueError:
        stored = str(dest)
    config = set_config_value(config, "hardware.wallpaper", stored)

    if config.palette.mode == "matugen":
        logger.info("Generating palette from wallpaper (matugen)...")
        try:
            config = replace(config, palette=generate_palette(str(dest), config.palette, runner=runner))
            logger.info("  ✓ Palette generated from wallpaper")
        except (RuntimeError, OSError, ValueError, subprocess.SubprocessError) as e:
            logger.warning("matugen failed: %s. Keeping current palette.", e)

    save_config(config, p)
    logger.info("  ✓ Updated %s", p.name)

    reload(p, config_root=config_root, dispatcher=dispatcher)
    return dest
