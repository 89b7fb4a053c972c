from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any, Callable, Dict

from ..config_store import Palette
from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)

# Palette field -> matugen dark-scheme role.
MATUGEN_ROLES = {
    "bg_void": "surface",
    "bg_surface": "surface_container",
    "bg_overlay": "surface_container_high",
    "foreground": "on_surface",
    "foreground_dim": "on_surface_variant",
    "accent": "primary",
    "accent_bright": "primary_container",
}

# Alpha appended to bg_void for the translucent variant.
TRANSPARENT_ALPHA = "99"


def palette_from_matugen(data: Dict[str, Any], base: Palette) -> Palette:
    """Map matugen's ``colors.dark`` roles onto ``base``; missing roles become black."""

    dark = (data.get("colors") or {}).get("dark")
    if not isinstance(dark, dict):
        raise ValueError("matugen output missing colors.dark")

    colors = {field: str(dark.get(role) or "#000000") for field, role in MATUGEN_ROLES.items()}
    colors["bg_void_transparent"] = colors["bg_void"][:7] + TRANSPARENT_ALPHA
    return replace(base, **colors)


def generate_palette(
    image_path: str,
    base: Palette,
    *,
    runner: Callable[..., CmdResult] = run_cmd,
) -> Palette:
    """Derive a palette from an image with matugen's tonal-spot scheme."""

    r = runner(["matugen", "image", image_path, "--json", "hex", "-t", "scheme-tonal-spot"])
    try:
        data = json.loads(r.stdout)
    except ValueError as e:
        raise ValueError(f"Failed to parse matugen JSON output: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("matugen output must be a JSON object")
    return palette_from_matugen(data, base)
