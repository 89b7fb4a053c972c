from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .errors import ConfigNotFound, ConfigParseError, TypeMismatch, UnknownKey

logger = logging.getLogger(__name__)

PALETTE_MODES = ("manual", "matugen")
RELOAD_KINDS = ("none", "hyprctl", "hyprpaper", "makoctl", "signal")


@dataclass(frozen=True)
class Palette:
    bg_void: str  # darkest background
    bg_void_transparent: str  # background with alpha
    foreground: str
    accent: str
    mode: str = "manual"
    bg_surface: str = "#14161c"  # card/input surface
    bg_overlay: str = "#1a1d26"  # overlay/hover layer
    foreground_dim: str = "#555b6e"
    accent_bright: str = "#7aa2cf"


@dataclass(frozen=True)
class Hardware:
    monitor_scale: float
    root_uuid: str
    font_family: str = "Iosevka Nerd Font"
    wallpaper: str = "~/Pictures/Wallpapers/mist-forest.png"


@dataclass(frozen=True)
class ReloadSignal:
    """How an application is told to reread its config.

    ``target`` is only set for ``signal``, where it names the process that
    receives SIGUSR2.
    """

    kind: str = "none"
    target: Optional[str] = None

    @property
    def key(self) -> Tuple[str, Optional[str]]:
        return (self.kind, self.target)

    def describe(self) -> str:
        return f"{self.kind} {self.target}" if self.target else self.kind


@dataclass(frozen=True)
class AppEntry:
    name: str
    template_path: str  # relative to the templates directory
    config_path: str  # relative to the config root unless absolute
    enabled: bool = True
    reload_signal: ReloadSignal = field(default_factory=ReloadSignal)


@dataclass(frozen=True)
class SlateConfig:
    palette: Palette
    hardware: Hardware
    apps: Tuple[AppEntry, ...] = ()

    @property
    def enabled_apps(self) -> List[AppEntry]:
        return [a for a in self.apps if a.enabled]


VALID_KEYS: Tuple[str, ...] = (
    "palette.mode",
    "palette.bg_void",
    "palette.bg_void_transparent",
    "palette.bg_surface",
    "palette.bg_overlay",
    "palette.foreground",
    "palette.foreground_dim",
    "palette.accent",
    "palette.accent_bright",
    "hardware.monitor_scale",
    "hardware.font_family",
    "hardware.root_uuid",
    "hardware.wallpaper",
)


def _detect_format(path: Path) -> str:
    if path.suffix.lower() == ".json":
        return "json"
    return "yaml"


def _require_mapping(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigParseError(f"{where} must be a mapping/object, got {type(value).__name__}")
    return value


def _take_str(section: Dict[str, Any], key: str, where: str, default: Optional[str] = None) -> str:
    if key not in section or section[key] is None:
        if default is None:
            raise ConfigParseError(f"{where}.{key} is required")
        return default
    value = section[key]
    if not isinstance(value, str):
        raise ConfigParseError(f"{where}.{key} must be a string, got {type(value).__name__}")
    return value


def _parse_palette(raw: Any) -> Palette:
    p = _require_mapping(raw, "palette")
    kwargs = {}
    for f in fields(Palette):
        default = f.default if isinstance(f.default, str) else None
        kwargs[f.name] = _take_str(p, f.name, "palette", default)
    if kwargs["mode"] not in PALETTE_MODES:
        raise ConfigParseError(f"palette.mode must be \"manual\" or \"matugen\", got {kwargs['mode']!r}")
    return Palette(**kwargs)


def _parse_hardware(raw: Any) -> Hardware:
    h = _require_mapping(raw, "hardware")
    scale = h.get("monitor_scale")
    if isinstance(scale, bool) or not isinstance(scale, (int, float)):
        raise ConfigParseError("hardware.monitor_scale must be a number")
    return Hardware(
        monitor_scale=float(scale),
        root_uuid=_take_str(h, "root_uuid", "hardware"),
        font_family=_take_str(h, "font_family", "hardware", Hardware.font_family),
        wallpaper=_take_str(h, "wallpaper", "hardware", Hardware.wallpaper),
    )


def _parse_reload_signal(raw: Any, where: str) -> ReloadSignal:
    if raw is None:
        return ReloadSignal()
    r = _require_mapping(raw, where)
    kind = r.get("type")
    if kind not in RELOAD_KINDS:
        raise ConfigParseError(f"{where}.type must be one of {', '.join(RELOAD_KINDS)}, got {kind!r}")
    if kind == "signal":
        return ReloadSignal(kind=kind, target=_take_str(r, "signal", where))
    return ReloadSignal(kind=kind)


def _parse_app(raw: Any, index: int) -> AppEntry:
    where = f"apps[{index}]"
    a = _require_mapping(raw, where)
    enabled = a.get("enabled", True)
    if not isinstance(enabled, bool):
        raise ConfigParseError(f"{where}.enabled must be true or false")
    return AppEntry(
        name=_take_str(a, "name", where),
        enabled=enabled,
        template_path=_take_str(a, "template_path", where),
        config_path=_take_str(a, "config_path", where),
        reload_signal=_parse_reload_signal(a.get("reload_signal"), f"{where}.reload_signal"),
    )


def config_from_dict(data: Any) -> SlateConfig:
    root = _require_mapping(data, "config")
    apps_raw = root.get("apps") or []
    if not isinstance(apps_raw, list):
        raise ConfigParseError("apps must be a list")
    return SlateConfig(
        palette=_parse_palette(root.get("palette")),
        hardware=_parse_hardware(root.get("hardware")),
        apps=tuple(_parse_app(a, i) for i, a in enumerate(apps_raw)),
    )


def _signal_to_dict(signal: ReloadSignal) -> Dict[str, Any]:
    out: Dict[str, Any] = {"type": signal.kind}
    if signal.kind == "signal":
        out["signal"] = signal.target
    return out


def config_to_dict(config: SlateConfig) -> Dict[str, Any]:
    palette = config.palette
    hardware = config.hardware
    return {
        "palette": {
            "mode": palette.mode,
            "bg_void": palette.bg_void,
            "bg_void_transparent": palette.bg_void_transparent,
            "bg_surface": palette.bg_surface,
            "bg_overlay": palette.bg_overlay,
            "foreground": palette.foreground,
            "foreground_dim": palette.foreground_dim,
            "accent": palette.accent,
            "accent_bright": palette.accent_bright,
        },
        "hardware": {
            "monitor_scale": hardware.monitor_scale,
            "root_uuid": hardware.root_uuid,
            "font_family": hardware.font_family,
            "wallpaper": hardware.wallpaper,
        },
        "apps": [
            {
                "name": app.name,
                "enabled": app.enabled,
                "template_path": app.template_path,
                "config_path": app.config_path,
                "reload_signal": _signal_to_dict(app.reload_signal),
            }
            for app in config.apps
        ],
    }


def dump_config(config: SlateConfig, fmt: str = "yaml") -> str:
    data = config_to_dict(config)
    if fmt == "json":
        return json.dumps(data, indent=2) + "\n"
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True)


def load_config(path: str | Path) -> SlateConfig:
    p = Path(path)
    if not p.exists():
        raise ConfigNotFound(f"Config not found: {p}")

    try:
        text = p.read_text(encoding="utf-8")
        if _detect_format(p) == "json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (yaml.YAMLError, ValueError) as e:
        raise ConfigParseError(f"Malformed config {p}: {e}") from e
    except OSError as e:
        raise ConfigParseError(f"Could not read config {p}: {e}") from e

    config = config_from_dict(data)
    logger.debug("Loaded %s (%d apps)", p, len(config.apps))
    return config


def save_config(config: SlateConfig, path: str | Path) -> None:
    """Plain overwrite; not part of the deployment transaction."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(dump_config(config, _detect_format(p)), encoding="utf-8")
    logger.debug("Saved %s", p)


def set_config_value(config: SlateConfig, dotted_key: str, raw_value: str) -> SlateConfig:
    """Return a copy of ``config`` with one palette/hardware field changed."""

    if dotted_key not in VALID_KEYS:
        raise UnknownKey(dotted_key, VALID_KEYS)

    section, name = dotted_key.split(".", 1)

    value: Any = raw_value
    if dotted_key == "hardware.monitor_scale":
        try:
            value = float(raw_value)
        except ValueError as e:
            raise TypeMismatch(f"monitor_scale must be a number, got {raw_value!r}") from e
    elif dotted_key == "palette.mode" and raw_value not in PALETTE_MODES:
        raise TypeMismatch(f"palette.mode must be \"manual\" or \"matugen\", got {raw_value!r}")

    if section == "palette":
        return replace(config, palette=replace(config.palette, **{name: value}))
    return replace(config, hardware=replace(config.hardware, **{name: value}))


def expanded_wallpaper(config: SlateConfig) -> str:
    return os.path.expanduser(config.hardware.wallpaper)
