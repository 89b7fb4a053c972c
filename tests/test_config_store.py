from __future__ import annotations

import json

import pytest

from conftest import app, make_config
from slate.config_store import (
    VALID_KEYS,
    ReloadSignal,
    dump_config,
    expanded_wallpaper,
    load_config,
    save_config,
    set_config_value,
)
from slate.errors import ConfigNotFound, ConfigParseError, TypeMismatch, UnknownKey
from slate.lib.assets import data_dir

MINIMAL = """\
palette:
  bg_void: "#0a0b0f"
  bg_void_transparent: "#0a0b0f99"
  foreground: "#c5c8d4"
  accent: "#5f87af"
hardware:
  monitor_scale: 2
  root_uuid: abc-123
"""


def test_load_applies_defaults(tmp_path) -> None:
    p = tmp_path / "slate.yaml"
    p.write_text(MINIMAL, encoding="utf-8")

    config = load_config(p)
    assert config.palette.mode == "manual"
    assert config.palette.bg_surface == "#14161c"
    assert config.palette.bg_overlay == "#1a1d26"
    assert config.palette.foreground_dim == "#555b6e"
    assert config.palette.accent_bright == "#7aa2cf"
    assert config.hardware.monitor_scale == 2.0
    assert config.hardware.font_family == "Iosevka Nerd Font"
    assert config.hardware.wallpaper == "~/Pictures/Wallpapers/mist-forest.png"
    assert config.apps == ()


def test_load_missing_file(tmp_path) -> None:
    with pytest.raises(ConfigNotFound):
        load_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    "text",
    [
        "palette: [unclosed",
        "- just\n- a list\n",
        MINIMAL.replace("  accent: \"#5f87af\"\n", ""),
        MINIMAL.replace("monitor_scale: 2", "monitor_scale: big"),
        MINIMAL + "apps:\n  - name: x\n    template_path: a\n    config_path: b\n    reload_signal: {type: teleport}\n",
        MINIMAL + "apps:\n  - name: x\n    template_path: a\n    config_path: b\n    reload_signal: {type: signal}\n",
        MINIMAL.replace("palette:\n", "palette:\n  mode: auto\n"),
    ],
)
def test_load_malformed(tmp_path, text: str) -> None:
    p = tmp_path / "slate.yaml"
    p.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigParseError):
        load_config(p)


def test_load_undecodable_bytes(tmp_path) -> None:
    p = tmp_path / "slate.yaml"
    p.write_bytes(b"palette: \xff\xfe\n")
    with pytest.raises(ConfigParseError):
        load_config(p)


def test_load_directory_path(tmp_path) -> None:
    p = tmp_path / "slate.yaml"
    p.mkdir()
    with pytest.raises(ConfigParseError):
        load_config(p)


def test_load_reload_signals(tmp_path) -> None:
    p = tmp_path / "slate.yaml"
    p.write_text(
        MINIMAL
        + "apps:\n"
        + "  - {name: bar, template_path: a, config_path: b, reload_signal: {type: signal, signal: waybar}}\n"
        + "  - {name: wm, template_path: c, config_path: d, enabled: false, reload_signal: {type: hyprctl}}\n"
        + "  - {name: plain, template_path: e, config_path: f}\n",
        encoding="utf-8",
    )
    config = load_config(p)
    assert [a.reload_signal for a in config.apps] == [
        ReloadSignal("signal", "waybar"),
        ReloadSignal("hyprctl"),
        ReloadSignal("none"),
    ]
    assert [a.name for a in config.enabled_apps] == ["bar", "plain"]


def test_save_then_load_preserves_order(tmp_path) -> None:
    config = make_config(
        app("b", "b.tmpl", "b.conf", ReloadSignal("makoctl")),
        app("a", "a.tmpl", "a.conf", ReloadSignal("signal", "waybar"), enabled=False),
    )
    p = tmp_path / "nested" / "dir" / "slate.yaml"
    save_config(config, p)
    assert load_config(p) == config


def test_save_is_deterministic_and_readable(tmp_path) -> None:
    config = make_config(app("bar", "bar.css", "waybar/style.css", ReloadSignal("signal", "waybar")))
    p = tmp_path / "slate.yaml"
    save_config(config, p)
    first = p.read_text(encoding="utf-8")
    save_config(load_config(p), p)
    assert p.read_text(encoding="utf-8") == first
    assert first.index("palette:") < first.index("hardware:") < first.index("apps:")
    assert "  mode: manual\n" in first


def test_json_format_by_suffix(tmp_path) -> None:
    config = make_config()
    p = tmp_path / "slate.json"
    save_config(config, p)
    assert json.loads(p.read_text(encoding="utf-8"))["hardware"]["root_uuid"] == "6a7b8c9d-luks"
    assert load_config(p) == config


def test_set_returns_new_config() -> None:
    config = make_config()
    updated = set_config_value(config, "palette.accent", "#ff0000")
    assert updated.palette.accent == "#ff0000"
    assert config.palette.accent == "#5F87AF"


def test_set_parses_monitor_scale() -> None:
    assert set_config_value(make_config(), "hardware.monitor_scale", "1.5").hardware.monitor_scale == 1.5


def test_set_rejects_non_numeric_scale() -> None:
    with pytest.raises(TypeMismatch):
        set_config_value(make_config(), "hardware.monitor_scale", "huge")


def test_set_validates_palette_mode() -> None:
    assert set_config_value(make_config(), "palette.mode", "matugen").palette.mode == "matugen"
    with pytest.raises(TypeMismatch):
        set_config_value(make_config(), "palette.mode", "auto")


@pytest.mark.parametrize("key", ["palette.nope", "apps", "hardware", "palette.accent.extra", "Palette.accent"])
def test_set_unknown_key_leaves_config_untouched(key: str) -> None:
    config = make_config(app("bar", "bar.css", "bar.css"))
    before = dump_config(config)
    with pytest.raises(UnknownKey) as exc:
        set_config_value(config, key, "x")
    assert exc.value.valid_keys == list(VALID_KEYS)
    assert "hardware.wallpaper" in str(exc.value)
    assert dump_config(config) == before


def test_expanded_wallpaper(monkeypatch) -> None:
    monkeypatch.setenv("HOME", "/home/tester")
    assert expanded_wallpaper(make_config()) == "/home/tester/Pictures/Wallpapers/mist-forest.png"


def test_packaged_example_config_loads() -> None:
    config = load_config(data_dir() / "example.slate.yaml")
    assert config.hardware.root_uuid == "REPLACE_ME_RUN_SLATE_CHECK"
    assert [a.name for a in config.apps][:2] == ["hyprland", "hyprpaper"]
