from __future__ import annotations

import logging
import os
from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable, Dict

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, TemplateNotFound

from ..config_store import SlateConfig, expanded_wallpaper
from ..errors import ColorError, FilterInputInvalid, InvalidColorFormat, RenderError, TemplateMissing
from .color import CONVERSIONS, Color

logger = logging.getLogger(__name__)


def _color_filter(conversion: str) -> Callable[[Any], str]:
    def apply(value: Any) -> str:
        if not isinstance(value, str):
            raise InvalidColorFormat(f"{conversion} filter requires a string, got {type(value).__name__}")
        return getattr(Color.from_hex(value), conversion)()

    apply.__name__ = conversion
    return apply


def build_context(config: SlateConfig) -> Dict[str, Any]:
    return {
        "palette": asdict(config.palette),
        "hardware": asdict(config.hardware),
        "wallpaper": expanded_wallpaper(config),
    }


class TemplateRenderer:
    """Jinja2 environment over a templates directory with the color filters installed."""

    def __init__(self, templates_dir: str | Path) -> None:
        self.templates_dir = Path(templates_dir)
        self.env = Environment(
            loader=FileSystemLoader(os.fspath(self.templates_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        for name in CONVERSIONS:
            self.env.filters[name] = _color_filter(name)

    def render(self, template_ref: str, context: Dict[str, Any]) -> str:
        try:
            return self.env.get_template(template_ref).render(**context)
        except TemplateNotFound as e:
            raise TemplateMissing(template_ref, f"template not found: {e.name}") from e
        except ColorError as e:
            raise FilterInputInvalid(template_ref, str(e)) from e
        except (TypeError, ValueError) as e:
            # Wrong argument count or type passed to a filter.
            raise FilterInputInvalid(template_ref, str(e)) from e
        except TemplateError as e:
            raise RenderError(template_ref, str(e)) from e

    def render_config(self, template_ref: str, config: SlateConfig) -> str:
        return self.render(template_ref, build_context(config))
