"""Exception hierarchy for slate.

Every failure the core can report derives from ``SlateError`` so the CLI can
turn it into a one-line operator message. Reload dispatch failures are the
only condition that is logged instead of raised.
"""

from __future__ import annotations

from typing import Sequence


class SlateError(Exception):
    """Base exception for slate errors"""


# Device resolution


class DeviceResolutionError(SlateError):
    """Raised when a mount point cannot be traced to stable identifiers"""


class MountEntryNotFound(DeviceResolutionError):
    pass


class SysfsEntryMissing(DeviceResolutionError):
    pass


class SymlinkUnresolved(DeviceResolutionError):
    pass


class IdNotFound(DeviceResolutionError):
    pass


# Configuration


class ConfigError(SlateError):
    """Raised when the configuration file cannot be loaded or edited"""


class ConfigNotFound(ConfigError):
    pass


class ConfigParseError(ConfigError):
    pass


class UnknownKey(ConfigError):
    def __init__(self, key: str, valid_keys: Sequence[str]):
        self.key = key
        self.valid_keys = list(valid_keys)
        listing = "\n".join(f"  {k}" for k in self.valid_keys)
        super().__init__(f"Unknown configuration key: {key}\nValid keys:\n{listing}")


class TypeMismatch(ConfigError):
    pass


# Colors and rendering


class ColorError(SlateError, ValueError):
    """Raised when a color string cannot be parsed"""


class InvalidColorFormat(ColorError):
    pass


class ColorParseError(ColorError):
    pass


class RenderError(SlateError):
    def __init__(self, template_ref: str, message: str):
        self.template_ref = template_ref
        super().__init__(f"Failed to render template {template_ref}: {message}")


class TemplateMissing(RenderError):
    pass


class FilterInputInvalid(RenderError):
    pass


# Deployment


class DeploymentError(SlateError):
    """Raised when rendered configs cannot be written to their destinations"""


class StageWriteFailed(DeploymentError):
    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Failed to stage {path}: {reason}. No destination was modified.")


class CommitRenameFailed(DeploymentError):
    def __init__(self, committed: Sequence[str], pending: Sequence[str], reason: str):
        self.committed = list(committed)
        self.pending = list(pending)
        super().__init__(
            f"Commit stopped partway: {reason}\n"
            f"Committed: {', '.join(self.committed) or '(none)'}\n"
            f"Not committed: {', '.join(self.pending) or '(none)'}"
        )


# Host requirements


class PreflightError(SlateError):
    pass


class WallpaperError(SlateError):
    pass
