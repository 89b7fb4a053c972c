from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..errors import DeviceResolutionError, PreflightError
from ..lib.block import BlockDeviceResolver, IdNamespace, is_mapped_device
from ..lib.env import PATHS

logger = logging.getLogger(__name__)


def _require_arch(os_release: str) -> None:
    try:
        text = Path(os_release).read_text(encoding="utf-8")
    except OSError as e:
        raise PreflightError(f"Failed to read {os_release}: {e}") from e
    ids = {line.partition("=")[2].strip('"') for line in text.splitlines() if line.startswith("ID=")}
    if "arch" not in ids:
        raise PreflightError("Slate requires Arch Linux. This system is not Arch.")


def check(
    *,
    resolver: Optional[BlockDeviceResolver] = None,
    verbose: bool = False,
    os_release: str = PATHS.os_release,
) -> str:
    """Verify the host: Arch Linux, LUKS-mapped root, resolvable PARTUUID.

    Returns the root partition's PARTUUID.
    """

    _require_arch(os_release)
    if verbose:
        logger.info("✓ Running on Arch Linux")

    resolver = resolver if resolver is not None else BlockDeviceResolver()
    root = resolver.resolve_root_device()
    if not is_mapped_device(root):
        raise PreflightError(
            f"Hardware mismatch. Root device is {root}.\n"
            "Slate strictly requires a LUKS encrypted root partition."
        )
    if verbose:
        logger.info("✓ LUKS encryption detected: %s", root)

    try:
        physical = resolver.trace_to_physical(root)
    except DeviceResolutionError as e:
        raise PreflightError(f"Could not resolve physical parent device: {e}") from e
    if verbose:
        logger.info("✓ Physical device: %s", physical)

    partuuid = resolver.resolve_stable_id(physical, IdNamespace.PARTUUID)
    logger.info("✓ Root PARTUUID: %s", partuuid)
    logger.info("System check complete. Ready to operate.")
    return partuuid
