from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from ..config_store import dump_config, load_config, save_config, set_config_value
from ..lib.env import PATHS
from ..lib.reload import ReloadDispatcher
from .reload import reload

logger = logging.getLogger(__name__)


def set_value(
    config_path: str | Path,
    key: str,
    value: str,
    *,
    dry_run: bool = False,
    config_root: str | Path = PATHS.config_root,
    dispatcher: Optional[ReloadDispatcher] = None,
    out: Optional[TextIO] = None,
) -> None:
    """Change one palette/hardware value, save, and redeploy."""

    p = Path(config_path)
    config = set_config_value(load_config(p), key, value)

    if dry_run:
        stream = out if out is not None else sys.stdout
        stream.write(f"[DRY RUN] Would update {key} = {value}\n\nNew configuration:\n")
        stream.write(dump_config(config))
        return

    logger.info("Updating %s = %s", key, value)
    save_config(config, p)
    logger.info("  ✓ Saved to %s", p)

    reload(p, config_root=config_root, dispatcher=dispatcher, out=out)
