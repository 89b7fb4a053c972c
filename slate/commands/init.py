from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Optional

from ..config_store import load_config, save_config
from ..lib.assets import copy_tree, data_dir
from ..lib.block import BlockDeviceResolver, IdNamespace
from ..lib.env import PATHS
from ..lib.reload import ReloadDispatcher
from .reload import reload

logger = logging.getLogger(__name__)

EXAMPLE_CONFIG = "example.slate.yaml"


def init(
    config_path: str | Path = os.path.join(PATHS.config_dir, PATHS.config_name),
    *,
    resolver: Optional[BlockDeviceResolver] = None,
    config_root: str | Path = PATHS.config_root,
    dispatcher: Optional[ReloadDispatcher] = None,
) -> Path:
    """First-time setup: detect the root container UUID, seed config and templates, deploy.

    An existing config keeps its palette and apps; only ``hardware.root_uuid``
    is refreshed. Existing templates are never overwritten.
    """

    config_path = Path(os.path.expanduser(os.fspath(config_path)))
    templates_dir = config_path.parent / "templates"

    logger.info("Detecting hardware configuration...")
    resolver = resolver if resolver is not None else BlockDeviceResolver()
    uuid = resolver.detect_root_id(IdNamespace.UUID, require_mapped=True)
    logger.info("  ✓ LUKS UUID: %s", uuid)

    source = config_path if config_path.exists() else data_dir() / EXAMPLE_CONFIG
    logger.info("Generating %s from %s", config_path, source)
    config = load_config(source)
    config = replace(config, hardware=replace(config.hardware, root_uuid=uuid))
    save_config(config, config_path)

    copied = copy_tree(data_dir() / "templates", templates_dir)
    logger.info("  ✓ %d template(s) copied to %s", len(copied), templates_dir)

    logger.info("Running initial config generation...")
    reload(config_path, config_root=config_root, dispatcher=dispatcher)
    logger.info("Initialization complete. Config: %s", config_path)
    return config_path
