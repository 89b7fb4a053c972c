from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, TextIO

from ..config_store import load_config
from ..lib.env import PATHS
from ..lib.reload import ReloadDispatcher
from ..lib.render import TemplateRenderer
from ..pipeline import DeploymentPipeline, DeployResult

logger = logging.getLogger(__name__)


def templates_dir_for(config_path: Path) -> Path:
    return config_path.parent / "templates"


def reload(
    config_path: str | Path,
    *,
    dry_run: bool = False,
    config_root: str | Path = PATHS.config_root,
    dispatcher: Optional[ReloadDispatcher] = None,
    out: Optional[TextIO] = None,
) -> DeployResult:
    """Render all enabled templates and overwrite the live configs."""

    p = Path(config_path)
    config = load_config(p)

    logger.info("Rendering templates from %s", templates_dir_for(p))
    pipeline = DeploymentPipeline(
        config,
        TemplateRenderer(templates_dir_for(p)),
        config_root=config_root,
        dispatcher=dispatcher,
        out=out,
    )
    return pipeline.run(dry_run=dry_run)
