from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, TextIO, Tuple

from .config_store import AppEntry, ReloadSignal, SlateConfig
from .errors import CommitRenameFailed, StageWriteFailed
from .lib.env import PATHS
from .lib.reload import ReloadDispatcher, unique_actions
from .lib.render import TemplateRenderer, build_context

logger = logging.getLogger(__name__)

STAGE_SUFFIX = ".slate-tmp"


class PipelineState(Enum):
    IDLE = "idle"
    RENDERING = "rendering"
    ABORTED = "aborted"
    RENDERED = "rendered"
    DRY_RUN_DONE = "dry_run_done"
    STAGING = "staging"
    STAGED = "staged"
    COMMITTING = "committing"
    COMMITTED = "committed"
    SIGNAL_DISPATCH = "signal_dispatch"
    DONE = "done"


@dataclass(frozen=True)
class StagedWrite:
    temp_path: Path
    final_path: Path


@dataclass
class DeployResult:
    state: PipelineState
    rendered: List[Tuple[AppEntry, str]] = field(default_factory=list)
    committed: List[Path] = field(default_factory=list)
    actions: List[ReloadSignal] = field(default_factory=list)
    failed_actions: List[ReloadSignal] = field(default_factory=list)


def _discard(paths: List[Path]) -> None:
    for p in paths:
        try:
            p.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove staged file %s: %s", p, e)


class DeploymentPipeline:
    """Render every enabled app, stage beside the destinations, rename into place.

    The commit renames files one at a time in declared order. It is not atomic
    across files: a failed rename leaves earlier destinations updated, and the
    raised CommitRenameFailed names which ones.

    Concurrent runs against the same config or destinations must be
    serialized by the caller.
    """

    def __init__(
        self,
        config: SlateConfig,
        renderer: TemplateRenderer,
        *,
        config_root: str | Path = PATHS.config_root,
        dispatcher: Optional[ReloadDispatcher] = None,
        out: Optional[TextIO] = None,
    ) -> None:
        self.config = config
        self.renderer = renderer
        self.config_root = Path(os.path.expanduser(os.fspath(config_root)))
        self.dispatcher = dispatcher if dispatcher is not None else ReloadDispatcher()
        self.out = out
        self.state = PipelineState.IDLE

    def destination(self, app: AppEntry) -> Path:
        p = Path(os.path.expanduser(app.config_path))
        if p.is_absolute():
            return p
        return self.config_root / p

    def render_all(self) -> List[Tuple[AppEntry, str]]:
        self.state = PipelineState.RENDERING
        context = build_context(self.config)
        rendered: List[Tuple[AppEntry, str]] = []
        try:
            for app in self.config.enabled_apps:
                logger.info("Rendering %s (%s)", app.name, app.template_path)
                rendered.append((app, self.renderer.render(app.template_path, context)))
        except Exception:
            self.state = PipelineState.ABORTED
            raise
        self.state = PipelineState.RENDERED
        return rendered

    def print_dry_run(self, rendered: List[Tuple[AppEntry, str]]) -> None:
        out = self.out if self.out is not None else sys.stdout
        out.write("[DRY RUN] Would write the following configs:\n")
        for app, content in rendered:
            out.write(f"\n━━━ {self.destination(app)} ━━━\n")
            out.write(content)
            if not content.endswith("\n"):
                out.write("\n")
        self.state = PipelineState.DRY_RUN_DONE

    def stage(self, rendered: List[Tuple[AppEntry, str]]) -> List[StagedWrite]:
        self.state = PipelineState.STAGING

        # Two apps sharing a destination would share a temp file too.
        owners: Dict[Path, str] = {}
        for app, _ in rendered:
            final = self.destination(app)
            if final in owners:
                self.state = PipelineState.ABORTED
                raise StageWriteFailed(str(final), f"apps {owners[final]!r} and {app.name!r} both write it")
            owners[final] = app.name

        staged: List[StagedWrite] = []
        for app, content in rendered:
            final = self.destination(app)
            temp = final.with_name(final.name + STAGE_SUFFIX)
            try:
                final.parent.mkdir(parents=True, exist_ok=True)
                temp.write_text(content, encoding="utf-8")
            except OSError as e:
                _discard([s.temp_path for s in staged] + [temp])
                self.state = PipelineState.ABORTED
                raise StageWriteFailed(str(final), str(e)) from e
            staged.append(StagedWrite(temp_path=temp, final_path=final))
        self.state = PipelineState.STAGED
        return staged

    def commit(self, staged: List[StagedWrite]) -> List[Path]:
        self.state = PipelineState.COMMITTING
        committed: List[Path] = []
        for i, write in enumerate(staged):
            try:
                os.replace(write.temp_path, write.final_path)
            except OSError as e:
                rest = staged[i:]
                _discard([s.temp_path for s in rest])
                self.state = PipelineState.ABORTED
                raise CommitRenameFailed(
                    [str(p) for p in committed],
                    [str(s.final_path) for s in rest],
                    str(e),
                ) from e
            committed.append(write.final_path)
            logger.info("  ✓ %s", write.final_path)
        self.state = PipelineState.COMMITTED
        return committed

    def run(self, *, dry_run: bool = False) -> DeployResult:
        rendered = self.render_all()

        if dry_run:
            self.print_dry_run(rendered)
            return DeployResult(state=self.state, rendered=rendered)

        logger.info("Writing temporary files...")
        staged = self.stage(rendered)
        logger.info("Committing configs...")
        committed = self.commit(staged)

        self.state = PipelineState.SIGNAL_DISPATCH
        actions = unique_actions(app for app, _ in rendered)
        logger.info("Propagating %d reload signal(s)...", len(actions))
        failed = self.dispatcher.dispatch_all(actions)

        self.state = PipelineState.DONE
        logger.info("Reload complete.")
        return DeployResult(
            state=self.state,
            rendered=rendered,
            committed=committed,
            actions=actions,
            failed_actions=failed,
        )
