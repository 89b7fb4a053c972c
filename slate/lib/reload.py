from __future__ import annotations

import logging
import subprocess
import time
from typing import Callable, Iterable, List, Sequence, Set, Tuple

from ..config_store import AppEntry, ReloadSignal
from .command import CmdResult, run_cmd, spawn_cmd

logger = logging.getLogger(__name__)

# Process restarts need the old instance gone before the new one binds its socket.
HYPRPAPER_RESTART_DELAY_S = 0.5


def unique_actions(apps: Iterable[AppEntry]) -> List[ReloadSignal]:
    """Reload actions in first-seen order, one per (kind, target)."""

    seen: Set[Tuple[str, object]] = set()
    actions: List[ReloadSignal] = []
    for app in apps:
        signal = app.reload_signal
        if signal.kind == "none":
            logger.debug("%s has no reload signal", app.name)
            continue
        if signal.key in seen:
            continue
        seen.add(signal.key)
        actions.append(signal)
    return actions


class ReloadDispatcher:
    """Deliver reload actions to running applications, best-effort."""

    def __init__(
        self,
        *,
        runner: Callable[..., CmdResult] = run_cmd,
        spawner: Callable[[Sequence[str]], int] = spawn_cmd,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.runner = runner
        self.spawner = spawner
        self.sleep = sleep

    def _execute(self, signal: ReloadSignal) -> None:
        if signal.kind == "hyprctl":
            self.runner(["hyprctl", "reload"])
        elif signal.kind == "makoctl":
            self.runner(["makoctl", "reload"])
        elif signal.kind == "signal":
            self.runner(["pkill", "-SIGUSR2", str(signal.target)])
        elif signal.kind == "hyprpaper":
            # pkill exits 1 when nothing was running; that is fine for a restart.
            self.runner(["pkill", "hyprpaper"], check=False)
            self.sleep(HYPRPAPER_RESTART_DELAY_S)
            self.spawner(["hyprpaper"])
        else:
            raise ValueError(f"Unknown reload signal {signal.kind!r}")

    def dispatch(self, signal: ReloadSignal) -> bool:
        """Run one action; failures are logged and reported as False."""

        try:
            self._execute(signal)
        except (RuntimeError, OSError, ValueError, subprocess.SubprocessError) as e:
            logger.warning("Reload %s failed: %s", signal.describe(), str(e).strip())
            return False
        logger.info("Reloaded %s", signal.describe())
        return True

    def dispatch_all(self, actions: Sequence[ReloadSignal]) -> List[ReloadSignal]:
        """Dispatch every action in order; returns the ones that failed."""

        return [a for a in actions if not self.dispatch(a)]
