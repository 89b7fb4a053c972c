from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


def data_dir() -> Path:
    # slate/lib/assets.py -> slate -> slate/data
    return Path(__file__).resolve().parents[1] / "data"


def copy_tree(src: str | Path, dst: str | Path, *, overwrite: bool = False) -> List[Path]:
    """Copy every file under ``src`` into ``dst``; returns the files written.

    Existing files are left alone unless ``overwrite`` is set, so user edits
    to templates survive a second ``init``.
    """

    s = Path(src)
    d = Path(dst)
    if not s.exists():
        raise FileNotFoundError(str(s))

    written: List[Path] = []
    d.mkdir(parents=True, exist_ok=True)
    for item in sorted(s.rglob("*")):
        out = d / item.relative_to(s)
        if item.is_dir():
            out.mkdir(parents=True, exist_ok=True)
        elif overwrite or not out.exists():
            out.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, out)
            written.append(out)
        else:
            logger.debug("Keeping existing %s", out)
    return written
