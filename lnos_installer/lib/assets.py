from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List

from .files import target_path

logger = logging.getLogger(__name__)


def copy_tree(src: str, dst: str, *, dry_run: bool = False) -> int:
    """Merge the ``src`` tree into ``dst``; returns the number of files copied.

    Symlinks are copied as links. Existing files in ``dst`` are overwritten.
    """

    source = Path(src)
    if not source.is_dir():
        raise FileNotFoundError(src)
    if dry_run:
        logger.info("Would copy %s into %s", src, dst)
        return 0

    copied: List[str] = []

    def _copy(s: str, d: str) -> str:
        copied.append(d)
        return shutil.copy2(s, d)

    shutil.copytree(source, dst, symlinks=True, copy_function=_copy, dirs_exist_ok=True)
    logger.debug("Copied %d files from %s into %s", len(copied), src, dst)
    return len(copied)


def overlay_file(src: Path, target_root: str, rel: str, *, dry_run: bool = False) -> bool:
    """Replace ``rel`` in the target with ``src``. False when ``src`` is absent."""

    if not src.is_file():
        return False
    dest = target_path(target_root, rel)
    if dry_run:
        logger.info("Would install %s as %s", str(src), str(dest))
        return True
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dest)
    return True
