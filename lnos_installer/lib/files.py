from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List

logger = logging.getLogger(__name__)


def target_path(root: str, rel: str) -> Path:
    return Path(root) / rel.lstrip("/")


def write_file(root: str, rel: str, contents: str, *, dry_run: bool = False) -> None:
    p = target_path(root, rel)
    if dry_run:
        logger.info("Would write %s", str(p))
        return
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(contents, encoding="utf-8")
    logger.debug("Wrote %s", str(p))


def append_file(root: str, rel: str, contents: str, *, dry_run: bool = False) -> None:
    p = target_path(root, rel)
    if dry_run:
        logger.info("Would append to %s", str(p))
        return
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("a", encoding="utf-8") as f:
        f.write(contents)
    logger.debug("Appended to %s", str(p))


def edit_lines(
    root: str,
    rel: str,
    edit: Callable[[List[str]], List[str]],
    *,
    dry_run: bool = False,
) -> None:
    """Rewrite an existing file through ``edit`` (a list-of-lines transform).

    The file must exist; a missing file raises FileNotFoundError.
    """

    p = target_path(root, rel)
    if dry_run:
        logger.info("Would edit %s", str(p))
        return
    lines = p.read_text(encoding="utf-8").splitlines()
    p.write_text("\n".join(edit(lines)) + "\n", encoding="utf-8")
    logger.debug("Edited %s", str(p))


def uncomment_entries(lines: List[str], entries: List[str]) -> List[str]:
    """Drop the leading '#' from lines whose remainder is exactly one of ``entries``."""

    wanted = {e.strip() for e in entries}
    return [line[1:].strip() if line.startswith("#") and line[1:].strip() in wanted else line for line in lines]
