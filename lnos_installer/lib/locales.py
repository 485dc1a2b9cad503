from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from .command import CommandRunner

logger = logging.getLogger(__name__)

FALLBACK_LOCALE = "en_US.UTF-8 UTF-8"


def is_valid_timezone(zoneinfo_dir: str, tz: str) -> bool:
    if not tz or tz.startswith("/") or ".." in tz.split("/"):
        return False
    return (Path(zoneinfo_dir) / tz).is_file()


def _read_locale_gen(locale_gen: str) -> List[str]:
    return Path(locale_gen).read_text(encoding="utf-8").splitlines()


def locale_candidates(locales_dir: str, locale_gen: str) -> List[str]:
    """Locale definitions that also appear (enabled or commented) in locale.gen.

    Variant definitions (``name@modifier``) are left out.
    """

    names = sorted(p.name for p in Path(locales_dir).iterdir() if p.is_file() and "@" not in p.name)
    lines = _read_locale_gen(locale_gen)
    return [n for n in names if any(line.startswith(n) or line.startswith("#" + n) for line in lines)]


def locale_gen_entries(locale_gen: str, lang: str) -> List[str]:
    """All locale.gen entries for ``lang`` (uncommented), plus the fallback."""

    entries: List[str] = []
    for line in _read_locale_gen(locale_gen):
        entry = line[1:] if line.startswith("#" + lang) else line
        if entry.startswith(lang):
            entries.append(entry.strip())
    if FALLBACK_LOCALE not in entries:
        entries.append(FALLBACK_LOCALE)
    return entries


def list_keymaps(runner: CommandRunner) -> List[str]:
    r = runner.run(["localectl", "list-keymaps"], query=True)
    return [line.strip() for line in r.stdout.splitlines() if line.strip()]
