from __future__ import annotations

import logging
from typing import List

from ..errors import ExternalOperationError
from .command import CommandRunner

logger = logging.getLogger(__name__)


def _blkid_value(runner: CommandRunner, dev: str, tag: str) -> str:
    r = runner.run(["blkid", "-s", tag, "-o", "value", dev])
    value = (r.stdout or "").strip()
    if not value and not runner.dry_run:
        raise ExternalOperationError(r.argv, r.returncode or 1, message=f"Unable to determine {tag} for {dev}")
    return value


def get_uuid(runner: CommandRunner, dev: str) -> str:
    """Return the UUID (filesystem or LUKS header) of a block device."""

    return _blkid_value(runner, dev, "UUID")


def get_partuuid(runner: CommandRunner, dev: str) -> str:
    return _blkid_value(runner, dev, "PARTUUID")


def list_disks(runner: CommandRunner) -> List[str]:
    """Return whole disks as ``/dev/NAME (SIZE) MODEL`` labels."""

    r = runner.run(["lsblk", "-d", "-n", "-o", "NAME,SIZE,MODEL"], query=True)
    items: List[str] = []
    for line in r.stdout.splitlines():
        parts = line.split(None, 2)
        if len(parts) < 2:
            continue
        model = parts[2].strip() if len(parts) > 2 else ""
        items.append(f"/dev/{parts[0]} ({parts[1]}) {model}".rstrip())
    return items


def disk_from_label(label: str) -> str:
    return label.split()[0] if label.strip() else ""
