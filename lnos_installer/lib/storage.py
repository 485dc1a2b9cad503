from __future__ import annotations

import logging
import re
from typing import Tuple

from .command import CommandRunner
from .files import append_file

logger = logging.getLogger(__name__)

# /dev/nvme0n1, /dev/nvme12n3: controller + namespace.
_NVME_RE = re.compile(r"nvme\d+n\d+$")

FILESYSTEMS = ("btrfs", "ext4")


def partition_names(disk: str) -> Tuple[str, str]:
    """Return ``(boot_partition, root_partition)`` for ``disk``.

    NVMe namespaces take a ``p`` before the partition index, everything else
    gets the bare number.
    """

    sep = "p" if _NVME_RE.search(disk) else ""
    return f"{disk}{sep}1", f"{disk}{sep}2"


def wipe_signatures(runner: CommandRunner, disk: str) -> None:
    runner.run(["wipefs", "-af", disk])
    runner.run(["sgdisk", "--zap-all", disk])


def create_table(runner: CommandRunner, disk: str, *, uefi: bool) -> None:
    if uefi:
        runner.run(["sgdisk", "-o", disk])
    else:
        runner.run(["parted", "-s", disk, "mklabel", "msdos"])


def create_gpt_partition(
    runner: CommandRunner,
    disk: str,
    number: int,
    *,
    size: str,
    typecode: str,
    name: str,
) -> None:
    """``size`` is an sgdisk end spec: ``+1G`` or ``0`` for the remainder."""

    runner.run(
        [
            "sgdisk",
            "-n",
            f"{number}:0:{size}",
            "-t",
            f"{number}:{typecode}",
            "-c",
            f"{number}:{name}",
            disk,
        ]
    )


def create_mbr_partition(runner: CommandRunner, disk: str, *, fstype: str, start: str, end: str) -> None:
    runner.run(["parted", "-s", disk, "mkpart", "primary", fstype, start, end])


def set_boot_flag(runner: CommandRunner, disk: str, number: int) -> None:
    runner.run(["parted", "-s", disk, "set", str(number), "boot", "on"])


def reread_partitions(runner: CommandRunner, disk: str) -> None:
    runner.run(["partprobe", disk])


def format_partition(runner: CommandRunner, device: str, fstype: str, *, label: str) -> None:
    if fstype == "fat32":
        runner.run(["mkfs.fat", "-F32", "-n", label, device])
    elif fstype == "ext4":
        runner.run(["mkfs.ext4", "-F", "-L", label, device])
    elif fstype == "btrfs":
        runner.run(["mkfs.btrfs", "-f", "-L", label, device])
    else:
        raise ValueError(f"Unsupported filesystem: {fstype!r}")


def mount(runner: CommandRunner, device: str, mountpoint: str, *, mkdir: bool = False) -> None:
    argv = ["mount"]
    if mkdir:
        argv.append("--mkdir")
    runner.run([*argv, device, mountpoint])


def generate_fstab(runner: CommandRunner, target_root: str) -> None:
    """Append the UUID-based mount table of the current layout to the target."""

    r = runner.run(["genfstab", "-U", target_root])
    append_file(target_root, "/etc/fstab", r.stdout, dry_run=runner.dry_run)
