from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import List, Sequence

from .chroot import chroot_cmd, run_as_user
from .command import CommandRunner
from .files import edit_lines

logger = logging.getLogger(__name__)

AUR_BASE_URL = "https://aur.archlinux.org"


def pacstrap(runner: CommandRunner, target_root: str, packages: Sequence[str]) -> None:
    runner.run(["pacstrap", "-K", target_root, *packages])


def pacman_install(runner: CommandRunner, target_root: str, packages: Sequence[str]) -> None:
    if not packages:
        return
    chroot_cmd(runner, target_root, ["pacman", "-S", "--noconfirm", "--needed", *packages])


def pacman_refresh(runner: CommandRunner, target_root: str) -> None:
    """Force-refresh package databases and upgrade the target."""

    chroot_cmd(runner, target_root, ["pacman", "-Syyu", "--noconfirm"])


def query_orphans(runner: CommandRunner, target_root: str) -> List[str]:
    # pacman -Qtdq exits 1 when there is nothing to report.
    r = chroot_cmd(runner, target_root, ["pacman", "-Qtdq"], check=False)
    if not r.ok:
        return []
    return [line.strip() for line in r.stdout.splitlines() if line.strip()]


def remove_packages(runner: CommandRunner, target_root: str, packages: Sequence[str]) -> None:
    if not packages:
        return
    chroot_cmd(runner, target_root, ["pacman", "-Rns", "--noconfirm", *packages])


def _uncomment_multilib(lines: List[str]) -> List[str]:
    out: List[str] = []
    in_block = False
    for line in lines:
        if line.strip() == "#[multilib]":
            in_block = True
        if in_block and line.startswith("#"):
            line = line[1:]
            if line.startswith("Include"):
                in_block = False
        out.append(line)
    return out


def enable_multilib_repo(target_root: str, *, dry_run: bool = False) -> None:
    """Uncomment the [multilib] block of the target's pacman.conf."""

    edit_lines(target_root, "/etc/pacman.conf", _uncomment_multilib, dry_run=dry_run)


def build_aur_helper(runner: CommandRunner, target_root: str, username: str, helper: str) -> None:
    """Clone and build ``helper`` from the AUR as ``username``.

    makepkg installs through sudo, so the caller must hold a pacman grant.
    """

    workdir = f"/tmp/{helper}"
    script = " && ".join(
        [
            f"rm -rf {shlex.quote(workdir)}",
            f"git clone {shlex.quote(f'{AUR_BASE_URL}/{helper}.git')} {shlex.quote(workdir)}",
            f"cd {shlex.quote(workdir)}",
            "makepkg -si --noconfirm",
        ]
    )
    run_as_user(runner, target_root, username, ["bash", "-c", script])


def aur_install(
    runner: CommandRunner,
    target_root: str,
    username: str,
    helper: str,
    packages: Sequence[str],
) -> None:
    if not packages:
        return
    run_as_user(runner, target_root, username, [helper, "-S", "--noconfirm", *packages])


def read_package_list(path: str) -> List[str]:
    """Read a package list file: one name per line, '#' comments allowed."""

    p = Path(path)
    if not p.is_file():
        return []
    pkgs: List[str] = []
    for line in p.read_text(encoding="utf-8").splitlines():
        line = line.split("#", 1)[0].strip()
        if line:
            pkgs.extend(line.split())
    return pkgs


def aur_helper_command(helper: str) -> str:
    """Binary name of an AUR helper package (``paru-git`` installs ``paru``)."""

    for suffix in ("-git", "-bin"):
        if helper.endswith(suffix):
            return helper[: -len(suffix)]
    return helper
