from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Sequence

from .command import CmdResult, CommandRunner
from .files import target_path

logger = logging.getLogger(__name__)

TEMP_GRANT_REL = "/etc/sudoers.d/aur-temp"


def chroot_cmd(
    runner: CommandRunner,
    target_root: str,
    argv: Sequence[str],
    *,
    check: bool = True,
    input_text: str | None = None,
) -> CmdResult:
    """Run a command inside target root."""

    return runner.run(["arch-chroot", target_root, *argv], check=check, input_text=input_text)


def run_as_user(
    runner: CommandRunner,
    target_root: str,
    username: str,
    argv: Sequence[str],
    *,
    check: bool = True,
) -> CmdResult:
    """Run a command inside target root under an unprivileged user."""

    return chroot_cmd(runner, target_root, ["/usr/bin/runuser", "-u", username, "--", *argv], check=check)


@contextmanager
def temporary_pacman_grant(target_root: str, username: str, *, dry_run: bool = False) -> Iterator[None]:
    """Let ``username`` run pacman via sudo without a password for the block.

    The grant file is removed on every exit path.
    """

    grant = target_path(target_root, TEMP_GRANT_REL)
    if dry_run:
        logger.info("Would grant %s passwordless pacman for the AUR build", username)
        yield
        return

    grant.parent.mkdir(parents=True, exist_ok=True)
    grant.write_text(f"{username} ALL=(ALL) NOPASSWD: /usr/bin/pacman\n", encoding="utf-8")
    grant.chmod(0o440)
    logger.debug("Temporary pacman grant written for %s", username)
    try:
        yield
    finally:
        grant.unlink(missing_ok=True)
        logger.debug("Temporary pacman grant revoked for %s", username)
