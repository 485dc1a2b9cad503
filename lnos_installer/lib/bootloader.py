from __future__ import annotations

import logging
from typing import List, Sequence

from .block import get_partuuid, get_uuid
from .chroot import chroot_cmd
from .command import CommandRunner
from .crypt import mapped_device
from .files import edit_lines, write_file
from .pkg import pacman_install

logger = logging.getLogger(__name__)

GRUB = "grub"
SYSTEMD_BOOT = "systemd"
BOOTLOADERS = (GRUB, SYSTEMD_BOOT)

KERNEL_IMAGE = "vmlinuz-linux-hardened"
INITRAMFS_IMAGE = "initramfs-linux-hardened.img"
ENTRY_NAME = "main.conf"
BOOTLOADER_ID = "GRUB"


def kernel_args(runner: CommandRunner, root_partition: str, *, encrypted: bool) -> List[str]:
    """Kernel command line: the root reference depends on the encryption state."""

    args = ["rw"]
    if encrypted:
        luks_uuid = get_uuid(runner, root_partition)
        args += [f"rd.luks.uuid={luks_uuid}", f"root={mapped_device()}"]
    else:
        args.append(f"root=PARTUUID={get_partuuid(runner, root_partition)}")
    return args


def install_systemd_boot(
    runner: CommandRunner,
    target_root: str,
    args: Sequence[str],
    *,
    title: str = "LnOS",
) -> None:
    """Install systemd-boot to the ESP mounted at /boot and write one entry."""

    chroot_cmd(runner, target_root, ["bootctl", "--esp-path=/boot", "install"])
    write_file(
        target_root,
        "/boot/loader/loader.conf",
        f"default {ENTRY_NAME}\ntimeout 0\neditor no\n",
        dry_run=runner.dry_run,
    )
    write_file(
        target_root,
        f"/boot/loader/entries/{ENTRY_NAME}",
        (
            f"title   {title}\n"
            f"linux   /{KERNEL_IMAGE}\n"
            f"initrd  /{INITRAMFS_IMAGE}\n"
            f"options {' '.join(args)}\n"
        ),
        dry_run=runner.dry_run,
    )
    logger.info("systemd-boot installed")


def setup_secure_boot(runner: CommandRunner, target_root: str) -> bool:
    """Best-effort Secure Boot with sbctl. Failures are warnings only.

    Returns True when every sub-step succeeded.
    """

    ok = True
    r = chroot_cmd(runner, target_root, ["pacman", "-S", "--noconfirm", "--needed", "sbctl"], check=False)
    if not r.ok:
        logger.warning("Secure Boot skipped: could not install sbctl (code %s)", r.returncode)
        return False

    steps = [
        ["sbctl", "create-keys"],
        ["sbctl", "enroll-keys", "--microsoft", "--yes-this-might-brick-my-machine"],
    ]
    for f in (
        f"/boot/{KERNEL_IMAGE}",
        f"/boot/{INITRAMFS_IMAGE}",
        "/boot/loader/loader.conf",
        f"/boot/loader/entries/{ENTRY_NAME}",
    ):
        steps.append(["sbctl", "sign", "-s", f])

    for argv in steps:
        r = chroot_cmd(runner, target_root, argv, check=False)
        if not r.ok:
            ok = False
            logger.warning("Secure Boot step failed (code %s): %s", r.returncode, " ".join(argv))
    return ok


def _append_cmdline(args: Sequence[str]):
    extra = " ".join(args)

    def edit(lines: List[str]) -> List[str]:
        out: List[str] = []
        for line in lines:
            if line.startswith("GRUB_CMDLINE_LINUX_DEFAULT=") and line.rstrip().endswith('"'):
                head = line.rstrip()[:-1].rstrip()
                sep = "" if head.endswith('"') else " "
                line = f'{head}{sep}{extra}"'
            out.append(line)
        return out

    return edit


def append_grub_cmdline(target_root: str, args: Sequence[str], *, dry_run: bool = False) -> None:
    edit_lines(target_root, "/etc/default/grub", _append_cmdline(args), dry_run=dry_run)


def grub_mkconfig(runner: CommandRunner, target_root: str) -> None:
    chroot_cmd(runner, target_root, ["grub-mkconfig", "-o", "/boot/grub/grub.cfg"])


def install_grub_efi(runner: CommandRunner, target_root: str, args: Sequence[str]) -> None:
    """Install GRUB for x86_64 EFI targets (ESP mounted at /boot)."""

    pacman_install(runner, target_root, ["grub", "efibootmgr"])
    chroot_cmd(
        runner,
        target_root,
        [
            "grub-install",
            "--target=x86_64-efi",
            "--efi-directory=/boot",
            f"--bootloader-id={BOOTLOADER_ID}",
        ],
    )
    append_grub_cmdline(target_root, args, dry_run=runner.dry_run)
    grub_mkconfig(runner, target_root)
    logger.info("GRUB EFI installed")


def install_grub_bios(runner: CommandRunner, target_root: str, disk: str, args: Sequence[str]) -> None:
    """Install GRUB to the MBR of the whole disk."""

    pacman_install(runner, target_root, ["grub"])
    append_grub_cmdline(target_root, args, dry_run=runner.dry_run)
    chroot_cmd(runner, target_root, ["grub-install", "--target=i386-pc", disk])
    grub_mkconfig(runner, target_root)
    logger.info("GRUB BIOS installed on %s", disk)
