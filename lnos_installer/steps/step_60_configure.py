from __future__ import annotations

import logging
import re
from typing import List

from ..lib.chroot import chroot_cmd
from ..lib.files import edit_lines, uncomment_entries, write_file
from ..session import InstallContext

logger = logging.getLogger(__name__)

HOSTNAME = "LnOS"
USER_GROUPS = "wheel,audio,video,optical,storage"
ENCRYPT_HOOKS = "HOOKS=(base systemd autodetect keyboard sd-vconsole modconf block sd-encrypt filesystems fsck)"
NETWORK_SERVICE = "NetworkManager"


def _set_encrypt_hooks(lines: List[str]) -> List[str]:
    return [ENCRYPT_HOOKS if line.startswith("HOOKS=") else line for line in lines]


def _enable_wheel(lines: List[str]) -> List[str]:
    return [re.sub(r"^#\s*(%wheel ALL=\(ALL(:ALL)?\) ALL)\s*$", r"\1", line) for line in lines]


class ConfigureSystemStep:
    step_id = "60_configure"
    title = "Configuring system"

    def applies(self, ctx: InstallContext) -> bool:
        return True

    def run(self, ctx: InstallContext) -> None:
        rec = ctx.record
        root = ctx.target_root
        dry_run = ctx.dry_run

        chroot_cmd(ctx.runner, root, ["ln", "-sf", f"/usr/share/zoneinfo/{rec.timezone}", "/etc/localtime"])
        chroot_cmd(ctx.runner, root, ["hwclock", "--systohc"])

        edit_lines(root, "/etc/locale.gen", lambda ls: uncomment_entries(ls, rec.locale_gen_list), dry_run=dry_run)
        chroot_cmd(ctx.runner, root, ["locale-gen"])
        write_file(root, "/etc/locale.conf", f"LANG={rec.locale_lang}.UTF-8\n", dry_run=dry_run)
        write_file(root, "/etc/vconsole.conf", f"KEYMAP={rec.vconsole_keymap}\n", dry_run=dry_run)

        write_file(root, "/etc/hostname", HOSTNAME + "\n", dry_run=dry_run)
        write_file(root, "/etc/hosts", "127.0.0.1   localhost\n::1         localhost\n", dry_run=dry_run)

        if rec.encryption_enabled:
            edit_lines(root, "/etc/mkinitcpio.conf", _set_encrypt_hooks, dry_run=dry_run)
        chroot_cmd(ctx.runner, root, ["mkinitcpio", "-P"])

        chroot_cmd(ctx.runner, root, ["useradd", "-m", "-G", USER_GROUPS, "-s", "/bin/bash", rec.username])
        # chpasswd reads user:password pairs on stdin; nothing lands in argv or the log.
        chroot_cmd(
            ctx.runner,
            root,
            ["chpasswd"],
            input_text=f"{rec.username}:{rec.password}\nroot:{rec.root_password}\n",
        )

        edit_lines(root, "/etc/sudoers", _enable_wheel, dry_run=dry_run)
        chroot_cmd(ctx.runner, root, ["systemctl", "enable", NETWORK_SERVICE])

        logger.info("Configured hostname=%s user=%s", HOSTNAME, rec.username)
