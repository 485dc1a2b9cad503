from __future__ import annotations

import logging

from ..lib.bootloader import (
    SYSTEMD_BOOT,
    install_grub_bios,
    install_grub_efi,
    install_systemd_boot,
    kernel_args,
    setup_secure_boot,
)
from ..session import InstallContext

logger = logging.getLogger(__name__)


class InstallBootloaderStep:
    step_id = "70_install_bootloader"
    title = "Installing bootloader"

    def applies(self, ctx: InstallContext) -> bool:
        return True

    def run(self, ctx: InstallContext) -> None:
        rec = ctx.record
        root = ctx.target_root
        logger.debug("Installing bootloader: %s (%s)", rec.bootloader, ctx.session.boot_mode)

        # The LUKS header / PARTUUID always lives on the raw partition.
        args = kernel_args(ctx.runner, rec.root_partition, encrypted=bool(rec.encryption_enabled))

        if ctx.uefi and rec.bootloader == SYSTEMD_BOOT:
            install_systemd_boot(ctx.runner, root, args)
            if not setup_secure_boot(ctx.runner, root):
                logger.warning("Secure Boot setup incomplete; enroll keys manually with sbctl")
        elif ctx.uefi:
            install_grub_efi(ctx.runner, root, args)
            logger.warning("GRUB installed on UEFI (Secure Boot not supported)")
        else:
            install_grub_bios(ctx.runner, root, rec.disk, args)
