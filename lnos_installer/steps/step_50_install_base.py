from __future__ import annotations

import logging
from typing import List

from ..lib.bootloader import GRUB
from ..lib.manifests import load_packages_manifest
from ..lib.pkg import pacstrap
from ..lib.storage import generate_fstab
from ..session import InstallContext

logger = logging.getLogger(__name__)


def base_packages(ctx: InstallContext) -> List[str]:
    manifest = load_packages_manifest()
    packages = list(manifest.get("base") or [])
    if ctx.record.filesystem == "btrfs":
        packages += list(manifest.get("btrfs_tools") or [])
    if ctx.record.bootloader == GRUB:
        packages.append("grub")
        if ctx.uefi:
            packages.append("efibootmgr")
    return packages


class InstallBaseStep:
    step_id = "50_install_base"
    title = "Installing base system"

    def applies(self, ctx: InstallContext) -> bool:
        return True

    def run(self, ctx: InstallContext) -> None:
        packages = base_packages(ctx)
        pacstrap(ctx.runner, ctx.target_root, packages)
        generate_fstab(ctx.runner, ctx.target_root)
        logger.info("Base system installed (%d packages)", len(packages))
