from __future__ import annotations

import logging

from ..lib.chroot import temporary_pacman_grant
from ..lib.pkg import aur_helper_command, aur_install, build_aur_helper
from ..session import InstallContext

logger = logging.getLogger(__name__)


class InstallAurHelperStep:
    step_id = "85_install_aur_helper"
    title = "Installing AUR helper"

    def applies(self, ctx: InstallContext) -> bool:
        return ctx.record.aur_helper not in ("", "none")

    def run(self, ctx: InstallContext) -> None:
        rec = ctx.record
        helper_cmd = aur_helper_command(rec.aur_helper)

        with temporary_pacman_grant(ctx.target_root, rec.username, dry_run=ctx.dry_run):
            build_aur_helper(ctx.runner, ctx.target_root, rec.username, rec.aur_helper)
            if ctx.session.pending_aur_packages:
                aur_install(ctx.runner, ctx.target_root, rec.username, helper_cmd, ctx.session.pending_aur_packages)
                ctx.session.pending_aur_packages = []

        logger.info("AUR helper installed: %s", rec.aur_helper)
