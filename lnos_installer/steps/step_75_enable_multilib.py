from __future__ import annotations

import logging

from ..lib.pkg import enable_multilib_repo, pacman_refresh
from ..session import InstallContext

logger = logging.getLogger(__name__)


class EnableMultilibStep:
    step_id = "75_enable_multilib"
    title = "Enabling multilib repository"

    def applies(self, ctx: InstallContext) -> bool:
        return bool(ctx.record.multilib_enabled)

    def run(self, ctx: InstallContext) -> None:
        enable_multilib_repo(ctx.target_root, dry_run=ctx.dry_run)
        pacman_refresh(ctx.runner, ctx.target_root)
        logger.info("Multilib enabled")
