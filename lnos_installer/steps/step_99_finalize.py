from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ..lib.chroot import chroot_cmd
from ..lib.files import target_path
from ..lib.pkg import query_orphans, remove_packages
from ..session import InstallContext

logger = logging.getLogger(__name__)


class FinalizeStep:
    step_id = "99_finalize"
    title = "Finalizing"

    def applies(self, ctx: InstallContext) -> bool:
        return True

    def run(self, ctx: InstallContext) -> None:
        user = ctx.record.username
        home = target_path(ctx.target_root, f"/home/{user}")

        for src, name in ((ctx.config_path, "installer.conf"), (ctx.log_path, "installer.log")):
            if not Path(src).is_file():
                logger.debug("Nothing to copy at %s", src)
                continue
            if ctx.dry_run:
                logger.info("Would copy %s -> %s", src, str(home / name))
                continue
            home.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, home / name)

        chroot_cmd(ctx.runner, ctx.target_root, ["chown", "-R", f"{user}:{user}", f"/home/{user}"])

        orphans = query_orphans(ctx.runner, ctx.target_root)
        if orphans:
            remove_packages(ctx.runner, ctx.target_root, orphans)
            logger.info("Removed %d orphaned packages", len(orphans))

        logger.info("Installation finalized")
