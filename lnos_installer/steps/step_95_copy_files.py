from __future__ import annotations

import logging
from pathlib import Path

from ..lib.assets import copy_tree, overlay_file
from ..lib.files import target_path
from ..session import InstallContext

logger = logging.getLogger(__name__)

DEST_REL = "/root/LnOS"
OS_RELEASE_REL = "files/os-release"


class CopyAuxFilesStep:
    step_id = "95_copy_files"
    title = "Copying LnOS custom files"

    def applies(self, ctx: InstallContext) -> bool:
        if Path(ctx.paths.aux_source).is_dir():
            return True
        logger.warning("LnOS repo not found at %s", ctx.paths.aux_source)
        return False

    def run(self, ctx: InstallContext) -> None:
        dest = target_path(ctx.target_root, DEST_REL)
        count = copy_tree(ctx.paths.aux_source, str(dest), dry_run=ctx.dry_run)

        # Read from the source tree so a dry run resolves it too.
        os_release = Path(ctx.paths.aux_source) / OS_RELEASE_REL
        if overlay_file(os_release, ctx.target_root, "/etc/os-release", dry_run=ctx.dry_run):
            logger.info("Installed custom os-release")

        logger.info("LnOS files copied (%d files)", count)
