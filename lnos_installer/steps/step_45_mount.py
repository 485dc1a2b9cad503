from __future__ import annotations

import logging

from ..lib.storage import mount
from ..session import InstallContext

logger = logging.getLogger(__name__)


class MountStep:
    step_id = "45_mount"
    title = "Mounting filesystems"

    def applies(self, ctx: InstallContext) -> bool:
        return True

    def run(self, ctx: InstallContext) -> None:
        mount(ctx.runner, ctx.root_device, ctx.target_root)
        mount(ctx.runner, ctx.record.boot_partition, f"{ctx.target_root}/boot", mkdir=True)
        logger.debug("Mounted %s at %s", ctx.root_device, ctx.target_root)
