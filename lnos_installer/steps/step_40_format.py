from __future__ import annotations

import logging

from ..lib.storage import format_partition
from ..session import InstallContext

logger = logging.getLogger(__name__)


class FormatStep:
    step_id = "40_format"
    title = "Formatting partitions"

    def applies(self, ctx: InstallContext) -> bool:
        return True

    def run(self, ctx: InstallContext) -> None:
        format_partition(ctx.runner, ctx.record.boot_partition, "fat32", label="BOOT")
        format_partition(ctx.runner, ctx.root_device, ctx.record.filesystem, label="ROOT")
        logger.info("Formatted boot=fat32 root=%s (%s)", ctx.record.filesystem, ctx.root_device)
