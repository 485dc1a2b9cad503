from __future__ import annotations

import logging

from ..errors import UserCancellation
from ..lib.storage import (
    create_gpt_partition,
    create_mbr_partition,
    create_table,
    reread_partitions,
    set_boot_flag,
    wipe_signatures,
)
from ..session import InstallContext

logger = logging.getLogger(__name__)

ESP_SIZE = "+1G"


class PartitionDiskStep:
    step_id = "20_partition"
    title = "Partitioning disk"

    def applies(self, ctx: InstallContext) -> bool:
        return True

    def run(self, ctx: InstallContext) -> None:
        disk = ctx.record.disk
        if not disk:
            raise RuntimeError("disk is required for partitioning")
        if ctx.session.boot_mode is None:
            raise RuntimeError("boot mode unknown; run boot mode detection first")

        if not ctx.prompter.confirm(f"This will COMPLETELY WIPE {disk}. Continue?", default=False):
            raise UserCancellation(f"Declined to wipe {disk}")

        wipe_signatures(ctx.runner, disk)
        create_table(ctx.runner, disk, uefi=ctx.uefi)

        if ctx.uefi:
            create_gpt_partition(ctx.runner, disk, 1, size=ESP_SIZE, typecode="ef00", name="boot")
            create_gpt_partition(ctx.runner, disk, 2, size="0", typecode="8300", name="root")
        else:
            create_mbr_partition(ctx.runner, disk, fstype="fat32", start="1MiB", end="513MiB")
            create_mbr_partition(ctx.runner, disk, fstype="ext2", start="513MiB", end="100%")
            set_boot_flag(ctx.runner, disk, 1)

        reread_partitions(ctx.runner, disk)
        logger.info(
            "Partitioned %s (%s): boot=%s root=%s",
            disk,
            "GPT" if ctx.uefi else "MBR",
            ctx.record.boot_partition,
            ctx.record.root_partition,
        )
