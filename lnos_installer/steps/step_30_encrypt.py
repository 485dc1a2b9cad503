from __future__ import annotations

import logging

from ..lib.crypt import luks_format, luks_open
from ..session import InstallContext

logger = logging.getLogger(__name__)


class EncryptRootStep:
    step_id = "30_encrypt"
    title = "Encrypting root partition"

    def applies(self, ctx: InstallContext) -> bool:
        return bool(ctx.record.encryption_enabled)

    def run(self, ctx: InstallContext) -> None:
        part = ctx.record.root_partition
        luks_format(ctx.runner, part, ctx.record.password)
        # Everything after this point formats/mounts the mapping, not the partition.
        ctx.session.root_device = luks_open(ctx.runner, part, ctx.record.password)
