from __future__ import annotations

import logging

from .command import CommandRunner

logger = logging.getLogger(__name__)

MAPPING_NAME = "cryptroot"


def mapped_device(name: str = MAPPING_NAME) -> str:
    return f"/dev/mapper/{name}"


def luks_format(runner: CommandRunner, device: str, passphrase: str) -> None:
    """Initialize a LUKS2 container on ``device``. The passphrase goes over stdin."""

    runner.run(
        ["cryptsetup", "luksFormat", "--type", "luks2", "--batch-mode", "--key-file", "-", device],
        input_text=passphrase,
    )


def luks_open(runner: CommandRunner, device: str, passphrase: str, name: str = MAPPING_NAME) -> str:
    runner.run(["cryptsetup", "open", "--key-file", "-", device, name], input_text=passphrase)
    logger.info("Opened encrypted container %s as %s", device, mapped_device(name))
    return mapped_device(name)


def luks_close(runner: CommandRunner, name: str = MAPPING_NAME) -> None:
    runner.run(["cryptsetup", "close", name])
