from __future__ import annotations

from pathlib import Path

from .env import PATHS

UEFI = "uefi"
BIOS = "bios"


def detect_boot_mode(efi_marker: str = PATHS.efi_marker) -> str:
    """Detect firmware type for the *currently running* environment.

    Returns: 'uefi' or 'bios'.
    """

    if Path(efi_marker).exists():
        return UEFI
    return BIOS
