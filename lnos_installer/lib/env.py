from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Paths:
    target_root: str = "/mnt"
    config_default: str = "./installer.conf"
    log_default: str = "./installer.log"
    work_parent: str = "."
    efi_marker: str = "/sys/firmware/efi"
    zoneinfo_dir: str = "/usr/share/zoneinfo"
    locales_dir: str = "/usr/share/i18n/locales"
    locale_gen: str = "/etc/locale.gen"
    package_lists_dir: str = "./pacman-packages"
    aux_source: str = "/root/LnOS"


PATHS = Paths()
