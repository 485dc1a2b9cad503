from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import List, Optional, Tuple

SECRET_FIELDS: Tuple[str, ...] = ("password", "root_password")
LIST_FIELDS: Tuple[str, ...] = ("locale_gen_list",)
BOOL_FIELDS: Tuple[str, ...] = ("encryption_enabled", "desktop_enabled", "multilib_enabled")


@dataclass
class ConfigRecord:
    """Every answer the installer needs, resolved field by field.

    Empty string / empty list / None means "not resolved yet". Selection
    steps only ever store values that passed their validator.
    """

    username: str = ""
    password: str = ""
    root_password: str = ""
    timezone: str = ""
    locale_lang: str = ""
    locale_gen_list: List[str] = field(default_factory=list)
    vconsole_keymap: str = ""
    disk: str = ""
    boot_partition: str = ""
    root_partition: str = ""
    filesystem: str = ""
    bootloader: str = ""
    encryption_enabled: Optional[bool] = None
    desktop_enabled: Optional[bool] = None
    desktop_environment: str = ""
    desktop_graphics_driver: str = ""
    multilib_enabled: Optional[bool] = None
    aur_helper: str = ""
    package_profile: str = ""

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    def unresolved(self) -> List[str]:
        """Names of fields still empty.

        The graphics driver only matters when a desktop is enabled.
        """

        missing = []
        for name in self.field_names():
            if name == "desktop_graphics_driver" and not self.desktop_enabled:
                continue
            value = getattr(self, name)
            if value is None or value == "" or value == []:
                missing.append(name)
        return missing

    def is_complete(self) -> bool:
        return not self.unresolved()

    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, [] if f.name in LIST_FIELDS else (None if f.name in BOOL_FIELDS else ""))

    def scrub_secrets(self) -> None:
        # Python strings are immutable; dropping the references is the best we can do.
        for name in SECRET_FIELDS:
            setattr(self, name, "")
