from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from .config_store import ConfigStore
from .errors import UserCancellation, ValidationError
from .lib.block import disk_from_label, list_disks
from .lib.bootloader import BOOTLOADERS
from .lib.command import CommandRunner
from .lib.env import PATHS, Paths
from .lib.locales import is_valid_timezone, list_keymaps, locale_candidates, locale_gen_entries
from .lib.manifests import default_driver, load_desktops_manifest, load_drivers_manifest, load_profiles_manifest
from .lib.net import guess_timezone
from .lib.prompt import Prompter
from .lib.storage import FILESYSTEMS, partition_names
from .record import ConfigRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

AUR_HELPERS = ("paru", "paru-git", "none")
SECRET_DISPLAY = "*******"


def retry_until_valid(step: Callable[[], None], *, max_attempts: Optional[int] = None) -> None:
    """Re-run ``step`` until it stops raising ValidationError.

    Unbounded by default; the operator leaves through cancellation. With
    ``max_attempts`` the last ValidationError propagates.
    """

    attempt = 0
    while True:
        attempt += 1
        try:
            step()
            return
        except ValidationError as e:
            logger.warning("%s", e)
            if max_attempts is not None and attempt >= max_attempts:
                raise


class SelectionEngine:
    """Resolves the configuration record one field (or field group) at a time.

    Every ``select_*`` method is idempotent: a field that already holds a
    valid value is only reported. Otherwise the operator is asked, the answer
    validated (ValidationError on failure, field left untouched) and the
    record persisted.
    """

    def __init__(
        self,
        record: ConfigRecord,
        store: ConfigStore,
        prompter: Prompter,
        runner: CommandRunner,
        paths: Paths = PATHS,
        *,
        timezone_lookup: Callable[[], str] = guess_timezone,
    ) -> None:
        self.record = record
        self.store = store
        self.prompter = prompter
        self.runner = runner
        self.paths = paths
        self.timezone_lookup = timezone_lookup

    # -- plumbing -----------------------------------------------------------

    def _confirm_exit(self) -> None:
        try:
            leave = self.prompter.confirm("Exit Installation?", default=False)
        except KeyboardInterrupt:
            raise UserCancellation("Installation cancelled by user") from None
        if leave:
            raise UserCancellation("Installation cancelled by user")

    def _ask(self, fn: Callable[..., T], *args, **kwargs) -> T:
        """Call a prompt; an interrupt asks whether to leave the installer."""

        try:
            return fn(*args, **kwargs)
        except KeyboardInterrupt:
            self._confirm_exit()
            raise ValidationError("Prompt interrupted") from None

    def _persist(self) -> None:
        self.store.save(self.record)

    def _report(self, label: str, value: object) -> None:
        logger.info("• %-24s > %s", label, value)

    def _choose(self, header: str, choices: Sequence[str], *, fuzzy: bool = False) -> str:
        if not choices:
            raise RuntimeError(f"No choices available for: {header}")
        ask = self.prompter.fuzzy if fuzzy else self.prompter.select
        answer = (self._ask(ask, header, list(choices)) or "").strip()
        if not answer:
            raise ValidationError(f"No selection made for: {header.lstrip('+ ')}")
        if answer not in choices:
            raise ValidationError(f"Invalid choice {answer!r}")
        return answer

    def _ask_password_pair(self, what: str) -> str:
        pass1 = self._ask(self.prompter.secret, f"+ Enter {what}")
        if not pass1:
            raise ValidationError(f"{what} must not be empty")
        pass2 = self._ask(self.prompter.secret, f"+ Confirm {what}")
        if pass1 != pass2:
            raise ValidationError(f"{what}s do not match")
        return pass1

    # -- identity -----------------------------------------------------------

    def select_username(self) -> None:
        if not self.record.username:
            answer = (self._ask(self.prompter.text, "+ Enter Username") or "").strip()
            if not answer:
                raise ValidationError("Username must not be empty")
            self.record.username = answer
            self._persist()
        self._report("Username", self.record.username)

    def select_password(self, *, change: bool = False) -> None:
        if change or not self.record.password:
            self.record.password = self._ask_password_pair("User Password")
            self._persist()
        if change:
            logger.info("User password changed")
        else:
            self._report("User Password", SECRET_DISPLAY)

    def select_root_password(self) -> None:
        if not self.record.root_password:
            if self._ask(self.prompter.confirm, "Set separate root password? (Recommended)", default=True):
                self.record.root_password = self._ask_password_pair("Root Password")
            else:
                self.record.root_password = self.record.password
            self._persist()
        same = self.record.root_password == self.record.password
        self._report("Root Password", "Same as user" if same else "Separate")

    # -- locale -------------------------------------------------------------

    def select_timezone(self) -> None:
        if not is_valid_timezone(self.paths.zoneinfo_dir, self.record.timezone):
            guess = self.timezone_lookup()
            answer = (self._ask(self.prompter.text, "+ Enter Timezone (auto-detected)", default=guess) or "").strip()
            if not answer:
                raise ValidationError("Timezone must not be empty")
            if not is_valid_timezone(self.paths.zoneinfo_dir, answer):
                raise ValidationError(f"Invalid timezone: {answer}")
            self.record.timezone = answer
            self._persist()
        self._report("Timezone", self.record.timezone)

    def select_language(self) -> None:
        if not self.record.locale_lang or not self.record.locale_gen_list:
            options = locale_candidates(self.paths.locales_dir, self.paths.locale_gen)
            lang = self._choose("+ Choose Language", options, fuzzy=True)
            self.record.locale_lang = lang
            self.record.locale_gen_list = locale_gen_entries(self.paths.locale_gen, lang)
            self._persist()
        self._report("Language", self.record.locale_lang)

    def select_keyboard(self) -> None:
        if not self.record.vconsole_keymap:
            keymap = self._choose("+ Choose Keyboard Layout", list_keymaps(self.runner), fuzzy=True)
            self.record.vconsole_keymap = keymap
            self._persist()
        self._report("Keyboard", self.record.vconsole_keymap)

    # -- storage ------------------------------------------------------------

    def select_disk(self) -> None:
        if not self.record.disk:
            label = self._choose("+ Choose Disk (WILL BE WIPED!)", list_disks(self.runner))
            disk = disk_from_label(label)
            self.record.disk = disk
            self.record.boot_partition, self.record.root_partition = partition_names(disk)
            self._persist()
        elif not (self.record.boot_partition and self.record.root_partition):
            self.record.boot_partition, self.record.root_partition = partition_names(self.record.disk)
            self._persist()
        self._report("Disk", self.record.disk)
        self._report("Boot Partition", self.record.boot_partition)
        self._report("Root Partition", self.record.root_partition)

    def select_filesystem(self) -> None:
        if self.record.filesystem not in FILESYSTEMS:
            self.record.filesystem = self._choose("+ Choose Root Filesystem", FILESYSTEMS)
            self._persist()
        self._report("Filesystem", self.record.filesystem)

    def select_bootloader(self) -> None:
        if self.record.bootloader not in BOOTLOADERS:
            self.record.bootloader = self._choose(
                "+ Choose Bootloader (systemd = Secure Boot support)", BOOTLOADERS
            )
            self._persist()
        self._report("Bootloader", self.record.bootloader)

    def select_encryption(self) -> None:
        if self.record.encryption_enabled is None:
            self.record.encryption_enabled = bool(
                self._ask(self.prompter.confirm, "Enable full disk encryption?", default=False)
            )
            self._persist()
        self._report("Disk Encryption", "true" if self.record.encryption_enabled else "false")

    # -- features -----------------------------------------------------------

    def select_desktop_environment(self) -> None:
        desktops = load_desktops_manifest()
        if self.record.desktop_enabled is None or self.record.desktop_environment not in desktops:
            name = self._choose("+ Choose Desktop Environment", list(desktops))
            enabled = bool((desktops[name] or {}).get("enabled", True))
            self.record.desktop_environment = name
            self.record.desktop_enabled = enabled
            if not enabled:
                self.record.desktop_graphics_driver = ""
            self._persist()
        self._report("Desktop Environment", self.record.desktop_environment)

    def select_graphics_driver(self) -> None:
        if not self.record.desktop_enabled:
            logger.debug("No desktop; graphics driver not needed")
            return
        drivers = load_drivers_manifest()
        if self.record.desktop_graphics_driver not in drivers:
            header = f"+ Choose Graphics Driver (default: {default_driver()})"
            answer = (self._ask(self.prompter.select, header, list(drivers)) or "").strip()
            if not answer:
                answer = default_driver()
            if answer not in drivers:
                raise ValidationError(f"Invalid graphics driver: {answer}")
            self.record.desktop_graphics_driver = answer
            self._persist()
        self._report("Graphics Driver", self.record.desktop_graphics_driver)

    def select_multilib(self) -> None:
        if self.record.multilib_enabled is None:
            self.record.multilib_enabled = bool(
                self._ask(self.prompter.confirm, "Enable 32-bit support (multilib)?", default=True)
            )
            self._persist()
        self._report("32-bit Support", "true" if self.record.multilib_enabled else "false")

    def select_aur_helper(self) -> None:
        if self.record.aur_helper not in AUR_HELPERS:
            self.record.aur_helper = self._choose("+ Choose AUR Helper", AUR_HELPERS)
            self._persist()
        self._report("AUR Helper", self.record.aur_helper)

    def select_package_profile(self) -> None:
        profiles = list(load_profiles_manifest())
        if self.record.package_profile not in profiles:
            self.record.package_profile = self._choose("+ Choose Package Profile", profiles)
            self._persist()
        self._report("Package Profile", self.record.package_profile)

    # -- driving ------------------------------------------------------------

    def steps(self) -> List[Tuple[str, Callable[[], None]]]:
        return [
            ("Core Setup", self.select_username),
            ("Core Setup", self.select_password),
            ("Core Setup", self.select_root_password),
            ("Core Setup", self.select_timezone),
            ("Core Setup", self.select_language),
            ("Core Setup", self.select_keyboard),
            ("Core Setup", self.select_disk),
            ("Core Setup", self.select_filesystem),
            ("Core Setup", self.select_bootloader),
            ("Desktop & Features", self.select_desktop_environment),
            ("Desktop & Features", self.select_graphics_driver),
            ("Desktop & Features", self.select_encryption),
            ("Desktop & Features", self.select_multilib),
            ("Desktop & Features", self.select_aur_helper),
            ("Desktop & Features", self.select_package_profile),
        ]

    def resolve_all(self, *, max_attempts: Optional[int] = None) -> None:
        section = None
        for title, step in self.steps():
            if title != section:
                logger.info("+ %s", title)
                section = title
            retry_until_valid(step, max_attempts=max_attempts)

    def run(self, *, max_attempts: Optional[int] = None) -> None:
        """Resolve everything, repeating until the operator confirms the summary."""

        while True:
            self.resolve_all(max_attempts=max_attempts)
            logger.info("+ Summary")
            try:
                if self._ask(self.prompter.confirm, "Start LnOS installation?", default=True):
                    return
                if self._ask(self.prompter.confirm, "Reset all answers and start over?", default=False):
                    self.record.reset()
                    self._persist()
                    logger.info("Configuration reset")
            except ValidationError:
                # Interrupted but chose to stay; show the summary again.
                continue
