from .step_10_detect_boot_mode import DetectBootModeStep
from .step_20_partition import PartitionDiskStep
from .step_30_encrypt import EncryptRootStep
from .step_40_format import FormatStep
from .step_45_mount import MountStep
from .step_50_install_base import InstallBaseStep
from .step_60_configure import ConfigureSystemStep
from .step_70_install_bootloader import InstallBootloaderStep
from .step_75_enable_multilib import EnableMultilibStep
from .step_80_install_desktop import InstallDesktopStep
from .step_82_install_graphics_driver import InstallGraphicsDriverStep
from .step_85_install_aur_helper import InstallAurHelperStep
from .step_90_install_packages import InstallPackagesStep
from .step_95_copy_files import CopyAuxFilesStep
from .step_99_finalize import FinalizeStep

__all__ = [
    "DetectBootModeStep",
    "PartitionDiskStep",
    "EncryptRootStep",
    "FormatStep",
    "MountStep",
    "InstallBaseStep",
    "ConfigureSystemStep",
    "InstallBootloaderStep",
    "EnableMultilibStep",
    "InstallDesktopStep",
    "InstallGraphicsDriverStep",
    "InstallAurHelperStep",
    "InstallPackagesStep",
    "CopyAuxFilesStep",
    "FinalizeStep",
]
