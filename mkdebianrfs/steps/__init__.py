from .step_10_bootstrap import BootstrapStep
from .step_20_second_stage import SecondStageStep
from .step_30_root_password import RootPasswordStep
from .step_35_locale_timezone import LocaleTimezoneStep
from .step_40_configure_system import ConfigureSystemStep
from .step_60_interactive_shell import InteractiveShellStep
from .step_80_finalize import FinalizeStep
from .step_90_archive import ArchiveStep

__all__ = [
    "BootstrapStep",
    "SecondStageStep",
    "RootPasswordStep",
    "LocaleTimezoneStep",
    "ConfigureSystemStep",
    "InteractiveShellStep",
    "FinalizeStep",
    "ArchiveStep",
]
