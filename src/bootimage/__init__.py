"""Public package entrypoint for boot image configuration derivation."""

from .boot_image import (
    BootImageConfig,
    BootImageConfigs,
    BootImageVariant,
    art_boot_image_config,
    default_boot_image_config,
    expand_variants,
    gen_boot_image_configs,
)
from .classpath import bcp_for_dexpreopt, non_updatable_system_server_jars, system_server_classpath
from .config import GlobalConfig, config_fingerprint, parse_global_config, read_global_config
from .context import BuildContext
from .errors import BootImageError, ConfigInvariantError, ErrorCode, ValidationError
from .jars import ConfiguredJarList
from .makevars import dexpreopt_config_makevars, write_makevars
from .observability import StructuredLogger
from .once import OnceCache, OnceKey
from .paths import OutputPath
from .report import DerivationReport, derivation_report
from .targets import ArchType, OsType, Target, dexpreopt_targets
from .updatable import UpdatableBootConfig, get_updatable_boot_config

__all__ = [
    "ArchType",
    "BootImageConfig",
    "BootImageConfigs",
    "BootImageError",
    "BootImageVariant",
    "BuildContext",
    "ConfigInvariantError",
    "ConfiguredJarList",
    "DerivationReport",
    "ErrorCode",
    "GlobalConfig",
    "OnceCache",
    "OnceKey",
    "OsType",
    "OutputPath",
    "StructuredLogger",
    "Target",
    "UpdatableBootConfig",
    "ValidationError",
    "art_boot_image_config",
    "bcp_for_dexpreopt",
    "config_fingerprint",
    "default_boot_image_config",
    "derivation_report",
    "dexpreopt_config_makevars",
    "dexpreopt_targets",
    "expand_variants",
    "gen_boot_image_configs",
    "get_updatable_boot_config",
    "non_updatable_system_server_jars",
    "parse_global_config",
    "read_global_config",
    "system_server_classpath",
    "write_makevars",
]
