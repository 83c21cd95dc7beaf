"""Build and install paths of updatable boot jars.

Updatable boot jars are compiled on their own and added to the runtime
classpath, but are never part of a boot image. Their paths are fixed up
front so that dexpreopt rules can refer to them before the modules
producing them are processed; a later step copies the real jars there.
"""

from __future__ import annotations

from dataclasses import dataclass

from .context import BuildContext
from .jars import ConfiguredJarList
from .once import OnceKey
from .paths import OutputPath, path_for_output
from .targets import OsType

_UPDATABLE_BOOT_CONFIG_KEY = OnceKey("updatableBootConfig")


@dataclass(frozen=True, slots=True)
class UpdatableBootConfig:
    modules: ConfiguredJarList
    dex_paths: tuple[OutputPath, ...]
    dex_locations: tuple[str, ...]


def get_updatable_boot_config(ctx: BuildContext) -> UpdatableBootConfig:
    return ctx.once.get_or_compute(
        _UPDATABLE_BOOT_CONFIG_KEY, lambda: _build_updatable_boot_config(ctx)
    )


def _build_updatable_boot_config(ctx: BuildContext) -> UpdatableBootConfig:
    modules = ctx.config.updatable_boot_jars
    directory = path_for_output(ctx.config, ctx.config.device_name, "updatable_bootjars")
    ctx.logger.log(
        operation="get_updatable_boot_config",
        config=None,
        message="Derived updatable boot config.",
        extra={"modules": len(modules)},
    )
    return UpdatableBootConfig(
        modules=modules,
        dex_paths=modules.build_paths(directory),
        dex_locations=modules.device_paths(ctx.config, OsType.ANDROID),
    )


__all__ = [
    "UpdatableBootConfig",
    "get_updatable_boot_config",
]
