"""Runtime and dexpreopt classpaths.

Non-updatable jars always come before updatable ones: both dex2oat and the
runtime resolve a class from the first jar on the classpath defining it.
"""

from __future__ import annotations

import posixpath

from .boot_image import gen_boot_image_configs
from .config import GlobalConfig
from .context import BuildContext
from .errors import ConfigInvariantError
from .once import OnceKey
from .paths import OutputPath
from .targets import OsType
from .updatable import get_updatable_boot_config

SYSTEM_FRAMEWORK_DIR = "/system/framework"

_SYSTEM_SERVER_CLASSPATH_KEY = OnceKey("systemServerClasspath")


def non_updatable_system_server_jars(config: GlobalConfig) -> tuple[str, ...]:
    """Return the system server jars that no updatable apex supplies."""
    updatable = set(config.updatable_system_server_jars.jars())
    return tuple(jar for jar in config.system_server_jars if jar not in updatable)


def system_server_classpath(ctx: BuildContext) -> tuple[str, ...]:
    """Return the on-device locations of the system server classpath jars."""
    return ctx.once.get_or_compute(
        _SYSTEM_SERVER_CLASSPATH_KEY, lambda: _build_system_server_classpath(ctx)
    )


def _build_system_server_classpath(ctx: BuildContext) -> tuple[str, ...]:
    config = ctx.config
    locations = [
        posixpath.join(SYSTEM_FRAMEWORK_DIR, jar + ".jar")
        for jar in non_updatable_system_server_jars(config)
    ]
    # Updatable jars live wherever their apex is mounted.
    locations.extend(config.updatable_system_server_jars.device_paths(config, OsType.ANDROID))

    expected = len(config.system_server_jars) + len(config.updatable_system_server_jars)
    if len(locations) != expected:
        raise ConfigInvariantError(
            "wrong number of system server jars",
            expected=expected,
            actual=len(locations),
            hint="A jar listed in both system server lists is counted twice.",
            context={"operation": "system_server_classpath"},
        )
    ctx.logger.log(
        operation="system_server_classpath",
        config=None,
        message="Derived system server classpath.",
        extra={"jars": len(locations)},
    )
    return tuple(locations)


def bcp_for_dexpreopt(
    ctx: BuildContext, *, with_updatable: bool
) -> tuple[tuple[OutputPath, ...], tuple[str, ...]]:
    """Return the boot jar paths and locations used to dexpreopt an app or library.

    These feed the ``-Xbootclasspath`` and ``-Xbootclasspath-locations``
    arguments of dex2oat. Updatable boot jars are included only when
    *with_updatable* is set, after the non-updatable ones.
    """
    configs = gen_boot_image_configs(ctx)
    boot_image = configs.default
    dex_paths = boot_image.dex_paths_deps
    variant = boot_image.get_any_android_variant()
    if variant is not None:
        dex_locations = variant.dex_locations_deps
    else:
        # No device targets were configured; the locations do not depend on the variant.
        modules = configs.art.modules.append_list(boot_image.modules)
        dex_locations = modules.device_paths(ctx.config, OsType.ANDROID)

    if with_updatable:
        updatable = get_updatable_boot_config(ctx)
        dex_paths = dex_paths + updatable.dex_paths
        dex_locations = dex_locations + updatable.dex_locations

    return dex_paths, dex_locations


__all__ = [
    "SYSTEM_FRAMEWORK_DIR",
    "bcp_for_dexpreopt",
    "non_updatable_system_server_jars",
    "system_server_classpath",
]
