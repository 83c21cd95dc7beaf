"""Layered boot image configs and their per-target variants.

Two configs are derived for every build invocation:

* ``art`` -- the primary boot image with the core libraries from the ART apex.
* ``boot`` -- the framework extension, built against and loaded after ``art``.

Each config is expanded into one variant per dexpreopt target. Expansion is
per config and knows nothing about layering; the builder wires each extension
to its parent afterwards.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace
from typing import Any

from .config import GlobalConfig
from .context import BuildContext
from .errors import ConfigInvariantError
from .jars import ConfiguredJarList, module_stem
from .once import OnceKey
from .paths import OutputPath, path_for_output, path_to_location
from .targets import OsType, Target, dexpreopt_targets

ART_BOOT_IMAGE_NAME = "art"
FRAMEWORK_BOOT_IMAGE_NAME = "boot"
BOOT_IMAGE_STEM = "boot"

ART_DIR_ON_HOST = "apex/art_boot_images/javalib"
FRAMEWORK_SUBDIR = "system/framework"

IMAGE_EXTENSIONS = (".art", ".oat", ".vdex")

_BOOT_IMAGE_CONFIG_KEY = OnceKey("bootImageConfig")


@dataclass(frozen=True, slots=True)
class BootImageVariant:
    """One target-specific instantiation of a :class:`BootImageConfig`."""

    config_name: str
    target: Target
    # Path of the image file built for this target, e.g.
    # out/<device>/dex_bootjars/android/system/framework/arm64/boot-framework.art
    image_path_on_host: OutputPath
    # Every file dex2oat writes next to the image for this target.
    images_deps: tuple[OutputPath, ...]
    # On-device locations of this config's jars only.
    dex_locations: tuple[str, ...]
    # Locations of this config's jars and all of its ancestors', ancestors first.
    dex_locations_deps: tuple[str, ...]
    # Image of the parent config for the same target; None for a primary image.
    primary_images: OutputPath | None = None


@dataclass(frozen=True, slots=True)
class BootImageConfig:
    name: str
    stem: str
    install_dir_on_host: str
    modules: ConfiguredJarList
    # Name of the config this one extends, looked up in the owning BootImageConfigs.
    extends: str | None
    dir: OutputPath
    symbols_dir: OutputPath
    zip: OutputPath
    dex_paths: tuple[OutputPath, ...]
    dex_paths_deps: tuple[OutputPath, ...]
    variants: tuple[BootImageVariant, ...] = ()

    def module_name(self, idx: int) -> str:
        """Return the file stem of the image compiled from module *idx*.

        The first module of a primary image is compiled into ``<stem>.art``;
        every other module, and every module of an extension, into
        ``<stem>-<module>.art``.
        """
        name = self.stem
        if idx != 0 or self.extends is not None:
            name += "-" + module_stem(self.modules.jar(idx))
        return name

    def first_module_name_or_stem(self) -> str:
        if len(self.modules) > 0:
            return self.module_name(0)
        return self.stem

    def module_files(self, directory: OutputPath, *exts: str) -> tuple[OutputPath, ...]:
        return tuple(
            directory.join(self.module_name(idx) + ext)
            for idx in range(len(self.modules))
            for ext in exts
        )

    def get_variant(self, target: Target) -> BootImageVariant | None:
        for variant in self.variants:
            if variant.target == target:
                return variant
        return None

    def get_any_android_variant(self) -> BootImageVariant | None:
        # The dex locations of all Android variants are identical.
        for variant in self.variants:
            if variant.target.os is OsType.ANDROID:
                return variant
        return None


@dataclass(frozen=True, slots=True)
class BootImageConfigs:
    """The configs of one derivation, parents before the configs extending them."""

    configs: tuple[BootImageConfig, ...]
    targets: tuple[Target, ...]

    def __iter__(self) -> Iterator[BootImageConfig]:
        return iter(self.configs)

    def get(self, name: str) -> BootImageConfig:
        for config in self.configs:
            if config.name == name:
                return config
        raise KeyError(name)

    @property
    def art(self) -> BootImageConfig:
        return self.get(ART_BOOT_IMAGE_NAME)

    @property
    def default(self) -> BootImageConfig:
        return self.get(FRAMEWORK_BOOT_IMAGE_NAME)

    def parent_of(self, config: BootImageConfig) -> BootImageConfig | None:
        if config.extends is None:
            return None
        return self.get(config.extends)

    def image_locations(self, variant: BootImageVariant) -> tuple[str, ...]:
        """Return the ``-Ximage`` locations for *variant*, ancestors first."""
        locations: list[str] = []
        parent = self.parent_of(self.get(variant.config_name))
        if parent is not None:
            parent_variant = parent.get_variant(variant.target)
            if parent_variant is not None:
                locations.extend(self.image_locations(parent_variant))
        locations.append(path_to_location(variant.image_path_on_host, variant.target.arch))
        return tuple(locations)

    def to_dict(self) -> dict[str, Any]:
        return {
            config.name: {
                "stem": config.stem,
                "extends": config.extends,
                "modules": list(config.modules.apex_jar_pairs()),
                "dir": str(config.dir),
                "symbols_dir": str(config.symbols_dir),
                "zip": str(config.zip),
                "dex_paths_deps": [str(path) for path in config.dex_paths_deps],
                "variants": [
                    {
                        "target": str(variant.target),
                        "image_path": str(variant.image_path_on_host),
                        "images_deps": [str(path) for path in variant.images_deps],
                        "dex_locations_deps": list(variant.dex_locations_deps),
                        "primary_images": (
                            str(variant.primary_images)
                            if variant.primary_images is not None
                            else None
                        ),
                        "image_locations": list(self.image_locations(variant)),
                    }
                    for variant in config.variants
                ],
            }
            for config in self.configs
        }


def expand_variants(
    config: BootImageConfig,
    targets: tuple[Target, ...],
    *,
    global_config: GlobalConfig,
) -> tuple[BootImageVariant, ...]:
    """Return one variant of *config* per target, in target order."""
    image_name = config.first_module_name_or_stem() + ".art"
    variants: list[BootImageVariant] = []
    for target in targets:
        image_dir = config.dir.join(str(target.os), config.install_dir_on_host, str(target.arch))
        dex_locations = config.modules.device_paths(global_config, target.os)
        variants.append(
            BootImageVariant(
                config_name=config.name,
                target=target,
                image_path_on_host=image_dir.join(image_name),
                images_deps=config.module_files(image_dir, *IMAGE_EXTENSIONS),
                dex_locations=dex_locations,
                dex_locations_deps=dex_locations,
            )
        )
    return tuple(variants)


def gen_boot_image_configs(ctx: BuildContext) -> BootImageConfigs:
    """Return the boot image configs of *ctx*, deriving them on first use."""
    return ctx.once.get_or_compute(_BOOT_IMAGE_CONFIG_KEY, lambda: _build_boot_image_configs(ctx))


def art_boot_image_config(ctx: BuildContext) -> BootImageConfig:
    return gen_boot_image_configs(ctx).art


def default_boot_image_config(ctx: BuildContext) -> BootImageConfig:
    return gen_boot_image_configs(ctx).default


def _build_boot_image_configs(ctx: BuildContext) -> BootImageConfigs:
    global_config = ctx.config
    targets = dexpreopt_targets(global_config)
    device_dir = path_for_output(global_config, global_config.device_name)
    ctx.logger.log(
        operation="gen_boot_image_configs",
        config=None,
        message="Deriving boot image configs.",
        extra={"targets": [str(target) for target in targets]},
    )

    art_modules = global_config.art_apex_jars
    framework_modules = global_config.boot_jars.remove_list(art_modules)
    actual = len(art_modules) + len(framework_modules)
    if actual != len(global_config.boot_jars):
        raise ConfigInvariantError(
            "wrong number of boot image jars",
            expected=len(global_config.boot_jars),
            actual=actual,
            hint="Every ART apex jar must also be listed in the boot jars.",
            context={"operation": "gen_boot_image_configs"},
        )

    # Primary boot image in the ART apex, holding the core libraries.
    art = _new_config(
        device_dir,
        name=ART_BOOT_IMAGE_NAME,
        install_dir_on_host=ART_DIR_ON_HOST,
        modules=art_modules,
        extends=None,
    )
    art = replace(art, variants=expand_variants(art, targets, global_config=global_config))

    # Framework extension, compiled against the ART image.
    framework = _new_config(
        device_dir,
        name=FRAMEWORK_BOOT_IMAGE_NAME,
        install_dir_on_host=FRAMEWORK_SUBDIR,
        modules=framework_modules,
        extends=art.name,
    )
    framework = replace(
        framework, variants=expand_variants(framework, targets, global_config=global_config)
    )
    framework = _extend(framework, parent=art)

    configs = BootImageConfigs(configs=(art, framework), targets=targets)
    for config in configs:
        ctx.logger.log(
            operation="gen_boot_image_configs",
            config=config.name,
            message="Derived boot image config.",
            extra={"modules": len(config.modules), "variants": len(config.variants)},
        )
    return configs


def _new_config(
    device_dir: OutputPath,
    *,
    name: str,
    install_dir_on_host: str,
    modules: ConfiguredJarList,
    extends: str | None,
) -> BootImageConfig:
    directory = device_dir.join(f"dex_{name}jars")
    # Bootclasspath dex files are copied here before they are compiled, so the
    # paths are known before the modules producing them are.
    dex_paths = modules.build_paths(device_dir.join(f"dex_{name}jars_input"))
    return BootImageConfig(
        name=name,
        stem=BOOT_IMAGE_STEM,
        install_dir_on_host=install_dir_on_host,
        modules=modules,
        extends=extends,
        dir=directory,
        symbols_dir=device_dir.join(f"dex_{name}jars_unstripped"),
        zip=directory.join(f"{name}.zip"),
        dex_paths=dex_paths,
        dex_paths_deps=dex_paths,
    )


def _extend(config: BootImageConfig, *, parent: BootImageConfig) -> BootImageConfig:
    """Return *config* with the transitive fields of *parent* prepended.

    Both configs must have been expanded over the same targets, so that
    ``variants[i]`` of each refers to the same target.
    """
    variants = tuple(
        replace(
            variant,
            primary_images=parent_variant.image_path_on_host,
            dex_locations_deps=parent_variant.dex_locations_deps + variant.dex_locations,
        )
        for variant, parent_variant in zip(config.variants, parent.variants, strict=True)
    )
    return replace(
        config,
        dex_paths_deps=parent.dex_paths_deps + config.dex_paths,
        variants=variants,
    )


__all__ = [
    "ART_BOOT_IMAGE_NAME",
    "BootImageConfig",
    "BootImageConfigs",
    "BootImageVariant",
    "FRAMEWORK_BOOT_IMAGE_NAME",
    "art_boot_image_config",
    "default_boot_image_config",
    "expand_variants",
    "gen_boot_image_configs",
]
