from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import pytest

from bootimage import (
    ArchType,
    BuildContext,
    ConfigInvariantError,
    ConfiguredJarList,
    GlobalConfig,
    OsType,
    OutputPath,
    Target,
    art_boot_image_config,
    default_boot_image_config,
    dexpreopt_targets,
    expand_variants,
    gen_boot_image_configs,
)


def test_extension_modules_are_boot_jars_minus_art_jars(minimal_ctx: BuildContext) -> None:
    configs = gen_boot_image_configs(minimal_ctx)

    assert configs.art.modules.jars() == ("core-oj", "core-libart")
    assert configs.default.modules.jars() == ("framework", "services")


def test_layers_partition_the_boot_jars(full_ctx: BuildContext) -> None:
    configs = gen_boot_image_configs(full_ctx)
    art = set(configs.art.modules)
    framework = set(configs.default.modules)

    assert art.isdisjoint(framework)
    assert art | framework == set(full_ctx.config.boot_jars)
    # okhttp sits between framework jars in the boot jars but belongs to art.
    assert configs.default.modules.jars() == ("framework-minus-apex", "ext", "oem-services")


def test_extension_extends_art(minimal_ctx: BuildContext) -> None:
    configs = gen_boot_image_configs(minimal_ctx)

    assert configs.art.extends is None
    assert configs.default.extends == "art"
    assert configs.parent_of(configs.default) is configs.art
    assert configs.parent_of(configs.art) is None


def test_config_directories(minimal_ctx: BuildContext) -> None:
    art = art_boot_image_config(minimal_ctx)
    framework = default_boot_image_config(minimal_ctx)

    assert art.dir == OutputPath("out/generic/dex_artjars")
    assert art.symbols_dir == OutputPath("out/generic/dex_artjars_unstripped")
    assert art.zip == OutputPath("out/generic/dex_artjars/art.zip")
    assert framework.dir == OutputPath("out/generic/dex_bootjars")
    assert framework.zip == OutputPath("out/generic/dex_bootjars/boot.zip")
    assert art.dex_paths == (
        OutputPath("out/generic/dex_artjars_input/core-oj.jar"),
        OutputPath("out/generic/dex_artjars_input/core-libart.jar"),
    )


def test_extension_dex_paths_deps_are_art_then_framework(minimal_ctx: BuildContext) -> None:
    configs = gen_boot_image_configs(minimal_ctx)

    assert configs.art.dex_paths_deps == configs.art.dex_paths
    assert configs.default.dex_paths_deps == configs.art.dex_paths_deps + configs.default.dex_paths
    assert [path.name for path in configs.default.dex_paths_deps] == [
        "core-oj.jar",
        "core-libart.jar",
        "framework.jar",
        "services.jar",
    ]


def test_one_variant_per_target_in_target_order(full_ctx: BuildContext) -> None:
    configs = gen_boot_image_configs(full_ctx)
    targets = dexpreopt_targets(full_ctx.config)

    assert configs.targets == targets
    for config in configs:
        assert len(config.variants) == len(targets)
        assert [variant.target for variant in config.variants] == list(targets)
        assert all(variant.config_name == config.name for variant in config.variants)


def test_image_names(minimal_ctx: BuildContext) -> None:
    configs = gen_boot_image_configs(minimal_ctx)
    art_variant = configs.art.variants[0]
    framework_variant = configs.default.variants[0]

    assert art_variant.image_path_on_host == OutputPath(
        "out/generic/dex_artjars/android/apex/art_boot_images/javalib/arm64/boot.art"
    )
    assert framework_variant.image_path_on_host == OutputPath(
        "out/generic/dex_bootjars/android/system/framework/arm64/boot-framework.art"
    )


def test_extension_image_uses_module_stem(full_ctx: BuildContext) -> None:
    framework = default_boot_image_config(full_ctx)
    assert framework.variants[0].image_path_on_host.name == "boot-framework.art"


def test_images_deps_cover_every_module_and_extension(minimal_ctx: BuildContext) -> None:
    art_variant = art_boot_image_config(minimal_ctx).variants[0]
    image_dir = art_variant.image_path_on_host.parent

    assert art_variant.images_deps == tuple(
        image_dir.join(name)
        for name in (
            "boot.art",
            "boot.oat",
            "boot.vdex",
            "boot-core-libart.art",
            "boot-core-libart.oat",
            "boot-core-libart.vdex",
        )
    )
    framework_variant = default_boot_image_config(minimal_ctx).variants[0]
    assert [path.name for path in framework_variant.images_deps] == [
        "boot-framework.art",
        "boot-framework.oat",
        "boot-framework.vdex",
        "boot-services.art",
        "boot-services.oat",
        "boot-services.vdex",
    ]


def test_primary_images_point_at_art_variant_for_same_target(full_ctx: BuildContext) -> None:
    configs = gen_boot_image_configs(full_ctx)

    for art_variant, framework_variant in zip(configs.art.variants, configs.default.variants):
        assert art_variant.primary_images is None
        assert framework_variant.target == art_variant.target
        assert framework_variant.primary_images == art_variant.image_path_on_host


def test_primary_images_for_arm64_example(minimal_ctx: BuildContext) -> None:
    configs = gen_boot_image_configs(minimal_ctx)

    assert len(configs.default.variants) == 2
    assert configs.default.variants[0].target == Target(OsType.ANDROID, ArchType.ARM64)
    assert configs.default.variants[0].primary_images == configs.art.variants[0].image_path_on_host


def test_dex_locations_deps_chain_art_before_framework(minimal_ctx: BuildContext) -> None:
    configs = gen_boot_image_configs(minimal_ctx)
    art_variant = configs.art.variants[0]
    framework_variant = configs.default.variants[0]

    assert framework_variant.dex_locations == (
        "/system/framework/framework.jar",
        "/system/framework/services.jar",
    )
    assert framework_variant.dex_locations_deps == (
        art_variant.dex_locations + framework_variant.dex_locations
    )
    assert art_variant.dex_locations_deps == art_variant.dex_locations


def test_host_variant_locations_are_host_paths(minimal_ctx: BuildContext) -> None:
    host_variant = art_boot_image_config(minimal_ctx).variants[1]

    assert host_variant.target.os is OsType.LINUX_GLIBC
    assert host_variant.dex_locations == (
        "out/host/linux-x86/apex/com.android.art/javalib/core-oj.jar",
        "out/host/linux-x86/apex/com.android.art/javalib/core-libart.jar",
    )


def test_get_variant_and_any_android_variant(full_ctx: BuildContext) -> None:
    framework = default_boot_image_config(full_ctx)
    arm = Target(OsType.ANDROID, ArchType.ARM)

    variant = framework.get_variant(arm)
    assert variant is not None
    assert variant.target == arm
    assert framework.get_variant(Target(OsType.DARWIN, ArchType.X86_64)) is None
    android_variant = framework.get_any_android_variant()
    assert android_variant is not None
    assert android_variant.target.os is OsType.ANDROID


def test_image_locations_drop_arch_and_list_art_first(minimal_ctx: BuildContext) -> None:
    configs = gen_boot_image_configs(minimal_ctx)

    assert configs.image_locations(configs.default.variants[0]) == (
        "out/generic/dex_artjars/android/apex/art_boot_images/javalib/boot.art",
        "out/generic/dex_bootjars/android/system/framework/boot-framework.art",
    )
    assert configs.image_locations(configs.art.variants[0]) == (
        "out/generic/dex_artjars/android/apex/art_boot_images/javalib/boot.art",
    )


def test_expand_variants_has_no_cross_config_wiring(minimal_ctx: BuildContext) -> None:
    framework = default_boot_image_config(minimal_ctx)
    unwired = replace(framework, variants=())

    variants = expand_variants(
        unwired, dexpreopt_targets(minimal_ctx.config), global_config=minimal_ctx.config
    )

    assert all(variant.primary_images is None for variant in variants)
    assert variants[0].dex_locations_deps == variants[0].dex_locations
    assert variants[0].image_path_on_host == framework.variants[0].image_path_on_host


def test_no_targets_gives_configs_without_variants() -> None:
    ctx = BuildContext(
        GlobalConfig(
            art_apex_jars=ConfiguredJarList.parse(["com.android.art:core-oj"]),
            boot_jars=ConfiguredJarList.parse(["com.android.art:core-oj", "platform:framework"]),
        )
    )
    configs = gen_boot_image_configs(ctx)

    assert configs.art.variants == ()
    assert configs.default.variants == ()
    assert configs.default.get_any_android_variant() is None


def test_art_jar_missing_from_boot_jars_is_fatal(minimal_config: GlobalConfig) -> None:
    broken = replace(
        minimal_config,
        art_apex_jars=minimal_config.art_apex_jars.append_list(
            ConfiguredJarList.parse(["com.android.art:okhttp"])
        ),
    )

    with pytest.raises(ConfigInvariantError) as excinfo:
        gen_boot_image_configs(BuildContext(broken))

    assert excinfo.value.expected == 4
    assert excinfo.value.actual == 5
    assert "got 5, expected 4" in str(excinfo.value)


def test_configs_are_derived_once_per_context(minimal_ctx: BuildContext) -> None:
    first = gen_boot_image_configs(minimal_ctx)
    second = gen_boot_image_configs(minimal_ctx)

    assert first is second
    assert default_boot_image_config(minimal_ctx) is first.default
    assert len(minimal_ctx.logger.records_for("gen_boot_image_configs")) == 3


def test_separate_contexts_do_not_share_results(minimal_config: GlobalConfig) -> None:
    first = gen_boot_image_configs(BuildContext(minimal_config))
    second = gen_boot_image_configs(BuildContext(minimal_config))

    assert first is not second
    assert first == second


def test_configs_to_dict(minimal_ctx: BuildContext) -> None:
    payload = gen_boot_image_configs(minimal_ctx).to_dict()

    assert set(payload) == {"art", "boot"}
    assert payload["boot"]["extends"] == "art"
    assert payload["boot"]["modules"] == ["platform:framework", "platform:services"]
    assert payload["boot"]["variants"][0]["primary_images"] == (
        "out/generic/dex_artjars/android/apex/art_boot_images/javalib/arm64/boot.art"
    )
    assert payload["art"]["variants"][0]["primary_images"] is None


def test_configs_are_shared_across_workers(full_ctx: BuildContext) -> None:
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: gen_boot_image_configs(full_ctx), range(32)))

    first = results[0]
    assert all(result is first for result in results)
    assert len(full_ctx.logger.records_for("gen_boot_image_configs")) == 3
