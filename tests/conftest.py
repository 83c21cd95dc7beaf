"""Shared test fixtures."""

from __future__ import annotations

import pytest

from bootimage import ArchType, BuildContext, ConfiguredJarList, GlobalConfig, OsType, Target


@pytest.fixture
def minimal_config() -> GlobalConfig:
    """Two boot image layers over one device and one host target."""
    return GlobalConfig(
        art_apex_jars=ConfiguredJarList.parse(
            ["com.android.art:core-oj", "com.android.art:core-libart"]
        ),
        boot_jars=ConfiguredJarList.parse(
            [
                "com.android.art:core-oj",
                "com.android.art:core-libart",
                "platform:framework",
                "platform:services",
            ]
        ),
        targets=(
            Target(OsType.ANDROID, ArchType.ARM64),
            Target(OsType.LINUX_GLIBC, ArchType.X86_64),
        ),
        build_os=OsType.LINUX_GLIBC,
        device_name="generic",
    )


@pytest.fixture
def full_config() -> GlobalConfig:
    return GlobalConfig(
        art_apex_jars=ConfiguredJarList.parse(
            [
                "com.android.art:core-oj",
                "com.android.art:core-libart",
                "com.android.art:okhttp",
            ]
        ),
        boot_jars=ConfiguredJarList.parse(
            [
                "com.android.art:core-oj",
                "com.android.art:core-libart",
                "platform:framework-minus-apex",
                "com.android.art:okhttp",
                "platform:ext",
                "system_ext:oem-services",
            ]
        ),
        updatable_boot_jars=ConfiguredJarList.parse(
            ["com.android.conscrypt:conscrypt", "com.android.i18n:core-icu4j"]
        ),
        system_server_jars=("services", "ethernet-service"),
        updatable_system_server_jars=ConfiguredJarList.parse(["com.android.wifi:service-wifi"]),
        targets=(
            Target(OsType.ANDROID, ArchType.ARM64),
            Target(OsType.ANDROID, ArchType.ARM),
            Target(OsType.ANDROID, ArchType.X86, native_bridge=True),
            Target(OsType.LINUX_GLIBC, ArchType.X86_64),
            Target(OsType.LINUX_GLIBC, ArchType.X86),
            Target(OsType.DARWIN, ArchType.X86_64),
        ),
        build_os=OsType.LINUX_GLIBC,
        device_name="walleye",
    )


@pytest.fixture
def minimal_ctx(minimal_config: GlobalConfig) -> BuildContext:
    return BuildContext(minimal_config)


@pytest.fixture
def full_ctx(full_config: GlobalConfig) -> BuildContext:
    return BuildContext(full_config)
