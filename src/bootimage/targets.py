"""Build targets and the subset of them that boot images are expanded for."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import GlobalConfig


class OsType(StrEnum):
    ANDROID = "android"
    LINUX_GLIBC = "linux_glibc"
    DARWIN = "darwin"
    WINDOWS = "windows"

    @property
    def is_host(self) -> bool:
        return self is not OsType.ANDROID


class ArchType(StrEnum):
    ARM = "arm"
    ARM64 = "arm64"
    X86 = "x86"
    X86_64 = "x86_64"
    RISCV64 = "riscv64"


@dataclass(frozen=True, slots=True)
class Target:
    os: OsType
    arch: ArchType
    native_bridge: bool = False

    def __str__(self) -> str:
        suffix = "_native_bridge" if self.native_bridge else ""
        return f"{self.os}_{self.arch}{suffix}"


def dexpreopt_targets(config: GlobalConfig) -> tuple[Target, ...]:
    """Return the targets boot images are built for.

    Device targets reached only through native bridge emulation are skipped.
    Targets for the build OS are appended after the device targets so that
    host-side tests have matching images.
    """
    device = [
        target
        for target in config.targets
        if target.os is OsType.ANDROID and not target.native_bridge
    ]
    host = [
        target
        for target in config.targets
        if target.os.is_host and target.os is config.build_os
    ]
    return tuple(device + host)


__all__ = [
    "ArchType",
    "OsType",
    "Target",
    "dexpreopt_targets",
]
