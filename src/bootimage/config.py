"""Global dexpreopt configuration: model, JSON loader, and fingerprint."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ValidationError
from .jars import ConfiguredJarList
from .targets import ArchType, OsType, Target


@dataclass(frozen=True, slots=True)
class GlobalConfig:
    """Read-only inputs of one build invocation."""

    art_apex_jars: ConfiguredJarList = field(default_factory=ConfiguredJarList)
    boot_jars: ConfiguredJarList = field(default_factory=ConfiguredJarList)
    updatable_boot_jars: ConfiguredJarList = field(default_factory=ConfiguredJarList)
    system_server_jars: tuple[str, ...] = ()
    updatable_system_server_jars: ConfiguredJarList = field(default_factory=ConfiguredJarList)
    targets: tuple[Target, ...] = ()
    build_os: OsType = OsType.LINUX_GLIBC
    device_name: str = "generic"
    out_dir: str = "out"
    host_prebuilt_tag: str = "linux-x86"


def config_fingerprint(config: GlobalConfig) -> str:
    canonical = json.dumps(_to_payload(config), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _to_payload(config: GlobalConfig) -> dict[str, Any]:
    return {
        "ArtApexJars": list(config.art_apex_jars.apex_jar_pairs()),
        "BootJars": list(config.boot_jars.apex_jar_pairs()),
        "UpdatableBootJars": list(config.updatable_boot_jars.apex_jar_pairs()),
        "SystemServerJars": list(config.system_server_jars),
        "UpdatableSystemServerJars": list(config.updatable_system_server_jars.apex_jar_pairs()),
        "Targets": [
            {"Os": str(t.os), "Arch": str(t.arch), "NativeBridge": t.native_bridge}
            for t in config.targets
        ],
        "BuildOs": str(config.build_os),
        "DeviceName": config.device_name,
        "OutDir": config.out_dir,
        "HostPrebuiltTag": config.host_prebuilt_tag,
    }


def serialize_global_config(config: GlobalConfig) -> str:
    return json.dumps(_to_payload(config), indent=2, sort_keys=True) + "\n"


def parse_global_config(raw: str) -> GlobalConfig:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError("Invalid dexpreopt config JSON.", hint=str(exc)) from exc

    if not isinstance(payload, dict):
        raise ValidationError("Invalid dexpreopt config payload type.")

    targets_raw = payload.get("Targets", [])
    if not isinstance(targets_raw, list):
        raise ValidationError("Invalid dexpreopt config `Targets` value.")

    return GlobalConfig(
        art_apex_jars=ConfiguredJarList.parse(_str_list(payload, "ArtApexJars")),
        boot_jars=ConfiguredJarList.parse(_str_list(payload, "BootJars")),
        updatable_boot_jars=ConfiguredJarList.parse(_str_list(payload, "UpdatableBootJars")),
        system_server_jars=tuple(_str_list(payload, "SystemServerJars")),
        updatable_system_server_jars=ConfiguredJarList.parse(
            _str_list(payload, "UpdatableSystemServerJars")
        ),
        targets=tuple(_parse_target(item) for item in targets_raw),
        build_os=_build_os(payload.get("BuildOs", str(OsType.LINUX_GLIBC))),
        device_name=_optional_str(payload, "DeviceName", "generic"),
        out_dir=_optional_str(payload, "OutDir", "out"),
        host_prebuilt_tag=_optional_str(payload, "HostPrebuiltTag", "linux-x86"),
    )


def read_global_config(path: str | Path) -> GlobalConfig:
    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ValidationError(
            "Dexpreopt config does not exist.",
            context={"path": str(config_path)},
        ) from exc
    return parse_global_config(raw)


def _parse_target(item: Any) -> Target:
    if not isinstance(item, dict):
        raise ValidationError("Invalid target entry in dexpreopt config.")
    native_bridge = item.get("NativeBridge", False)
    if not isinstance(native_bridge, bool):
        raise ValidationError("Invalid target `NativeBridge` value.")
    arch = item.get("Arch")
    try:
        arch_type = ArchType(arch)
    except ValueError as exc:
        raise ValidationError(
            "Unknown target architecture.",
            context={"arch": str(arch)},
        ) from exc
    return Target(os=_os_type(item.get("Os")), arch=arch_type, native_bridge=native_bridge)


def _build_os(value: Any) -> OsType:
    build_os = _os_type(value)
    if not build_os.is_host:
        raise ValidationError(
            "Build OS must be a host OS.",
            hint="Use the OS the build runs on, e.g. `linux_glibc`.",
            context={"os": str(build_os)},
        )
    return build_os


def _os_type(value: Any) -> OsType:
    try:
        return OsType(value)
    except ValueError as exc:
        raise ValidationError(
            "Unknown target OS.",
            hint=f"Expected one of: {', '.join(OsType)}.",
            context={"os": str(value)},
        ) from exc


def _str_list(payload: dict[str, Any], key: str) -> list[str]:
    value = payload.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValidationError(f"Invalid dexpreopt config `{key}` value.")
    return list(value)


def _optional_str(payload: dict[str, Any], key: str, default: str) -> str:
    value = payload.get(key, default)
    if not isinstance(value, str) or not value:
        raise ValidationError(f"Invalid dexpreopt config `{key}` value.")
    return value


__all__ = [
    "GlobalConfig",
    "config_fingerprint",
    "parse_global_config",
    "read_global_config",
    "serialize_global_config",
]
