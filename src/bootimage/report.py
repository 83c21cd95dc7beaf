"""Report of everything derived for one build invocation, with JSON/CBOR export."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import cbor2

from .boot_image import gen_boot_image_configs
from .classpath import bcp_for_dexpreopt, system_server_classpath
from .context import BuildContext
from .makevars import dexpreopt_config_makevars
from .updatable import get_updatable_boot_config


@dataclass(frozen=True, slots=True)
class DerivationReport:
    """A snapshot of the derived results, exported as JSON or canonical CBOR.

    ``sections`` is read-only at the top level; its values are plain
    JSON-ready copies built from the immutable derivation results.
    """

    fingerprint: str
    sections: Mapping[str, Any] = field(default_factory=dict)
    schema_version: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "sections", MappingProxyType(dict(self.sections)))

    def to_json(self, path: str | Path | None = None) -> str:
        encoded = json.dumps(self._payload(), indent=2, sort_keys=True) + "\n"
        if path is not None:
            _write(path, encoded.encode("utf-8"))
        return encoded

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        encoded = cbor2.dumps(self._payload(), canonical=True)
        if path is not None:
            _write(path, encoded)
        return encoded

    def _payload(self) -> dict[str, object]:
        return {
            "schema_version": self.schema_version,
            "fingerprint": self.fingerprint,
            **self.sections,
        }


def derivation_report(ctx: BuildContext) -> DerivationReport:
    updatable = get_updatable_boot_config(ctx)
    bcp_paths, bcp_locations = bcp_for_dexpreopt(ctx, with_updatable=False)
    full_paths, full_locations = bcp_for_dexpreopt(ctx, with_updatable=True)
    return DerivationReport(
        fingerprint=ctx.fingerprint,
        sections={
            "boot_images": gen_boot_image_configs(ctx).to_dict(),
            "updatable_boot": {
                "modules": list(updatable.modules.apex_jar_pairs()),
                "dex_paths": [str(path) for path in updatable.dex_paths],
                "dex_locations": list(updatable.dex_locations),
            },
            "system_server_classpath": list(system_server_classpath(ctx)),
            "dexpreopt_bootclasspath": {
                "paths": [str(path) for path in bcp_paths],
                "locations": list(bcp_locations),
            },
            "dexpreopt_bootclasspath_with_updatable": {
                "paths": [str(path) for path in full_paths],
                "locations": list(full_locations),
            },
            "makevars": dexpreopt_config_makevars(ctx),
        },
    )


def _write(path: str | Path, data: bytes) -> None:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)


__all__ = [
    "DerivationReport",
    "derivation_report",
]
