"""Build variables exported for legacy make readers."""

from __future__ import annotations

from pathlib import Path

from .boot_image import default_boot_image_config
from .context import BuildContext


def dexpreopt_config_makevars(ctx: BuildContext) -> dict[str, str]:
    return {
        "DEXPREOPT_BOOT_JARS_MODULES": ":".join(
            default_boot_image_config(ctx).modules.apex_jar_pairs()
        ),
    }


def write_makevars(ctx: BuildContext, path: str | Path) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    lines = [f"{name} := {value}" for name, value in sorted(dexpreopt_config_makevars(ctx).items())]
    output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return output_path


__all__ = [
    "dexpreopt_config_makevars",
    "write_makevars",
]
