"""Typed in-memory paths for build outputs.

Nothing here touches the filesystem: an ``OutputPath`` names a location the
surrounding build system materializes later.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import GlobalConfig
    from .targets import ArchType


@dataclass(frozen=True, slots=True, order=True)
class OutputPath:
    """A path under the build output directory."""

    path: str

    def __str__(self) -> str:
        return self.path

    def join(self, *parts: str) -> OutputPath:
        return OutputPath(posixpath.join(self.path, *parts))

    @property
    def parent(self) -> OutputPath:
        return OutputPath(posixpath.dirname(self.path))

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)


def path_for_output(config: GlobalConfig, *parts: str) -> OutputPath:
    """Return a typed ``{out_dir}/{parts...}`` reference."""
    return OutputPath(posixpath.normpath(config.out_dir)).join(*parts)


def path_to_location(path: OutputPath, arch: ArchType) -> str:
    """Return the image location for *path*, with its architecture directory dropped.

    The runtime resolves ``<dir>/<arch>/<name>`` from ``<dir>/<name>`` itself.
    """
    parent = path.parent
    if parent.name != str(arch):
        # Image paths are always laid out as <dir>/<arch>/<name>.
        raise ValueError(f"{path} is not under an {arch} directory")
    return posixpath.join(parent.parent.path, path.name)


__all__ = [
    "OutputPath",
    "path_for_output",
    "path_to_location",
]
