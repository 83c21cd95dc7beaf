"""Ordered lists of ``(apex, jar)`` pairs and the paths derived from them."""

from __future__ import annotations

import posixpath
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import ValidationError
from .paths import OutputPath

if TYPE_CHECKING:
    from .config import GlobalConfig
    from .targets import OsType

PLATFORM_APEX = "platform"
SYSTEM_EXT_APEX = "system_ext"

# Jars that install under a different file name than their module name.
_MODULE_STEMS = {
    "framework-minus-apex": "framework",
}


def module_stem(jar: str) -> str:
    return _MODULE_STEMS.get(jar, jar)


@dataclass(frozen=True, slots=True)
class ConfiguredJarList:
    """An ordered, duplicate-free list of ``(apex, jar)`` pairs.

    Order is significant: it is the order jars appear on every classpath
    derived from the list.
    """

    pairs: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        seen: set[tuple[str, str]] = set()
        unique: list[tuple[str, str]] = []
        for pair in self.pairs:
            if pair not in seen:
                seen.add(pair)
                unique.append(pair)
        object.__setattr__(self, "pairs", tuple(unique))

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> ConfiguredJarList:
        return cls(tuple((apex, jar) for apex, jar in pairs))

    @classmethod
    def parse(cls, entries: Iterable[str]) -> ConfiguredJarList:
        """Parse ``apex:jar`` strings, e.g. ``com.android.art:core-oj``."""
        pairs: list[tuple[str, str]] = []
        for entry in entries:
            apex, sep, jar = entry.partition(":")
            if not sep or not apex or not jar or ":" in jar:
                raise ValidationError(
                    "Malformed configured jar entry.",
                    hint="Use the `<apex>:<jar>` form, e.g. `platform:framework`.",
                    context={"entry": entry},
                )
            pairs.append((apex, jar))
        return cls(tuple(pairs))

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.pairs)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, tuple):
            return item in self.pairs
        return any(jar == item for _, jar in self.pairs)

    def apex(self, idx: int) -> str:
        return self.pairs[idx][0]

    def jar(self, idx: int) -> str:
        return self.pairs[idx][1]

    def jars(self) -> tuple[str, ...]:
        return tuple(jar for _, jar in self.pairs)

    def apex_jar_pairs(self) -> tuple[str, ...]:
        return tuple(f"{apex}:{jar}" for apex, jar in self.pairs)

    def remove_list(self, other: ConfiguredJarList) -> ConfiguredJarList:
        """Return the pairs of this list that are not in *other*, in order."""
        excluded = set(other.pairs)
        return ConfiguredJarList(tuple(pair for pair in self.pairs if pair not in excluded))

    def append_list(self, other: ConfiguredJarList) -> ConfiguredJarList:
        """Return this list followed by *other*; pairs already present keep their place."""
        return ConfiguredJarList(self.pairs + other.pairs)

    def build_paths(self, root: OutputPath) -> tuple[OutputPath, ...]:
        return tuple(root.join(module_stem(jar) + ".jar") for _, jar in self.pairs)

    def device_paths(self, config: GlobalConfig, os: OsType) -> tuple[str, ...]:
        """Return where the runtime finds each jar on a device (or host) of type *os*."""
        paths: list[str] = []
        for apex, jar in self.pairs:
            name = module_stem(jar) + ".jar"
            if apex == PLATFORM_APEX:
                subdir = "system/framework"
            elif apex == SYSTEM_EXT_APEX:
                subdir = "system_ext/framework"
            else:
                subdir = posixpath.join("apex", apex, "javalib")
            if os.is_host:
                paths.append(
                    posixpath.join(config.out_dir, "host", config.host_prebuilt_tag, subdir, name)
                )
            else:
                paths.append(posixpath.join("/", subdir, name))
        return tuple(paths)


__all__ = [
    "ConfiguredJarList",
    "PLATFORM_APEX",
    "SYSTEM_EXT_APEX",
    "module_stem",
]
