"""Per-invocation build context passed to every derivation."""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import GlobalConfig, config_fingerprint
from .observability import StructuredLogger
from .once import OnceCache


@dataclass(slots=True)
class BuildContext:
    """Everything one build invocation shares between its derivations.

    Results are memoized in ``once``; two contexts never see each other's
    results, even for identical configurations.
    """

    config: GlobalConfig
    logger: StructuredLogger = field(default_factory=StructuredLogger)
    once: OnceCache = field(default_factory=OnceCache)
    _fingerprint: str | None = field(init=False, default=None, repr=False)

    @property
    def fingerprint(self) -> str:
        if self._fingerprint is None:
            self._fingerprint = config_fingerprint(self.config)
        return self._fingerprint
