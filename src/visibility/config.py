from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import FrozenSet, Mapping, Optional

from .accessibility import PRIVATE_PREFIX

_DEFAULT_SKIP = frozenset({
    "__pycache__", "tests", "test", "build", "dist",
    ".git", ".venv", "venv", ".tox", ".mypy_cache", ".pytest_cache",
})


@dataclass(frozen=True)
class CheckerConfig:
    private_prefix: str = PRIVATE_PREFIX
    skip_dirs: FrozenSet[str] = field(default_factory=lambda: _DEFAULT_SKIP)
    log_level: str = "WARNING"

    def __post_init__(self):
        object.__setattr__(self, "skip_dirs", frozenset(d.casefold() for d in self.skip_dirs))

    def is_skipped(self, dirname: str) -> bool:
        return dirname.casefold() in self.skip_dirs

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CheckerConfig":
        """Lee SCOPECHECK_PRIVATE_PREFIX, SCOPECHECK_SKIP_DIRS y SCOPECHECK_LOG_LEVEL."""
        env = os.environ if environ is None else environ
        raw = env.get("SCOPECHECK_SKIP_DIRS", "")
        items = {x.strip().casefold() for x in raw.split(",") if x.strip()}
        return cls(
            private_prefix=env.get("SCOPECHECK_PRIVATE_PREFIX", PRIVATE_PREFIX),
            skip_dirs=frozenset(items) if items else _DEFAULT_SKIP,
            log_level=env.get("SCOPECHECK_LOG_LEVEL", "WARNING").upper(),
        )
