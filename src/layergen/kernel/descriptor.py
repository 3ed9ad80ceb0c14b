"""Target path descriptor: EMPTY, ABSOLUTE or RELATIVE."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, model_validator

from layergen.kernel.paths import SEPARATOR


class PathKind(StrEnum):
    """How a target path is rooted."""

    EMPTY = "empty"  # derive default name from the config's own name
    ABSOLUTE = "absolute"  # rooted at the project tree root
    RELATIVE = "relative"  # rooted at the config's containing folder


class PathDescriptor(BaseModel):
    """Tri-state target path. Persisted as a single raw string (see to_raw)."""

    model_config = ConfigDict(frozen=True)

    kind: PathKind = PathKind.EMPTY
    path: str = ""

    @model_validator(mode="after")
    def _check_path(self) -> PathDescriptor:
        if self.kind == PathKind.EMPTY and self.path:
            raise ValueError("EMPTY path descriptor cannot carry a path")
        if self.kind != PathKind.EMPTY and not self.path:
            raise ValueError(f"{self.kind.value} path descriptor requires a path")
        return self

    @classmethod
    def empty(cls) -> PathDescriptor:
        return cls()

    @classmethod
    def absolute(cls, path: str) -> PathDescriptor:
        """ABSOLUTE descriptor for a project path (given without leading separator)."""
        return cls(kind=PathKind.ABSOLUTE, path=path)

    @classmethod
    def relative(cls, path: str) -> PathDescriptor:
        return cls(kind=PathKind.RELATIVE, path=path)

    @classmethod
    def from_raw(cls, raw: str | None) -> PathDescriptor:
        """Parse persisted form: '' -> EMPTY, '/p' -> ABSOLUTE(p), 'p' -> RELATIVE(p).

        Args:
            raw: Raw string from the config file.

        Returns:
            Parsed descriptor.
        """
        if not raw:
            return cls.empty()
        if raw.startswith(SEPARATOR):
            return cls.absolute(raw[len(SEPARATOR) :])
        return cls.relative(raw)

    def to_raw(self) -> str:
        """Serialize to the persisted single-string form."""
        if self.kind == PathKind.EMPTY:
            return ""
        if self.kind == PathKind.ABSOLUTE:
            return SEPARATOR + self.path
        return self.path
