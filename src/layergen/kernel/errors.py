"""Deterministic generation error contracts."""

from __future__ import annotations

from enum import StrEnum


class GenerationErrorCode(StrEnum):
    """Stable generation error codes."""

    NOT_PERSISTED = "generator_not_persisted"
    WRONG_ASSET_TYPE = "target_wrong_asset_type"
    CREATE_LOAD_FAILED = "target_create_load_failed"
    NOT_INDEXED = "target_not_indexed"
    INVALID_DOCUMENT = "target_invalid_document"


class GenerationError(RuntimeError):
    """Generation failure with stable deterministic code."""

    def __init__(
        self,
        code: GenerationErrorCode,
        message: str,
        *,
        data: dict[str, object] | None = None,
    ) -> None:
        """Create generation failure.

        Args:
            code: Stable generation error code.
            message: Human-readable error message.
            data: Optional structured payload for diagnostics.
        """
        super().__init__(message)
        self.code = code
        self.data = data or {}


class NotPersistedError(GenerationError):
    """Raised when a generator config has no project path to be relative to."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            GenerationErrorCode.NOT_PERSISTED,
            message or "Generator config must be saved on disk to generate a target",
        )


class WrongAssetTypeError(GenerationError):
    """Raised when the identifier names an asset that is not a generated controller."""

    def __init__(self, identifier: str, path: str, kind: str | None) -> None:
        super().__init__(
            GenerationErrorCode.WRONG_ASSET_TYPE,
            f"{identifier} is not a GeneratedController (found {kind!r} at {path})",
            data={"identifier": identifier, "path": path, "kind": kind},
        )


class CreateLoadFailedError(GenerationError):
    """Raised when a freshly written controller is not visible through the index."""

    def __init__(self, path: str) -> None:
        super().__init__(
            GenerationErrorCode.CREATE_LOAD_FAILED,
            f"Created controller cannot be loaded: {path}",
            data={"path": path},
        )


class TargetNotIndexedError(GenerationError):
    """Raised when a target would be created where the asset index never looks."""

    def __init__(self, path: str) -> None:
        super().__init__(
            GenerationErrorCode.NOT_INDEXED,
            f"Target is outside the indexed folders: {path}",
            data={"path": path},
        )


class InvalidTargetError(GenerationError):
    """Raised when a file claims to be a generated controller but does not parse as one."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(
            GenerationErrorCode.INVALID_DOCUMENT,
            f"Controller document is malformed: {path}: {detail}",
            data={"path": path},
        )
