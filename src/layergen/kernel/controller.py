"""Generated controller document: schema, bootstrap template, YAML codec."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, PrivateAttr

CONTROLLER_KIND = "GeneratedController"
ROOT_OBJECT_ID = 9100000
SERIALIZED_VERSION = 1
DOCUMENT_HEADER = "%YAML 1.1\n---\n"

# Written verbatim when a target does not exist yet.
EMPTY_CONTROLLER = (
    DOCUMENT_HEADER
    + f"kind: {CONTROLLER_KIND}\n"
    + f"object_id: {ROOT_OBJECT_ID}\n"
    + "name: New Generated Controller\n"
    + f"serialized_version: {SERIALIZED_VERSION}\n"
    + "parameters: []\n"
    + "layers: []\n"
    + "sub_assets: []\n"
)

# Replace "{GUID}" with the normalized identifier (no separators).
EMPTY_CONTROLLER_META = (
    "file_format_version: 2\n"
    + "guid: {GUID}\n"
    + "importer: NativeFormatImporter\n"
    + f"main_object_id: {ROOT_OBJECT_ID}\n"
)


class ParameterType(StrEnum):
    """Controller parameter value types."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    TRIGGER = "trigger"


class ControllerParameter(BaseModel):
    """Named controller parameter."""

    model_config = ConfigDict(extra="forbid")

    name: str
    type: ParameterType
    default: bool | int | float | None = None


class ControllerLayer(BaseModel):
    """Layer record emitted by one generator layer."""

    model_config = ConfigDict(extra="forbid")

    name: str
    default_weight: float = 1.0
    state_machine_id: int | None = None


class SubAsset(BaseModel):
    """Auxiliary object stored in the same file as the controller."""

    model_config = ConfigDict(extra="forbid")

    object_id: int
    kind: str
    name: str
    data: dict[str, Any] = {}


class GeneratedController(BaseModel):
    """Root object of a generated controller file."""

    model_config = ConfigDict(extra="forbid")

    kind: str = CONTROLLER_KIND
    object_id: int = ROOT_OBJECT_ID
    name: str = "New Generated Controller"
    serialized_version: int = SERIALIZED_VERSION
    parameters: list[ControllerParameter] = []
    layers: list[ControllerLayer] = []
    sub_assets: list[SubAsset] = []

    _asset_path: str | None = PrivateAttr(default=None)

    @property
    def asset_path(self) -> str | None:
        """Project path this controller was loaded from (None once destroyed)."""
        return self._asset_path

    def bind_path(self, asset_path: str | None) -> None:
        """Attach (or detach, with None) the project path this object lives at."""
        self._asset_path = asset_path

    def next_object_id(self) -> int:
        """Next free object id; sequential so regeneration is reproducible."""
        highest = max(
            (asset.object_id for asset in self.sub_assets), default=self.object_id
        )
        return max(highest, self.object_id) + 1

    def to_document(self) -> str:
        """Serialize to the on-disk YAML document."""
        body = yaml.safe_dump(
            self.model_dump(mode="json"),
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )
        return DOCUMENT_HEADER + body


def parse_document(text: str) -> dict[str, Any] | None:
    """Parse an asset document. Returns None when it is not a YAML mapping.

    Args:
        text: File contents.

    Returns:
        Mapping payload or None.
    """
    try:
        payload = yaml.safe_load(text)
    except yaml.YAMLError:
        return None
    if not isinstance(payload, dict):
        return None
    return payload
