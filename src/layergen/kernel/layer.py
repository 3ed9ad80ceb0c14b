"""Generator layer contract and the context a layer writes through."""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

from layergen.kernel.controller import (
    ControllerLayer,
    ControllerParameter,
    GeneratedController,
    ParameterType,
    SubAsset,
)


@dataclass(frozen=True)
class GenerationContext:
    """Binds one generator layer's name to the controller being generated."""

    layer_name: str
    controller: GeneratedController

    def add_parameter(
        self,
        name: str,
        type: ParameterType,
        default: bool | int | float | None = None,
    ) -> ControllerParameter:
        """Append a parameter. Reuses an existing one of the same name and type.

        Raises:
            ValueError: If a parameter with this name exists with another type.
        """
        for existing in self.controller.parameters:
            if existing.name == name:
                if existing.type != type:
                    raise ValueError(
                        f"Layer {self.layer_name!r}: parameter {name!r} already "
                        f"declared as {existing.type.value}, not {type.value}"
                    )
                return existing
        parameter = ControllerParameter(name=name, type=type, default=default)
        self.controller.parameters.append(parameter)
        return parameter

    def add_sub_asset(
        self, kind: str, name: str, data: dict[str, Any] | None = None
    ) -> SubAsset:
        """Attach an auxiliary object to the controller file."""
        asset = SubAsset(
            object_id=self.controller.next_object_id(),
            kind=kind,
            name=name,
            data=data or {},
        )
        self.controller.sub_assets.append(asset)
        return asset

    def add_layer(
        self,
        state_machine: SubAsset | None = None,
        default_weight: float = 1.0,
    ) -> ControllerLayer:
        """Append this generator's layer record, named after the generator."""
        layer = ControllerLayer(
            name=self.layer_name,
            default_weight=default_weight,
            state_machine_id=state_machine.object_id if state_machine else None,
        )
        self.controller.layers.append(layer)
        return layer


class GeneratorLayer(BaseModel):
    """One ordered slice of controller content.

    A well-behaved layer appends exactly one ControllerLayer plus whatever
    parameters and sub-assets it needs, and never touches watched objects.
    """

    model_config = ConfigDict(extra="forbid")

    kind: str
    name: str
    watch: list[str] = []

    @property
    def watching_objects(self) -> frozenset[str]:
        """Project paths whose change should retrigger generation."""
        return frozenset(self.watch)

    @abstractmethod
    def generate(self, context: GenerationContext) -> None:
        """Append this layer's contribution to context.controller."""
