"""Built-in generator layers."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, model_validator

from layergen.kernel.controller import ParameterType
from layergen.kernel.layer import GenerationContext, GeneratorLayer


class ToggleLayer(GeneratorLayer):
    """Bool parameter driving a two-state (off/on) layer."""

    kind: Literal["toggle"] = "toggle"
    parameter: str
    default: bool = False
    off_state: str = "Off"
    on_state: str = "On"
    off_motion: str | None = None
    on_motion: str | None = None

    def generate(self, context: GenerationContext) -> None:
        context.add_parameter(self.parameter, ParameterType.BOOL, self.default)
        off = context.add_sub_asset(
            "State", self.off_state, {"motion": self.off_motion}
        )
        on = context.add_sub_asset("State", self.on_state, {"motion": self.on_motion})
        machine = context.add_sub_asset(
            "StateMachine",
            self.name,
            {
                "default_state": (on if self.default else off).object_id,
                "states": [off.object_id, on.object_id],
                "transitions": [
                    {
                        "from": off.object_id,
                        "to": on.object_id,
                        "condition": {"parameter": self.parameter, "mode": "if"},
                    },
                    {
                        "from": on.object_id,
                        "to": off.object_id,
                        "condition": {"parameter": self.parameter, "mode": "if_not"},
                    },
                ],
            },
        )
        context.add_layer(machine)


class BlendLayer(GeneratorLayer):
    """Float parameter blending a list of motions in a 1D blend tree."""

    kind: Literal["blend"] = "blend"
    parameter: str
    default: float = 0.0
    motions: list[str] = Field(min_length=1)
    thresholds: list[float] | None = None
    weight: float = 1.0

    @model_validator(mode="after")
    def _check_thresholds(self) -> BlendLayer:
        if self.thresholds is not None and len(self.thresholds) != len(self.motions):
            raise ValueError("thresholds must match motions one to one")
        return self

    def _effective_thresholds(self) -> list[float]:
        if self.thresholds is not None:
            return list(self.thresholds)
        if len(self.motions) == 1:
            return [0.0]
        step = 1.0 / (len(self.motions) - 1)
        return [round(i * step, 6) for i in range(len(self.motions))]

    def generate(self, context: GenerationContext) -> None:
        context.add_parameter(self.parameter, ParameterType.FLOAT, self.default)
        tree = context.add_sub_asset(
            "BlendTree",
            f"{self.name} Blend",
            {
                "parameter": self.parameter,
                "children": [
                    {"motion": motion, "threshold": threshold}
                    for motion, threshold in zip(
                        self.motions, self._effective_thresholds()
                    )
                ],
            },
        )
        state = context.add_sub_asset("State", self.name, {"motion": tree.object_id})
        machine = context.add_sub_asset(
            "StateMachine",
            self.name,
            {"default_state": state.object_id, "states": [state.object_id]},
        )
        context.add_layer(machine, default_weight=self.weight)
