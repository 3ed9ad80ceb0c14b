"""Generator layers: contract, built-ins and kind registry."""

from layergen.kernel.layer import GenerationContext, GeneratorLayer
from layergen.layers.builtin import BlendLayer, ToggleLayer
from layergen.layers.registry import (
    LayerRegistry,
    LayerRegistryError,
    default_registry,
)

__all__ = [
    "BlendLayer",
    "GenerationContext",
    "GeneratorLayer",
    "LayerRegistry",
    "LayerRegistryError",
    "ToggleLayer",
    "default_registry",
]
