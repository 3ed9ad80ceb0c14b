"""Layer registry: kind -> generator layer model."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import ValidationError

from layergen.kernel.layer import GeneratorLayer
from layergen.layers.builtin import BlendLayer, ToggleLayer


class LayerRegistryError(Exception):
    """Raised when a layer kind is unknown or its payload is invalid."""

    pass


class LayerRegistry:
    """In-process registry: kind -> GeneratorLayer subclass."""

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._models: dict[str, type[GeneratorLayer]] = {}

    def register(
        self,
        kind: str,
        model: type[GeneratorLayer],
        *,
        override: bool = False,
    ) -> None:
        """Register model for kind. Raises if registered unless override=True.

        Args:
            kind: Value of the layer's "kind" field.
            model: GeneratorLayer subclass.
            override: If True, replace existing registration.

        Raises:
            ValueError: If kind already registered and override is False.
        """
        if kind in self._models and not override:
            raise ValueError(f"Layer kind already registered: {kind!r}")
        self._models[kind] = model

    def get(self, kind: str) -> type[GeneratorLayer]:
        """Return the model class for kind.

        Raises:
            LayerRegistryError: If kind is not registered.
        """
        if kind not in self._models:
            raise LayerRegistryError(f"Unknown layer kind: {kind!r}")
        return self._models[kind]

    def kinds(self) -> list[str]:
        return sorted(self._models)

    def build(self, payload: Mapping[str, object]) -> GeneratorLayer:
        """Validate a layer payload into its registered model.

        Args:
            payload: Mapping with at least "kind" and "name".

        Returns:
            Validated layer instance.

        Raises:
            LayerRegistryError: On unknown kind or invalid payload.
        """
        kind = payload.get("kind")
        if not isinstance(kind, str):
            raise LayerRegistryError(f"Layer payload has no kind: {dict(payload)!r}")
        model = self.get(kind)
        try:
            return model.model_validate(dict(payload))
        except ValidationError as exc:
            raise LayerRegistryError(f"Invalid {kind!r} layer: {exc}") from exc


def default_registry() -> LayerRegistry:
    """Registry with the built-in layer kinds."""
    registry = LayerRegistry()
    registry.register("toggle", ToggleLayer)
    registry.register("blend", BlendLayer)
    return registry
