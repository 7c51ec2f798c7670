"""Responder manifests and auto-discovery.

Responder modules expose a ``PLUGIN_MANIFESTS`` list. The registry scans a
package for these lists so config files can name a responder by ID.
"""

from __future__ import annotations

import importlib
import pkgutil
from dataclasses import dataclass
from typing import Any, Callable, Literal

ComponentKind = Literal["responder"]


@dataclass(frozen=True, slots=True)
class ComponentManifest:
    """Manifest for a discoverable component.

    Parameters
    ----------
    kind : {"responder"}
        Component category.
    component_id : str
        Identifier unique within ``kind``.
    factory : Callable[..., Any]
        Keyword-only factory creating the component.
    version : str, optional
        Manifest version label.
    description : str, optional
        Human-readable summary.
    """

    kind: ComponentKind
    component_id: str
    factory: Callable[..., Any]
    version: str = "1.0.0"
    description: str = ""


class PluginRegistry:
    """Registry of component manifests keyed by ``(kind, component_id)``."""

    def __init__(self) -> None:
        self._manifests: dict[tuple[ComponentKind, str], ComponentManifest] = {}

    def register(self, manifest: ComponentManifest) -> None:
        """Register one manifest.

        Re-registering an identical manifest is a no-op.

        Raises
        ------
        ValueError
            If a different manifest is already registered under the same key.
        """

        key = (manifest.kind, manifest.component_id)
        existing = self._manifests.get(key)
        if existing is None:
            self._manifests[key] = manifest
            return
        if existing != manifest:
            raise ValueError(
                f"manifest conflict for {manifest.kind}:{manifest.component_id}; already registered"
            )

    def get(self, kind: ComponentKind, component_id: str) -> ComponentManifest:
        """Return a registered manifest.

        Raises
        ------
        KeyError
            If no manifest is registered under the key. The message lists the
            known IDs for ``kind``.
        """

        try:
            return self._manifests[(kind, component_id)]
        except KeyError:
            known = [item.component_id for item in self.list(kind)]
            raise KeyError(f"unknown {kind} {component_id!r}; known: {known}") from None

    def list(self, kind: ComponentKind | None = None) -> tuple[ComponentManifest, ...]:
        """List manifests sorted by kind and ID, optionally filtered by kind."""

        manifests = tuple(self._manifests.values())
        if kind is not None:
            manifests = tuple(item for item in manifests if item.kind == kind)
        return tuple(sorted(manifests, key=lambda item: (item.kind, item.component_id)))

    def create(self, kind: ComponentKind, component_id: str, **kwargs: Any) -> Any:
        """Create a component through its manifest factory."""

        return self.get(kind, component_id).factory(**kwargs)

    def create_responder(self, component_id: str, **kwargs: Any) -> Any:
        """Create a responder by ID."""

        return self.create("responder", component_id, **kwargs)

    def discover(self, package_name: str) -> tuple[ComponentManifest, ...]:
        """Import every module under ``package_name`` and register its manifests.

        Raises
        ------
        TypeError
            If a ``PLUGIN_MANIFESTS`` entry is not a :class:`ComponentManifest`.
        """

        package = importlib.import_module(package_name)
        modules = [package]
        if hasattr(package, "__path__"):
            for module_info in pkgutil.walk_packages(package.__path__, prefix=package.__name__ + "."):
                modules.append(importlib.import_module(module_info.name))

        discovered: list[ComponentManifest] = []
        for module in modules:
            for manifest in getattr(module, "PLUGIN_MANIFESTS", ()):
                if not isinstance(manifest, ComponentManifest):
                    raise TypeError(
                        f"{module.__name__}.PLUGIN_MANIFESTS must contain ComponentManifest objects"
                    )
                self.register(manifest)
                discovered.append(manifest)
        return tuple(discovered)


def build_default_registry() -> PluginRegistry:
    """Build a registry with the built-in responders discovered."""

    registry = PluginRegistry()
    registry.discover("discount_titration.responders")
    return registry
