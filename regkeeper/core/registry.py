# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
RegKeeper Provider Registry

Maps provider names to lazily imported factories. Only providers that
need no system access ship with RegKeeper; real registry back-ends are
registered by the host with register() or register_lazy().
"""

import importlib
import logging
from typing import Any, Callable, Dict, List

from .base_provider import RegistryProvider
from .exceptions import ProviderNotFoundError

logger = logging.getLogger("regkeeper.registry")


class ProviderRegistry:
    """Lazy-loading registry for RegKeeper providers"""

    def __init__(self):
        self._factories: Dict[str, Callable[..., RegistryProvider]] = {}
        self._register_core_providers()

    def _register_core_providers(self):
        """Register core providers - always available"""

        self.register_lazy(
            ["regkeeper.memory", "memory", "snapshot"],
            lambda **options: self._import_memory_provider(**options),
        )

    def _import_provider(self, module_path: str, class_name: str) -> Any:
        """Dynamically import a provider class."""
        try:
            module = importlib.import_module(module_path)
            return getattr(module, class_name)
        except ImportError as e:
            logger.error(f"Failed to import {module_path}.{class_name}: {e}")
            raise
        except AttributeError as e:
            logger.error(f"Class {class_name} not found in {module_path}: {e}")
            raise

    def _import_memory_provider(self, state_file=None, snapshot=None) -> RegistryProvider:
        provider_class = self._import_provider(
            "regkeeper.core.providers.memory", "MemoryProvider"
        )
        if state_file is not None:
            return provider_class.from_file(state_file)
        return provider_class(snapshot)

    def register(self, name: str, provider: RegistryProvider):
        """Register an already-instantiated provider."""
        self._factories[name] = lambda **options: provider

    def register_lazy(self, names: list, factory: Callable[..., RegistryProvider]):
        """Register provider with lazy loading."""
        for name in names:
            self._factories[name] = factory

    def get_provider(self, name: str, **options) -> RegistryProvider:
        """
        Create a provider by name.

        Raises:
            ProviderNotFoundError: If no provider is registered under `name`
        """
        factory = self._factories.get(name)
        if factory is None:
            raise ProviderNotFoundError(
                f"Unknown provider {name!r}. Available: {self.list_providers()}",
                provider_name=name,
            )
        provider = factory(**options)
        logger.debug(f"Loaded provider {name}")
        return provider

    def list_providers(self) -> List[str]:
        return sorted(self._factories)


_registry = None


def get_registry() -> ProviderRegistry:
    """Get global registry instance (singleton)"""
    global _registry
    if _registry is None:
        _registry = ProviderRegistry()
    return _registry


__all__ = [
    "ProviderRegistry",
    "get_registry",
]
