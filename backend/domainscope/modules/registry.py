"""
Adapter Registry for DomainScope source adapters.

Provides a central, class-level registry where adapters register themselves
via the :meth:`AdapterRegistry.register` decorator.  The aggregator builds
its default adapter set from the registry, keyed by adapter name.
"""

from __future__ import annotations

from typing import Type

from domainscope.modules.base import BaseSourceAdapter


class AdapterRegistry:
    """Manages all available source adapters.

    Adapters are stored in a class-level dictionary keyed by their unique
    ``name`` attribute.  Registration happens at import time through the
    :meth:`register` class-method decorator.

    Example::

        @AdapterRegistry.register
        class MyAdapter(BaseSourceAdapter):
            name = "myadapter"
            ...
    """

    _adapters: dict[str, Type[BaseSourceAdapter]] = {}

    @classmethod
    def register(cls, adapter_class: Type[BaseSourceAdapter]) -> Type[BaseSourceAdapter]:
        """Class-method decorator that registers an adapter in the registry.

        Args:
            adapter_class: The adapter class to register.  Its ``name``
                           attribute is used as the registry key.

        Returns:
            The unmodified *adapter_class* so the decorator is transparent.
        """
        cls._adapters[adapter_class.name] = adapter_class
        return adapter_class

    @classmethod
    def get_all(cls) -> dict[str, BaseSourceAdapter]:
        """Return fresh instances of every registered adapter keyed by name."""
        return {name: adapter_cls() for name, adapter_cls in cls._adapters.items()}
