"""
Resource registration utilities.

Each module in this package exposes a `register_resources(registry, client)`
function that adds its `bookstack://` URI patterns to the central registry.
"""

from __future__ import annotations

from typing import Iterable

from ..registry import CatalogResource, Registry


def add_all(registry: Registry, resources: Iterable[CatalogResource]) -> None:
    for resource in resources:
        registry.add_resource(resource)
