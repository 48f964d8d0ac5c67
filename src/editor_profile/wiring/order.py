"""Static load order for the plugin wiring table."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .models import PluginSpec


class PluginSpecError(ValueError):
    """Raised for inconsistent wiring tables (e.g. duplicate declarations)."""


class PluginDependencyError(RuntimeError):
    """Raised when plugin dependencies form a cycle."""

    def __init__(self, cycle: Sequence[str]) -> None:
        super().__init__("Dependency cycle: " + " -> ".join(cycle))
        self.cycle = tuple(cycle)


def _catalog(specs: Iterable[PluginSpec]) -> Dict[str, PluginSpec]:
    declared: Dict[str, PluginSpec] = {}
    for spec in specs:
        if spec.id in declared:
            raise PluginSpecError(f"Plugin '{spec.id}' is declared more than once")
        declared[spec.id] = spec

    catalog = dict(declared)
    for spec in declared.values():
        for dependency in spec.dependencies:
            catalog.setdefault(dependency, PluginSpec(id=dependency))
    return catalog


def resolve_load_order(specs: Sequence[PluginSpec]) -> tuple[PluginSpec, ...]:
    """Topological order over declared dependencies.

    Declared specs are visited by descending priority, ties broken by
    declaration order. Each spec is preceded by its dependencies, in the
    order they are listed. Dependencies that are not declared themselves
    load as bare specs.
    """

    catalog = _catalog(specs)
    roots = sorted(
        enumerate(specs), key=lambda item: (-item[1].effective_priority, item[0])
    )

    order: List[PluginSpec] = []
    done: set[str] = set()
    path: List[str] = []

    def visit(plugin_id: str) -> None:
        if plugin_id in done:
            return
        if plugin_id in path:
            start = path.index(plugin_id)
            raise PluginDependencyError(path[start:] + [plugin_id])
        path.append(plugin_id)
        spec = catalog[plugin_id]
        for dependency in spec.dependencies:
            visit(dependency)
        path.pop()
        done.add(plugin_id)
        order.append(spec)

    for _, spec in roots:
        visit(spec.id)
    return tuple(order)


__all__ = ["PluginDependencyError", "PluginSpecError", "resolve_load_order"]
