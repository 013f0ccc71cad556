"""
menutree/cascade.py

Per-locale activation rules.

Enabling never cascades upward: a node can only be enabled in a locale its
parent is enabled in. Disabling cascades to every descendant still enabled
in that locale.
"""
from typing import Iterable, List, Sequence

from menutree.errors import PrecedenceError, ValidationError
from menutree.index import NodeIndex
from menutree.types import LOCALES, MenuNode, MenuPatch


def _check_locale(locale: str, locales: Sequence[str]) -> None:
    if locale not in locales:
        raise ValidationError(f"Unknown locale: {locale}")


def _enabled_patch(node: MenuNode, locale: str, value: bool) -> MenuPatch:
    enabled = dict(node.enabled)
    enabled[locale] = value
    return MenuPatch(id=node.id, enabled=enabled)


def plan_enable(
    nodes: Iterable[MenuNode], node_id: str, locale: str,
    locales: Sequence[str] = LOCALES,
) -> List[MenuPatch]:
    _check_locale(locale, locales)
    index = nodes if isinstance(nodes, NodeIndex) else NodeIndex(nodes)
    node = index.get(node_id)
    parent = index.parent_of(node_id)
    if parent is not None and not parent.is_enabled(locale):
        raise PrecedenceError(
            f"Parent menu \"{parent.label()}\" is disabled for '{locale}'; "
            f"enable the parent menu first",
            node_id=node_id, parent_id=parent.id, locale=locale,
        )
    return [_enabled_patch(node, locale, True)]


def plan_disable(
    nodes: Iterable[MenuNode], node_id: str, locale: str,
    locales: Sequence[str] = LOCALES,
) -> List[MenuPatch]:
    _check_locale(locale, locales)
    index = nodes if isinstance(nodes, NodeIndex) else NodeIndex(nodes)
    node = index.get(node_id)
    patches = [_enabled_patch(node, locale, False)]
    for child in index.descendants_of(node_id):
        if child.is_enabled(locale):
            patches.append(_enabled_patch(child, locale, False))
    return patches


def plan_toggle(
    nodes: Iterable[MenuNode], node_id: str, locale: str,
    locales: Sequence[str] = LOCALES,
) -> List[MenuPatch]:
    """Flip enabled[locale] on node_id, applying the rules above."""
    index = nodes if isinstance(nodes, NodeIndex) else NodeIndex(nodes)
    if index.get(node_id).is_enabled(locale):
        return plan_disable(index, node_id, locale, locales)
    return plan_enable(index, node_id, locale, locales)
