"""Scoped variable bindings for template expansion.

A Context is an ordered mapping of local bindings plus an optional parent
Context. Reads resolve locally first and then walk the parent chain;
writes, deletes and updates only ever touch the local bindings, so a child
scope can shadow a name but never change an ancestor's value.

Child contexts are created for every ``<for-each>`` iteration, every
``<render-template>`` partial and every ``onrender`` evaluation, and are
dropped when that expansion step finishes.

Example:
    >>> page = Context({"title": "Home", "user": "ada"})
    >>> loop = page.child(item=1)
    >>> loop["item"], loop["title"]
    (1, 'Home')
    >>> loop["title"] = "Shadowed"
    >>> page["title"]
    'Home'
    >>> "item" in page
    False

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from types import MappingProxyType
from typing import Any


class Context(MutableMapping[str, Any]):
    """Ordered name → value bindings with parent delegation.

    Implements the mapping protocol so it can be handed directly to
    ``eval()``/``exec()`` as the locals namespace: lookups walk the chain
    and assignments made by template statements land in this scope.

    Attributes:
        parent: Enclosing Context, or None for a top-level scope
    """

    __slots__ = ("_locals", "_parent")

    def __init__(
        self,
        bindings: Mapping[str, Any] | None = None,
        parent: Context | None = None,
    ):
        self._locals: dict[str, Any] = dict(bindings) if bindings else {}
        self._parent = parent

    @property
    def parent(self) -> Context | None:
        return self._parent

    @property
    def local_bindings(self) -> Mapping[str, Any]:
        """Read-only view of the bindings owned by this scope."""
        return MappingProxyType(self._locals)

    def child(self, bindings: Mapping[str, Any] | None = None, **kwargs: Any) -> Context:
        """Create a scope whose parent is this one."""
        scope = Context(bindings, parent=self)
        scope._locals.update(kwargs)
        return scope

    def __getitem__(self, name: str) -> Any:
        scope: Context | None = self
        while scope is not None:
            try:
                return scope._locals[name]
            except KeyError:
                scope = scope._parent
        raise KeyError(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self._locals[name] = value

    def __delitem__(self, name: str) -> None:
        del self._locals[name]

    def __contains__(self, name: object) -> bool:
        scope: Context | None = self
        while scope is not None:
            if name in scope._locals:
                return True
            scope = scope._parent
        return False

    def __iter__(self) -> Iterator[str]:
        return iter(self.flatten())

    def __len__(self) -> int:
        return len(self.flatten())

    def is_local(self, name: str) -> bool:
        """True if ``name`` is bound in this scope rather than inherited."""
        return name in self._locals

    def flatten(self) -> dict[str, Any]:
        """Every visible binding, nearer scopes overriding outer ones.

        Ordered outermost-first so the result mirrors how the chain was
        built up.
        """
        chain: list[Context] = []
        scope: Context | None = self
        while scope is not None:
            chain.append(scope)
            scope = scope._parent
        merged: dict[str, Any] = {}
        for scope in reversed(chain):
            merged.update(scope._locals)
        return merged

    def names(self) -> frozenset[str]:
        """All names visible from this scope."""
        return frozenset(self.flatten())

    def depth(self) -> int:
        """Number of ancestors above this scope."""
        count = 0
        scope = self._parent
        while scope is not None:
            count += 1
            scope = scope._parent
        return count

    def __repr__(self) -> str:
        return f"<Context {list(self._locals)} depth={self.depth()}>"
