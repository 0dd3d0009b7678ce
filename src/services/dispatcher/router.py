"""
Prefix Router
=============

Table of (custom-id prefix, handler) pairs.

resolve() returns the route with the longest prefix that the custom id
starts with, so ``ticket_wizard_jump_`` wins over ``ticket_`` regardless
of registration order. The handler receives the remainder of the custom id
after the prefix.

Author: حَـــــنَّـــــا
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

import discord

RouteHandler = Callable[[discord.Interaction, str], Awaitable[Any]]


@dataclass(frozen=True)
class Route:
    prefix: str
    handler: RouteHandler
    name: str = ""

    def suffix(self, custom_id: str) -> str:
        return custom_id[len(self.prefix):]


class PrefixRouter:
    """Longest-prefix custom id routing table."""

    def __init__(self) -> None:
        self._routes: Dict[str, Route] = {}

    def register(self, prefix: str, handler: RouteHandler, name: str = "") -> Route:
        """
        Add a route.

        Raises:
            ValueError: If ``prefix`` is empty or already registered.
        """
        if not prefix:
            raise ValueError("Route prefix must not be empty")
        if prefix in self._routes:
            raise ValueError(f"Route prefix already registered: {prefix}")
        route = Route(prefix, handler, name or prefix)
        self._routes[prefix] = route
        return route

    def resolve(self, custom_id: str) -> Optional[Route]:
        best: Optional[Route] = None
        for prefix, route in self._routes.items():
            if custom_id.startswith(prefix) and (best is None or len(prefix) > len(best.prefix)):
                best = route
        return best

    @property
    def routes(self) -> List[Route]:
        return sorted(self._routes.values(), key=lambda r: len(r.prefix), reverse=True)

    def __len__(self) -> int:
        return len(self._routes)


__all__ = ["PrefixRouter", "Route", "RouteHandler"]
