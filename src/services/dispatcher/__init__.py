"""
Interaction Dispatcher Package
==============================

Author: حَـــــنَّـــــا
"""

from .dispatcher import GENERIC_ERROR_MESSAGE, UNRECOGNIZED_MESSAGE, InteractionDispatcher
from .guard import GuardEntry, InteractionGuard
from .router import PrefixRouter, Route, RouteHandler

__all__ = [
    "InteractionDispatcher",
    "InteractionGuard",
    "GuardEntry",
    "PrefixRouter",
    "Route",
    "RouteHandler",
    "UNRECOGNIZED_MESSAGE",
    "GENERIC_ERROR_MESSAGE",
]
