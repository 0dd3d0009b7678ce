"""
Welcome Package
===============

Author: حَـــــنَّـــــا
"""

from .formatting import build_welcome_embed, format_welcome_text, is_valid_color, normalize_color
from .service import WelcomeService
from .wizard import WelcomeWizardRoutes

__all__ = [
    "WelcomeService",
    "WelcomeWizardRoutes",
    "build_welcome_embed",
    "format_welcome_text",
    "is_valid_color",
    "normalize_color",
]
