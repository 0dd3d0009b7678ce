"""
Ticket System Package
=====================

Ticket panels, ticket channels and their dispatcher routes.

Author: حَـــــنَّـــــا
"""

from .handlers import TicketRoutes
from .naming import format_ticket_name
from .service import TicketService

__all__ = ["TicketService", "TicketRoutes", "format_ticket_name"]
