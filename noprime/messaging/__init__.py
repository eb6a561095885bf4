"""
Messaging between page controllers and the coordinator.

Modules:
    messages - Message types and builders
    bus - MessageBus (routing, FIFO posts, JSON isolation)
"""

from . import messages
from .bus import MessageBus, MessageDeliveryError, MessageSender

__all__ = [
    'messages',
    'MessageBus',
    'MessageDeliveryError',
    'MessageSender',
]
