"""
Message Bus

Asynchronous message passing between execution contexts (the coordinator
and one controller per tab). Every message and reply is copied through
JSON on the way across, so contexts never share objects.

Delivery guarantees:
- Requests (request_coordinator, send_to_tab) await the receiver's reply
- Posts (post_to_coordinator) are fire-and-forget, delivered in FIFO
  order per sending tab; nothing is ordered across senders
- Posts still queued when their tab unregisters (closed or reloaded) are
  discarded, never delivered to the coordinator
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Set

from .messages import Message

logger = logging.getLogger(__name__)


class MessageDeliveryError(RuntimeError):
    """Raised when a message is addressed to a context with no receiver."""


@dataclass(frozen=True)
class MessageSender:
    """Where a message came from (tab_id None for non-tab contexts)."""
    tab_id: Optional[int] = None


CoordinatorHandler = Callable[[Message, MessageSender], Awaitable[Any]]
TabHandler = Callable[[Message], Awaitable[Any]]


def _copy(value: Any) -> Any:
    """Serialize across the context boundary."""
    return json.loads(json.dumps(value))


class MessageBus:
    """
    Routes messages between the coordinator and tab controllers.

    Usage:
        bus = MessageBus()
        bus.register_coordinator(coordinator.handle_message)
        bus.register_tab(tab_id, controller.handle_message)

        bus.post_to_coordinator(product_detected(payload), tab_id=tab_id)
        cached = await bus.request_coordinator(get_product(tab_id))
        fresh = await bus.send_to_tab(tab_id, query_product())
        await bus.drain()
    """

    def __init__(self):
        self._coordinator: Optional[CoordinatorHandler] = None
        self._tabs: Dict[int, TabHandler] = {}
        # Last queued delivery per sending tab, for FIFO chaining
        self._chains: Dict[Optional[int], asyncio.Task] = {}
        self._pending: Set[asyncio.Task] = set()
        # Bumped on unregister; posts from an older page are stale
        self._generations: Dict[Optional[int], int] = {}

    def register_coordinator(self, handler: CoordinatorHandler) -> None:
        self._coordinator = handler

    def register_tab(self, tab_id: int, handler: TabHandler) -> None:
        self._tabs[tab_id] = handler

    def unregister_tab(self, tab_id: int) -> None:
        self._tabs.pop(tab_id, None)
        self._generations[tab_id] = self._generations.get(tab_id, 0) + 1

    def has_receiver(self, tab_id: int) -> bool:
        return tab_id in self._tabs

    async def request_coordinator(self, message: Message, tab_id: Optional[int] = None) -> Any:
        """
        Send a request to the coordinator and await its reply.

        Raises:
            MessageDeliveryError: If no coordinator is registered
        """
        handler = self._coordinator_handler()
        reply = await handler(_copy(message), MessageSender(tab_id))
        return _copy(reply)

    def post_to_coordinator(self, message: Message, tab_id: Optional[int] = None) -> None:
        """
        Queue a fire-and-forget message to the coordinator.

        Must be called from a running event loop. Handler errors are logged,
        never raised to the sender.
        """
        handler = self._coordinator_handler()
        body = _copy(message)
        previous = self._chains.get(tab_id)
        generation = self._generations.get(tab_id, 0)

        task = asyncio.get_running_loop().create_task(
            self._deliver_after(previous, handler, body, MessageSender(tab_id), generation)
        )
        self._chains[tab_id] = task
        self._pending.add(task)
        task.add_done_callback(lambda t: self._forget(tab_id, t))

    async def send_to_tab(self, tab_id: int, message: Message) -> Any:
        """
        Deliver a message to a tab's controller and await its reply.

        Raises:
            MessageDeliveryError: If the tab has no receiver (closed, or not
                a retailer page)
        """
        handler = self._tabs.get(tab_id)
        if handler is None:
            raise MessageDeliveryError(f"Could not establish connection: no receiver in tab {tab_id}")
        reply = await handler(_copy(message))
        return _copy(reply)

    async def drain(self) -> None:
        """Wait until every posted message has been handled."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _coordinator_handler(self) -> CoordinatorHandler:
        if self._coordinator is None:
            raise MessageDeliveryError("No coordinator registered")
        return self._coordinator

    async def _deliver_after(
        self,
        previous: Optional[asyncio.Task],
        handler: CoordinatorHandler,
        message: Message,
        sender: MessageSender,
        generation: int,
    ) -> None:
        if previous is not None and not previous.done():
            await asyncio.wait({previous})
        if self._generations.get(sender.tab_id, 0) != generation:
            logger.debug("Dropping %s from tab %s: page is gone", message.get("type"), sender.tab_id)
            return
        try:
            await handler(message, sender)
        except Exception as e:
            logger.warning("Coordinator failed to handle %s from tab %s: %s",
                           message.get("type"), sender.tab_id, e)

    def _forget(self, tab_id: Optional[int], task: asyncio.Task) -> None:
        self._pending.discard(task)
        if self._chains.get(tab_id) is task:
            del self._chains[tab_id]
