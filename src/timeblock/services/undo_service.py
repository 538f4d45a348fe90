import asyncio
import time
from typing import Callable, Optional
from pydantic import BaseModel
import logging

from ..models.event import Event

logger = logging.getLogger(__name__)


class UndoOffer(BaseModel):
    """The transient "Moved to ..." offer shown after a drag"""
    message: str
    snapshot: Event
    expires_at: float


class UndoManager:
    """Single-level undo for drag reschedules.

    A new offer replaces the previous one. Offers expire after window_seconds;
    expiry is checked against the clock on every access and, when an event
    loop is supplied, also scheduled on it so the offer is dropped on time.
    """

    def __init__(self, window_seconds: float = 5.0, clock: Callable[[], float] = time.monotonic,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self.window_seconds = window_seconds
        self.clock = clock
        self.loop = loop
        self._offer: Optional[UndoOffer] = None
        self._timer: Optional[asyncio.TimerHandle] = None

    def offer(self, message: str, snapshot: Event) -> UndoOffer:
        """Offer to undo a move, superseding any pending offer"""
        self._cancel_timer()
        if self._offer is not None:
            logger.debug(f"Discarding undo for {self._offer.snapshot.id}, superseded by a new move")
        self._offer = UndoOffer(
            message=message,
            snapshot=snapshot,
            expires_at=self.clock() + self.window_seconds,
        )
        if self.loop is not None:
            self._timer = self.loop.call_later(self.window_seconds, self.expire)
        return self._offer

    @property
    def pending(self) -> Optional[UndoOffer]:
        if self._offer is not None and self.clock() >= self._offer.expires_at:
            self.expire()
        return self._offer

    def undo(self) -> Optional[Event]:
        """Take back the pending snapshot; None when nothing can be undone"""
        offer = self.pending
        if offer is None:
            return None
        self._cancel_timer()
        self._offer = None
        logger.info(f"Undoing move of {offer.snapshot.id}")
        return offer.snapshot

    def expire(self):
        """Drop the pending offer, making the last move permanent"""
        self._cancel_timer()
        if self._offer is not None:
            logger.debug(f"Undo for {self._offer.snapshot.id} expired")
        self._offer = None

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
