"""Swipe browsing: a drag-gesture state machine over a fixed deck of cards."""

import logging
from collections import defaultdict
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")

Mode = Literal["regular", "scanned"]
Handler = Callable[..., None]

# Pixel distances
DIRECTION_THRESHOLD = 50
COMMIT_THRESHOLD = 100

MOVE = "move"
UP = "up"

logger = logging.getLogger(__name__)


class SwipeDirection(str, Enum):
    NONE = "none"
    LEFT = "left"
    RIGHT = "right"


class SwipeOutcome(str, Enum):
    LIKE = "like"
    DISLIKE = "dislike"
    SNAP_BACK = "snap_back"
    IGNORED = "ignored"


class PointerSurface:
    """
    Listener registry standing in for the document while a drag is in progress.

    Pointer events that leave the card still reach the deck through it.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, event: str, handler: Handler) -> None:
        """Register a handler for an event."""
        self._listeners[event].append(handler)

    def unsubscribe(self, event: str, handler: Handler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._listeners.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def dispatch(self, event: str, *args: Any) -> int:
        """
        Deliver an event to every current handler.

        Returns:
            Number of handlers called
        """
        handlers = list(self._listeners.get(event, []))
        for handler in handlers:
            handler(*args)
        return len(handlers)

    def listener_count(self, event: str | None = None) -> int:
        """Number of registered handlers, for one event or all of them."""
        if event is not None:
            return len(self._listeners.get(event, []))
        return sum(len(handlers) for handlers in self._listeners.values())


class SwipeDeck(Generic[T]):
    """
    Turns a list of apartments into a swipeable deck.

    `current_index` runs from 0 to `len(items)`; reaching `len(items)` is the
    terminal state. In "regular" mode likes and dislikes only move the deck. In
    "scanned" mode a like first hands the current item to `on_like`.
    """

    def __init__(
        self,
        items: Sequence[T],
        mode: Mode = "regular",
        on_like: Callable[[T], Any] | None = None,
        surface: PointerSurface | None = None,
    ) -> None:
        """
        Initialize the deck.

        Args:
            items: Cards, in display order (copied; later changes do not affect the deck)
            mode: "regular" or "scanned"
            on_like: Called with the liked item in scanned mode
            surface: Document-level pointer surface
        """
        self.items: tuple[T, ...] = tuple(items)
        self.mode = mode
        self.on_like = on_like
        self.surface = surface or PointerSurface()

        self.current_index = 0
        self.drag_offset = 0.0
        self.is_dragging = False
        self._start_x = 0.0
        self._subscribed = False

    @property
    def swipe_direction(self) -> SwipeDirection:
        """Overlay hint derived from the drag offset."""
        if abs(self.drag_offset) <= DIRECTION_THRESHOLD:
            return SwipeDirection.NONE
        return SwipeDirection.RIGHT if self.drag_offset > 0 else SwipeDirection.LEFT

    @property
    def is_complete(self) -> bool:
        return self.current_index >= len(self.items)

    @property
    def current(self) -> T | None:
        """Card on top of the deck, None in the terminal state."""
        if self.is_complete:
            return None
        return self.items[self.current_index]

    @property
    def progress(self) -> tuple[int, int]:
        """(cards seen, total cards)."""
        return self.current_index, len(self.items)

    def upcoming(self, count: int = 2) -> list[T]:
        """Cards stacked behind the current one."""
        start = self.current_index + 1
        return list(self.items[start : start + count])

    def start(self, x: float) -> None:
        """Pointer down on the card."""
        self.is_dragging = True
        self._start_x = x
        self._subscribe()

    def move(self, x: float) -> None:
        """Pointer moved; ignored unless a drag is in progress."""
        if not self.is_dragging:
            return
        self.drag_offset = x - self._start_x

    def end(self) -> SwipeOutcome:
        """
        Pointer released.

        Returns:
            LIKE or DISLIKE past the commit threshold, SNAP_BACK below it,
            IGNORED when no drag was in progress
        """
        if not self.is_dragging:
            return SwipeOutcome.IGNORED

        self._unsubscribe()
        offset = self.drag_offset
        self._settle()

        if offset > COMMIT_THRESHOLD:
            return self.like()
        if offset < -COMMIT_THRESHOLD:
            return self.dislike()
        return SwipeOutcome.SNAP_BACK

    def like(self) -> SwipeOutcome:
        """Commit a like on the current card."""
        self._settle()
        item = self.current
        if item is None:
            return SwipeOutcome.IGNORED
        if self.mode == "scanned" and self.on_like is not None:
            self.on_like(item)
        self._advance()
        return SwipeOutcome.LIKE

    def dislike(self) -> SwipeOutcome:
        """Commit a dislike on the current card."""
        self._settle()
        if self.current is None:
            return SwipeOutcome.IGNORED
        self._advance()
        return SwipeOutcome.DISLIKE

    def reset(self) -> None:
        """Back to the first card."""
        self.current_index = 0

    def close(self) -> None:
        """Tear the deck down, dropping any document listeners."""
        self._unsubscribe()
        self._settle()

    def _advance(self) -> None:
        if self.current_index < len(self.items):
            self.current_index += 1
        if self.is_complete:
            logger.debug("Deck of %d cards exhausted", len(self.items))

    def _settle(self) -> None:
        self.drag_offset = 0.0
        self.is_dragging = False

    def _on_document_move(self, x: float) -> None:
        self.move(x)

    def _on_document_up(self) -> None:
        self.end()

    def _subscribe(self) -> None:
        if self._subscribed:
            return
        self.surface.subscribe(MOVE, self._on_document_move)
        self.surface.subscribe(UP, self._on_document_up)
        self._subscribed = True

    def _unsubscribe(self) -> None:
        if not self._subscribed:
            return
        self.surface.unsubscribe(MOVE, self._on_document_move)
        self.surface.unsubscribe(UP, self._on_document_up)
        self._subscribed = False


__all__ = [
    "COMMIT_THRESHOLD",
    "DIRECTION_THRESHOLD",
    "PointerSurface",
    "SwipeDeck",
    "SwipeDirection",
    "SwipeOutcome",
]
