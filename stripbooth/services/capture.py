"""Timed multi-shot capture as an explicit state machine.

    idle -> countdown(n) -> capturing -> awaiting_next -> countdown(n) ...
                                      -> complete

The sequence owns the photos taken so far. Only ``run_capture_sequence``
advances it, one step at a time.
"""

import asyncio
import base64
import logging
from enum import Enum
from typing import Awaitable, Callable, List, Tuple

logger = logging.getLogger(__name__)


class CaptureState(str, Enum):
    idle = "idle"
    countdown = "countdown"
    capturing = "capturing"
    awaiting_next = "awaiting_next"
    complete = "complete"


class InvalidTransition(RuntimeError):
    pass


class CaptureSequence:
    def __init__(self, photo_count: int, countdown_seconds: int = 3):
        if photo_count < 1:
            raise ValueError("photo_count must be positive")
        if countdown_seconds < 0:
            raise ValueError("countdown_seconds cannot be negative")
        self.photo_count = photo_count
        self.countdown_seconds = countdown_seconds
        self.state = CaptureState.idle
        self.remaining = 0
        self._photos: List[bytes] = []

    @property
    def photos(self) -> Tuple[bytes, ...]:
        return tuple(self._photos)

    @property
    def photos_taken(self) -> int:
        return len(self._photos)

    @property
    def is_complete(self) -> bool:
        return self.state is CaptureState.complete

    def _require(self, *states: CaptureState):
        if self.state not in states:
            expected = ", ".join(state.value for state in states)
            raise InvalidTransition(f"Sequence is {self.state.value}, expected {expected}")

    def _begin_countdown(self):
        self.remaining = self.countdown_seconds
        self.state = CaptureState.countdown if self.remaining > 0 else CaptureState.capturing

    def start(self):
        self._require(CaptureState.idle)
        self._begin_countdown()

    def tick(self):
        self._require(CaptureState.countdown)
        self.remaining -= 1
        if self.remaining <= 0:
            self.remaining = 0
            self.state = CaptureState.capturing

    def record(self, photo: bytes):
        self._require(CaptureState.capturing)
        self._photos.append(photo)
        if len(self._photos) >= self.photo_count:
            self.state = CaptureState.complete
        else:
            self.state = CaptureState.awaiting_next

    def resume(self):
        self._require(CaptureState.awaiting_next)
        self._begin_countdown()

    def reset(self):
        self.state = CaptureState.idle
        self.remaining = 0
        self._photos = []


async def run_capture_sequence(
    sequence: CaptureSequence,
    capture: Callable[[], Awaitable[bytes]],
    notify: Callable[[dict], Awaitable[None]],
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    pause: float = 1.5,
) -> Tuple[bytes, ...]:
    """Drive ``sequence`` from idle to complete, one shot after another."""
    sequence.start()
    while True:
        shot = sequence.photos_taken + 1
        while sequence.state is CaptureState.countdown:
            await notify({"type": "countdown", "shot": shot, "remaining": sequence.remaining})
            await sleep(1)
            sequence.tick()

        photo = await capture()
        sequence.record(photo)
        logger.info("Photo %d of %d captured", sequence.photos_taken, sequence.photo_count)
        await notify({
            "type": "photo_captured",
            "photo_count": sequence.photos_taken,
            "photos_needed": sequence.photo_count,
            "capture_complete": sequence.is_complete,
            "photo": base64.b64encode(photo).decode("utf-8"),
        })

        if sequence.is_complete:
            return sequence.photos

        await sleep(pause)
        sequence.resume()
