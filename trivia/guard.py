"""
Reentrancy guard and acknowledgement watchdog for the turn engine.
"""

import logging
from typing import Callable, Optional

from trivia.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class TurnGuard:
    """
    Two locks plus one cancelable timeout.

    ``effect_in_progress`` is held while a tile effect is being resolved and
    ``planning`` while the engine waits to advance the turn. Entering the
    planning state arms the watchdog; if nothing releases the guard before
    it fires, both locks are cleared and ``on_timeout`` is called.
    """

    def __init__(self, scheduler: Scheduler, timeout: float, on_timeout: Optional[Callable[[], None]] = None):
        self.scheduler = scheduler
        self.timeout = timeout
        self.on_timeout = on_timeout
        self.effect_in_progress = False
        self.planning = False
        self._timer: Optional[TimerHandle] = None

    @property
    def busy(self) -> bool:
        return self.effect_in_progress or self.planning

    @property
    def watchdog_armed(self) -> bool:
        return self._timer is not None

    def begin_effect(self) -> None:
        self.effect_in_progress = True
        self.enter_planning()

    def enter_planning(self) -> None:
        self.planning = True
        self.cancel()
        self._timer = self.scheduler.call_later(self.timeout, self._fire)

    def exit_planning(self) -> None:
        self.planning = False
        self.cancel()

    def release(self) -> None:
        """Clear both locks and disarm the watchdog."""
        self.effect_in_progress = False
        self.planning = False
        self.cancel()

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        self._timer = None
        if not self.planning:
            return
        logger.warning("Turn locks auto-released after %.0f ms without acknowledgement", self.timeout * 1000)
        self.effect_in_progress = False
        self.planning = False
        if self.on_timeout is not None:
            self.on_timeout()
