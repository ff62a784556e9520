# qalam/execution/cleanup.py
"""
Deferred one-shot cleanup actions.

Ephemeral resources such as debug shells can be given a lifetime like "30m".
When the lifetime expires a cleanup callback runs once on a timer thread.
This only schedules follow-up work; it never interrupts anything in flight.
"""
import re
import threading
from typing import Callable, Dict, List

from qalam.constants import DEFAULT_CLEANUP_SECONDS, DURATION_MULTIPLIERS
from qalam.utils.logging import get_logger

logger = get_logger(__name__)

_DURATION_PATTERN = re.compile(r"^(\d+)([hms])$")


def parse_duration(duration: str) -> float:
    """
    Convert a duration such as "90s", "30m" or "2h" to seconds.
    
    Unrecognized input falls back to one hour.
    """
    match = _DURATION_PATTERN.match(duration.strip()) if duration else None
    if not match:
        logger.warning(f"Invalid duration '{duration}', defaulting to {DEFAULT_CLEANUP_SECONDS}s")
        return float(DEFAULT_CLEANUP_SECONDS)
    
    value, unit = match.groups()
    return float(int(value) * DURATION_MULTIPLIERS[unit])


class CleanupScheduler:
    """Keeps at most one pending cleanup timer per key."""
    
    def __init__(self):
        self._timers: Dict[str, threading.Timer] = {}
        self._lock = threading.Lock()
        self._logger = logger
    
    def schedule(self, key: str, duration: str, action: Callable[[], None]) -> threading.Timer:
        """
        Run `action` once after `duration` has elapsed.
        
        Scheduling a key that already has a pending timer replaces it.
        
        Args:
            key: Identifier of the resource to clean up
            duration: Delay such as "30m"
            action: Callback invoked on the timer thread
            
        Returns:
            The started timer
        """
        delay = parse_duration(duration)
        
        def fire() -> None:
            with self._lock:
                if self._timers.get(key) is timer:
                    del self._timers[key]
            self._logger.info(f"Auto-cleanup: duration ({duration}) expired for {key}")
            try:
                action()
            except Exception as e:
                self._logger.exception(f"Cleanup for {key} failed: {e}")
        
        timer = threading.Timer(delay, fire)
        timer.daemon = True
        
        with self._lock:
            previous = self._timers.pop(key, None)
            if previous:
                previous.cancel()
            self._timers[key] = timer
        
        timer.start()
        self._logger.debug(f"Scheduled cleanup for {key} in {delay:.0f}s")
        return timer
    
    def cancel(self, key: str) -> bool:
        """Cancel the pending cleanup for a key. Returns False if none was pending."""
        with self._lock:
            timer = self._timers.pop(key, None)
        if not timer:
            return False
        timer.cancel()
        self._logger.debug(f"Cancelled cleanup for {key}")
        return True
    
    def cancel_all(self) -> None:
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()
    
    def pending(self) -> List[str]:
        """Keys that still have a cleanup scheduled."""
        with self._lock:
            return sorted(self._timers)


# Global cleanup scheduler instance
cleanup_scheduler = CleanupScheduler()
