#!/usr/bin/env python3
"""Retry with exponential backoff for calls to local services."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from typing import TypeVar

from voicegrid.core.logging_utils import setup_logger

logger = setup_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How many attempts to make and how long to pause between them."""

    tries: int = 2
    delay: float = 0.25
    backoff: float = 2.0

    def __post_init__(self):
        if self.tries < 1:
            raise ValueError(f"tries must be at least 1, got {self.tries}")

    @classmethod
    def from_config(cls, section: dict) -> "RetryPolicy":
        """Build from a config section (``retries``, ``retry_delay``, ``retry_backoff``)."""
        return cls(
            tries=int(section.get("retries", cls.tries)),
            delay=float(section.get("retry_delay", cls.delay)),
            backoff=float(section.get("retry_backoff", cls.backoff)),
        )

    def pauses(self) -> list[float]:
        """Seconds to sleep before each retry; one fewer than ``tries``."""
        return [self.delay * self.backoff**n for n in range(self.tries - 1)]


def retry(
    policy: RetryPolicy,
    exceptions: tuple[type[Exception], ...],
    log: logging.Logger | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Retry decorator with exponential backoff.

    Only ``exceptions`` are retried; anything else propagates at once. The
    final attempt's exception propagates unchanged.

    Args:
        policy: Attempt count and backoff
        exceptions: Exception types that count as transient
        log: Logger for retry warnings (defaults to this module's)
    """
    log = log or logger

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            for attempt, pause in enumerate(policy.pauses(), start=1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    log.warning(
                        f"{func.__name__} failed (attempt {attempt}/{policy.tries}): {e}. "
                        f"Retrying in {pause:.2f}s"
                    )
                    time.sleep(pause)
            return func(*args, **kwargs)

        return wrapper

    return decorator
