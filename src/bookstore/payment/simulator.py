"""Probabilistic payment simulator.

Stands in for a payment gateway: no external calls, no stored state, no
retries. Each attempt is an independent uniform draw that succeeds when it
lands above the failure rate.
"""

import random
import time
from uuid import uuid4

DEFAULT_FAILURE_RATE = 0.1


class PaymentSimulator:
    def __init__(self, failure_rate: float = DEFAULT_FAILURE_RATE, rng: random.Random | None = None) -> None:
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError(f"failure_rate must be within [0, 1], got {failure_rate}")
        self.failure_rate = failure_rate
        self._rng = rng or random.Random()

    def attempt(self) -> bool:
        return self._rng.random() > self.failure_rate


def new_payment_reference() -> str:
    """Unique, time-ordered reference for a successful payment."""
    return f"PAY-{time.time_ns() // 1_000_000}-{uuid4().hex[:8].upper()}"
