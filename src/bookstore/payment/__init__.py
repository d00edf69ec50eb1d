"""Payment simulator factory.

``get_simulator()`` builds the default simulator from the domain's
``custom.PAYMENT_FAILURE_RATE`` setting; ``set_simulator()`` swaps in a
different one (tests pin outcomes this way).
"""

from protean.utils.globals import current_domain

from bookstore.payment.simulator import DEFAULT_FAILURE_RATE, PaymentSimulator

_current_simulator: PaymentSimulator | None = None


def _configured_failure_rate() -> float:
    custom = current_domain.config.get("custom") or {}
    return float(custom.get("PAYMENT_FAILURE_RATE", DEFAULT_FAILURE_RATE))


def get_simulator() -> PaymentSimulator:
    global _current_simulator
    if _current_simulator is None:
        _current_simulator = PaymentSimulator(failure_rate=_configured_failure_rate())
    return _current_simulator


def set_simulator(simulator: PaymentSimulator) -> None:
    global _current_simulator
    _current_simulator = simulator


def reset_simulator() -> None:
    global _current_simulator
    _current_simulator = None
