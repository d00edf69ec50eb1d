"""Tests for the Order aggregate: totals, payment outcome and status changes."""

from decimal import Decimal

import pytest
from protean.exceptions import ValidationError

from bookstore.order.events import OrderPaymentFailed, OrderPaymentSucceeded, OrderPlaced, OrderStatusChanged
from bookstore.order.order import Order, OrderStatus, PaymentStatus, parse_status

ADDRESS = {"line1": "1 Library Lane", "city": "Springfield", "postcode": "12345", "country": "US"}


def _line(book_id="book-1", unit_price="10.00", quantity=1, title="Dune"):
    return {
        "book_id": book_id,
        "title": title,
        "cover_url": None,
        "unit_price": Decimal(unit_price),
        "quantity": quantity,
    }


def _order(lines=None, **overrides):
    defaults = {
        "user_id": "user-1",
        "lines": lines if lines is not None else [_line(quantity=2)],
        "shipping_address": ADDRESS,
        "payment_provider": "card",
    }
    defaults.update(overrides)
    return Order.place(**defaults)


class TestPlace:
    def test_new_order_is_pending(self):
        order = _order()
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.payment_reference is None

    def test_total_is_sum_of_subtotals(self):
        order = _order([_line("b1", "10.00", 2), _line("b2", "0.10", 3, title="Emma")])
        assert order.total_amount == Decimal("20.30")
        assert [line.subtotal for line in order.items] == [Decimal("20.00"), Decimal("0.30")]

    def test_lines_snapshot_the_book(self):
        order = _order([_line("b1", "12.50", 1, title="Middlemarch")])
        line = order.items[0]
        assert line.title == "Middlemarch"
        assert line.unit_price == Decimal("12.50")

    def test_shipping_address_is_kept(self):
        assert _order().shipping_address.city == "Springfield"

    def test_incomplete_address_is_rejected(self):
        with pytest.raises(ValidationError):
            _order(shipping_address={"line1": "1 Library Lane"})

    def test_placing_raises_order_placed(self):
        order = _order()
        event = order._events[-1]
        assert isinstance(event, OrderPlaced)
        assert event.line_count == 1

    def test_total_is_exact_for_fractional_prices(self):
        order = _order([_line("b1", "0.10", 1), _line("b2", "0.20", 1, title="Emma")])

        assert order.total_amount == Decimal("0.30")
        assert order.total_amount == sum(line.unit_price * line.quantity for line in order.items)
        assert order.total_cents == 30

    def test_prices_are_rounded_to_whole_cents(self):
        order = _order([_line("b1", "0.125", 2)])
        assert order.items[0].unit_price_cents == 13
        assert order.total_cents == 26

    def test_tampered_total_is_rejected(self):
        order = _order()
        with pytest.raises(ValidationError):
            order.total_cents = 99900


class TestRecordPayment:
    def test_success_marks_paid_with_reference(self):
        order = _order()
        order.record_payment(True, reference="PAY-1-ABCDEF12")

        assert order.status == OrderStatus.PAID.value
        assert order.payment_status == PaymentStatus.SUCCESS.value
        assert order.payment_reference == "PAY-1-ABCDEF12"
        assert isinstance(order._events[-1], OrderPaymentSucceeded)

    def test_success_without_reference_is_rejected(self):
        with pytest.raises(ValidationError):
            _order().record_payment(True)

    def test_failure_stays_pending_without_reference(self):
        order = _order()
        order.record_payment(False)

        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.FAILED.value
        assert order.payment_reference is None
        assert isinstance(order._events[-1], OrderPaymentFailed)


class TestChangeStatus:
    def test_any_status_is_accepted(self):
        order = _order()
        order.change_status("Delivered")
        order.change_status(OrderStatus.PENDING)
        assert order.status == OrderStatus.PENDING.value

        event = order._events[-1]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == OrderStatus.DELIVERED.value

    def test_unknown_status_is_rejected(self):
        with pytest.raises(ValidationError):
            _order().change_status("Lost")


class TestParseStatus:
    @pytest.mark.parametrize("value", ["SHIPPED", "Shipped", "shipped", OrderStatus.SHIPPED])
    def test_names_and_values(self, value):
        assert parse_status(value) is OrderStatus.SHIPPED


class TestOwnership:
    def test_is_owned_by(self):
        order = _order()
        assert order.is_owned_by("user-1")
        assert not order.is_owned_by("user-2")

    def test_includes_book(self):
        order = _order([_line("b1"), _line("b2", title="Emma")])
        assert order.includes_book("b2")
        assert not order.includes_book("b3")
