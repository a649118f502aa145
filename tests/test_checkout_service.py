import pytest

from app.cart_service import CheckoutService
from app.errors import EmptyCartError


@pytest.fixture
def service():
    return CheckoutService()


def test_checkout_reports_total_and_clears_cart(registry, service):
    session = registry.create()
    session.add_item("single-smash")
    session.add_item("single-smash")

    receipt = service.checkout(session)

    assert receipt.total == "18.00"
    assert receipt.total_items == 2
    assert receipt.message == "Order placed! Total: $18.00"
    assert receipt.placeholder is True
    assert [(line.item_id, line.quantity) for line in receipt.lines] == [("single-smash", 2)]
    assert session.cart.is_empty
    assert session.cart_open is False


def test_checkout_empty_cart_rejected(registry, service):
    session = registry.create()
    session.toggle_cart(True)

    with pytest.raises(EmptyCartError):
        service.checkout(session)
    assert session.cart_open is True


def test_checkout_logs_placeholder_order(registry, service, caplog):
    session = registry.create()
    session.add_item("oregon-fries")

    with caplog.at_level("INFO", logger="app.cart_service"):
        service.checkout(session)
    assert "placeholder order" in caplog.text
