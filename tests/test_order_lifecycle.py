import pytest

from conftest import API, SHIPPING
from storefront.core.errors import InvalidStatusTransition
from storefront.models.order import Order
from storefront.repositories.order_repo import OrderRepository
from storefront.schemas.order import OrderStatusUpdate
from storefront.services.order_service import OrderService


@pytest.fixture
def placed_order(client, customer_headers, make_product, add_to_cart):
    add_to_cart(make_product(price=500), 2)
    add_to_cart(make_product(name="B", price=1500), 1)
    res = client.post(
        f"{API}/checkout",
        json={**SHIPPING, "delivery_zone": "inside_dhaka"},
        headers=customer_headers,
    )
    assert res.status_code == 201, res.text
    return res.json()


def _order(session, customer, status="cod_pending") -> Order:
    order = Order(
        user_id=customer.id,
        status=status,
        subtotal=1000,
        delivery_charge=60,
        total_price=1000,
        grand_total=1060,
        customer_name="Test",
        customer_phone="017",
        customer_address="Dhaka",
        delivery_zone="inside_dhaka",
    )
    session.add(order)
    session.commit()
    session.refresh(order)
    return order


@pytest.mark.parametrize(
    "current, new",
    [
        ("cod_pending", "processing"),
        ("cod_pending", "cancelled"),
        ("cod_pending", "delivered"),
        ("payment_pending", "processing"),
        ("processing", "shipped"),
        ("processing", "cancelled"),
        ("shipped", "delivered"),
        ("shipped", "cancelled"),
    ],
)
def test_forward_transitions_are_allowed(session, customer, current, new):
    service = OrderService(OrderRepository())
    order = _order(session, customer, current)

    updated = service.set_status(session, order.id, OrderStatusUpdate(status=new))

    assert updated.status == new


@pytest.mark.parametrize(
    "current, new",
    [
        ("delivered", "cod_pending"),
        ("delivered", "cancelled"),
        ("cancelled", "processing"),
        ("shipped", "processing"),
        ("processing", "cod_pending"),
        ("cod_pending", "payment_pending"),
    ],
)
def test_backward_and_terminal_transitions_are_rejected(session, customer, current, new):
    service = OrderService(OrderRepository())
    order = _order(session, customer, current)

    with pytest.raises(InvalidStatusTransition) as exc_info:
        service.set_status(session, order.id, OrderStatusUpdate(status=new))

    assert exc_info.value.detail["current"] == current
    session.refresh(order)
    assert order.status == current


def test_setting_the_same_status_is_a_noop(session, customer):
    service = OrderService(OrderRepository())
    order = _order(session, customer, "delivered")

    updated = service.set_status(session, order.id, OrderStatusUpdate(status="delivered"))

    assert updated.status == "delivered"


def test_permissive_policy_allows_any_transition(session, customer):
    service = OrderService(OrderRepository(), allow_any_transition=True)
    order = _order(session, customer, "delivered")

    updated = service.set_status(session, order.id, OrderStatusUpdate(status="cod_pending"))

    assert updated.status == "cod_pending"


def test_status_change_leaves_totals_frozen(session, customer):
    service = OrderService(OrderRepository())
    order = _order(session, customer)

    for status in ("processing", "shipped", "delivered"):
        service.set_status(session, order.id, OrderStatusUpdate(status=status))

    session.refresh(order)
    assert (order.subtotal, order.delivery_charge, order.grand_total) == (1000, 60, 1060)
    assert order.grand_total == order.subtotal + order.delivery_charge


def test_admin_status_change_is_visible_to_owner(
    client, admin_headers, customer_headers, placed_order
):
    order_id = placed_order["id"]

    res = client.patch(
        f"{API}/admin/orders/{order_id}/status",
        json={"status": "processing"},
        headers=admin_headers,
    )
    assert res.status_code == 200
    assert res.json()["status"] == "processing"
    assert res.json()["grand_total"] == 2560

    mine = client.get(f"{API}/orders/me/{order_id}", headers=customer_headers).json()
    assert mine["status"] == "processing"
    assert mine["grand_total"] == 2560


def test_invalid_transition_over_http(client, admin_headers, placed_order):
    order_id = placed_order["id"]
    client.patch(
        f"{API}/admin/orders/{order_id}/status",
        json={"status": "delivered"},
        headers=admin_headers,
    )

    res = client.patch(
        f"{API}/admin/orders/{order_id}/status",
        json={"status": "cod_pending"},
        headers=admin_headers,
    )

    assert res.status_code == 409
    assert res.json()["detail"]["code"] == "invalid_status_transition"


def test_unknown_status_value_is_rejected(client, admin_headers, placed_order):
    res = client.patch(
        f"{API}/admin/orders/{placed_order['id']}/status",
        json={"status": "teleported"},
        headers=admin_headers,
    )
    assert res.status_code == 422


def test_customer_cannot_change_status(client, customer_headers, placed_order):
    res = client.patch(
        f"{API}/admin/orders/{placed_order['id']}/status",
        json={"status": "cancelled"},
        headers=customer_headers,
    )

    assert res.status_code == 403
    mine = client.get(
        f"{API}/orders/me/{placed_order['id']}", headers=customer_headers
    ).json()
    assert mine["status"] == "cod_pending"


def test_customer_cannot_read_other_customers_order(client, other_headers, placed_order):
    res = client.get(f"{API}/orders/me/{placed_order['id']}", headers=other_headers)
    assert res.status_code == 404


def test_my_orders_are_listed_newest_first(
    client, customer_headers, make_product, add_to_cart
):
    ids = []
    for name in ("first", "second"):
        add_to_cart(make_product(name=name, price=100), 1)
        res = client.post(
            f"{API}/checkout",
            json={**SHIPPING, "delivery_zone": "outside_dhaka"},
            headers=customer_headers,
        )
        ids.append(res.json()["id"])

    listed = client.get(f"{API}/orders/me", headers=customer_headers).json()

    assert [o["id"] for o in listed] == list(reversed(ids))


def test_set_status_on_missing_order(client, admin_headers):
    res = client.patch(
        f"{API}/admin/orders/00000000-0000-0000-0000-000000000000/status",
        json={"status": "processing"},
        headers=admin_headers,
    )
    assert res.status_code == 404
