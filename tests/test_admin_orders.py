import pytest
from sqlmodel import select

from conftest import API, SHIPPING
from storefront.models.order import Order, Payment
from storefront.routers.orders import service as orders_service


@pytest.fixture
def two_orders(
    client, customer_headers, other_headers, make_product, add_to_cart
):
    add_to_cart(make_product(name="A", price=500), 2)
    first = client.post(
        f"{API}/checkout",
        json={**SHIPPING, "delivery_zone": "inside_dhaka"},
        headers=customer_headers,
    ).json()

    add_to_cart(make_product(name="B", price=300), 1, headers=other_headers)
    second = client.post(
        f"{API}/checkout",
        json={
            "customer_name": "Karim Ahmed",
            "customer_address": "Agrabad, Chattogram",
            "customer_phone": "01819000000",
            "delivery_zone": "outside_dhaka",
        },
        headers=other_headers,
    ).json()
    return first, second


def test_admin_listing_includes_customer_email(client, admin_headers, two_orders):
    first, second = two_orders

    rows = client.get(f"{API}/admin/orders", headers=admin_headers).json()

    by_id = {row["id"]: row for row in rows}
    assert by_id[first["id"]]["customer_email"] == "rahim@example.com"
    assert by_id[second["id"]]["customer_email"] == "karim@example.com"
    assert by_id[second["id"]]["customer_phone"] == "01819000000"
    assert by_id[second["id"]]["grand_total"] == 420


@pytest.mark.parametrize(
    "term, expected_email",
    [
        ("karim ahmed", "karim@example.com"),
        ("RAHIM", "rahim@example.com"),
        ("01711", "rahim@example.com"),
        ("karim@example", "karim@example.com"),
    ],
)
def test_admin_search(client, admin_headers, two_orders, term, expected_email):
    rows = client.get(
        f"{API}/admin/orders",
        params={"search": term},
        headers=admin_headers,
    ).json()

    assert [row["customer_email"] for row in rows] == [expected_email]


def test_admin_search_without_match_is_empty(client, admin_headers, two_orders):
    rows = client.get(
        f"{API}/admin/orders",
        params={"search": "nobody"},
        headers=admin_headers,
    ).json()
    assert rows == []


def test_admin_status_filter(client, admin_headers, two_orders):
    first, _ = two_orders
    client.patch(
        f"{API}/admin/orders/{first['id']}/status",
        json={"status": "shipped"},
        headers=admin_headers,
    )

    shipped = client.get(
        f"{API}/admin/orders",
        params={"status": "shipped"},
        headers=admin_headers,
    ).json()

    assert [row["id"] for row in shipped] == [first["id"]]


def test_admin_can_read_any_order_with_payment(client, admin_headers, two_orders):
    _, second = two_orders

    res = client.get(f"{API}/admin/orders/{second['id']}", headers=admin_headers)

    assert res.status_code == 200
    assert res.json()["payment"]["amount"] == second["grand_total"]


def test_customer_cannot_use_admin_listing(client, customer_headers):
    res = client.get(f"{API}/admin/orders", headers=customer_headers)
    assert res.status_code == 403


def test_anonymous_cannot_use_admin_listing(client):
    res = client.get(f"{API}/admin/orders")
    assert res.status_code == 401


def _order_without_payment(session, customer) -> Order:
    order = Order(
        user_id=customer.id,
        subtotal=800,
        delivery_charge=120,
        total_price=800,
        grand_total=920,
        customer_name="Legacy",
        customer_phone="01500000000",
        customer_address="Sylhet",
        delivery_zone="outside_dhaka",
    )
    session.add(order)
    session.commit()
    session.refresh(order)
    return order


def test_reconciliation_lists_orders_without_payment(
    client, session, customer, admin_headers, two_orders
):
    orphan = _order_without_payment(session, customer)

    rows = client.get(
        f"{API}/admin/orders/reconciliation", headers=admin_headers
    ).json()

    assert [row["id"] for row in rows] == [str(orphan.id)]


def test_recording_missing_payment(client, session, customer, admin_headers):
    orphan = _order_without_payment(session, customer)

    res = client.post(
        f"{API}/admin/orders/{orphan.id}/payment", headers=admin_headers
    )

    assert res.status_code == 201
    payment = res.json()["payment"]
    assert payment["amount"] == 920
    assert payment["status"] == "pending"
    assert payment["payment_method"] == "cod"

    again = client.post(
        f"{API}/admin/orders/{orphan.id}/payment", headers=admin_headers
    )
    assert again.status_code == 409
    assert again.json()["detail"]["code"] == "payment_exists"

    rows = client.get(
        f"{API}/admin/orders/reconciliation", headers=admin_headers
    ).json()
    assert rows == []


def test_customer_cannot_record_payment(client, session, customer, customer_headers):
    orphan = _order_without_payment(session, customer)

    res = client.post(
        f"{API}/admin/orders/{orphan.id}/payment", headers=customer_headers
    )

    assert res.status_code == 403


def test_concurrent_payment_record_is_a_conflict(
    client, session, customer, admin_headers, monkeypatch
):
    orphan = _order_without_payment(session, customer)
    session.add(Payment(order_id=orphan.id, amount=orphan.grand_total))
    session.commit()

    # The other operator's payment landed after this request checked.
    monkeypatch.setattr(
        orders_service.order_repo,
        "get_payment_for_order",
        lambda session, order_id: None,
    )

    res = client.post(
        f"{API}/admin/orders/{orphan.id}/payment", headers=admin_headers
    )

    assert res.status_code == 409
    assert res.json()["detail"]["code"] == "payment_exists"
    session.expire_all()
    payments = session.exec(
        select(Payment).where(Payment.order_id == orphan.id)
    ).all()
    assert len(payments) == 1
