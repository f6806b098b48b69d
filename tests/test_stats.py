from conftest import API, SHIPPING


def _place_order(client, headers, product, quantity, add_to_cart, zone="inside_dhaka"):
    add_to_cart(product, quantity, headers=headers)
    res = client.post(
        f"{API}/checkout",
        json={**SHIPPING, "delivery_zone": zone},
        headers=headers,
    )
    assert res.status_code == 201, res.text
    return res.json()


def test_dashboard_counts_and_revenue(
    client,
    admin_headers,
    customer_headers,
    other_headers,
    make_product,
    add_to_cart,
):
    lamp = make_product(name="Lamp", price=1000)
    mug = make_product(name="Mug", price=200)

    first = _place_order(client, customer_headers, lamp, 1, add_to_cart)
    second = _place_order(client, other_headers, mug, 2, add_to_cart, zone="outside_dhaka")
    cancelled = _place_order(client, customer_headers, mug, 1, add_to_cart)
    client.patch(
        f"{API}/admin/orders/{cancelled['id']}/status",
        json={"status": "cancelled"},
        headers=admin_headers,
    )

    res = client.get(f"{API}/admin/stats", headers=admin_headers)

    assert res.status_code == 200
    stats = res.json()
    assert stats["total_products"] == 2
    assert stats["total_customers"] == 2
    assert stats["total_orders"] == 3
    assert stats["total_revenue"] == first["grand_total"] + second["grand_total"]
    assert stats["total_revenue"] == 1060 + 520
    assert {s["status"]: s["count"] for s in stats["orders_by_status"]} == {
        "cancelled": 1,
        "cod_pending": 2,
    }
    assert [o["id"] for o in stats["latest_orders"]] == [
        cancelled["id"],
        second["id"],
        first["id"],
    ]


def test_latest_is_limited(client, admin_headers, customer_headers, make_product, add_to_cart):
    product = make_product(price=100)
    for _ in range(3):
        _place_order(client, customer_headers, product, 1, add_to_cart)

    stats = client.get(
        f"{API}/admin/stats", params={"latest": 2}, headers=admin_headers
    ).json()

    assert len(stats["latest_orders"]) == 2


def test_latest_out_of_range_is_rejected(client, admin_headers):
    res = client.get(f"{API}/admin/stats", params={"latest": 0}, headers=admin_headers)

    assert res.status_code == 422
    assert res.json()["detail"]["fields"] == ["latest"]


def test_empty_dashboard(client, admin_headers):
    stats = client.get(f"{API}/admin/stats", headers=admin_headers).json()

    assert stats["total_orders"] == 0
    assert stats["total_revenue"] == 0
    assert stats["orders_by_status"] == []
    assert stats["latest_orders"] == []


def test_stats_are_admin_only(client, customer_headers):
    res = client.get(f"{API}/admin/stats", headers=customer_headers)
    assert res.status_code == 403
