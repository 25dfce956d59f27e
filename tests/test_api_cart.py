"""
Tests for the cart endpoints, with the product catalog served by FakeErp.
"""

from conftest import bearer, make_token

CART = "/api/v1/cart"


def add(client, headers, product_id, quantity=1):
    return client.post(
        f"{CART}/lines",
        json={"product_id": product_id, "quantity": quantity},
        headers=headers,
    )


class TestGetCart:

    def test_new_cart_is_empty(self, client, auth_headers):
        resp = client.get(CART, headers=auth_headers)

        assert resp.status_code == 200
        body = resp.json()
        assert body["lines"] == []
        assert body["item_count"] == 0
        assert body["summary"] == {
            "subtotal": 0,
            "discount": 0,
            "tax": 0,
            "shipping": 0,
            "total": 0,
        }

    def test_carts_are_per_operator(self, client, auth_headers):
        add(client, auth_headers, 1)

        other = bearer(make_token(sub="8"))
        assert client.get(CART, headers=other).json()["lines"] == []
        assert len(client.get(CART, headers=auth_headers).json()["lines"]) == 1


class TestAddLine:

    def test_add_uses_catalog_price_and_tax(self, client, auth_headers):
        resp = add(client, auth_headers, 1, 2)

        assert resp.status_code == 200
        body = resp.json()
        line = body["lines"][0]
        assert line["product_code"] == "SP001"
        assert line["product_name"] == "Green tea 500ml"
        assert line["unit_price"] == 100000
        assert line["tax_rate"] == 10
        assert line["line_subtotal"] == 200000
        assert line["line_tax"] == 20000
        assert line["line_total"] == 220000
        assert body["summary"]["total"] == 220000

    def test_add_twice_merges(self, client, auth_headers):
        add(client, auth_headers, 2, 2)
        body = add(client, auth_headers, 2, 3).json()

        assert len(body["lines"]) == 1
        assert body["lines"][0]["quantity"] == 5
        assert body["item_count"] == 5
        # catalog string price is accepted, missing tax rate reads as 0
        assert body["summary"]["subtotal"] == 750000
        assert body["summary"]["tax"] == 0

    def test_unknown_product(self, client, auth_headers):
        resp = add(client, auth_headers, 99)
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Product not found"

    def test_invalid_quantity_rejected(self, client, auth_headers):
        assert add(client, auth_headers, 1, 0).status_code == 422

    def test_unusable_catalog_payload_is_not_found(self, client, erp, auth_headers):
        erp.products[5] = {"id": "five"}
        assert add(client, auth_headers, 5).status_code == 404

    def test_erp_down(self, client, erp, auth_headers):
        erp.fail_transport = True
        resp = add(client, auth_headers, 1)
        assert resp.status_code == 502
        assert resp.json()["detail"] == "ERP backend unavailable while loading product"


class TestUpdateLine:

    def test_edit_discount_and_price(self, client, auth_headers):
        add(client, auth_headers, 1, 10)

        resp = client.patch(
            f"{CART}/lines/1",
            json={"unit_price": 100, "discount_percent": 10, "tax_rate": 10},
            headers=auth_headers,
        )

        summary = resp.json()["summary"]
        assert summary["subtotal"] == 1000
        assert summary["discount"] == 100
        assert summary["tax"] == 90
        assert summary["total"] == 990

    def test_quantity_zero_removes_line(self, client, auth_headers):
        add(client, auth_headers, 1)
        resp = client.patch(f"{CART}/lines/1", json={"quantity": 0}, headers=auth_headers)
        assert resp.json()["lines"] == []

    def test_out_of_range_percent_rejected(self, client, auth_headers):
        add(client, auth_headers, 1)
        resp = client.patch(f"{CART}/lines/1", json={"discount_percent": 120}, headers=auth_headers)
        assert resp.status_code == 422

    def test_unknown_line_is_noop(self, client, auth_headers):
        resp = client.patch(f"{CART}/lines/7", json={"quantity": 3}, headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["lines"] == []


class TestRemoveAndClear:

    def test_remove_is_idempotent(self, client, auth_headers):
        add(client, auth_headers, 1)
        add(client, auth_headers, 2)

        first = client.delete(f"{CART}/lines/1", headers=auth_headers).json()
        second = client.delete(f"{CART}/lines/1", headers=auth_headers).json()

        assert first == second
        assert [line["product_id"] for line in second["lines"]] == [2]

    def test_shipping_fee_and_clear(self, client, auth_headers):
        add(client, auth_headers, 1)
        resp = client.put(f"{CART}/shipping-fee", json={"shipping_fee": 30000}, headers=auth_headers)
        assert resp.json()["summary"]["shipping"] == 30000
        assert resp.json()["summary"]["total"] == 140000

        body = client.delete(CART, headers=auth_headers).json()
        assert body["lines"] == []
        assert body["summary"]["shipping"] == 0
        assert body["summary"]["total"] == 0

    def test_negative_shipping_fee_rejected(self, client, auth_headers):
        resp = client.put(f"{CART}/shipping-fee", json={"shipping_fee": -1}, headers=auth_headers)
        assert resp.status_code == 422


class TestAmountBounds:

    def test_huge_unit_price_rejected_and_cart_intact(self, client, auth_headers):
        add(client, auth_headers, 1)

        resp = client.patch(f"{CART}/lines/1", json={"unit_price": "1e30"}, headers=auth_headers)
        assert resp.status_code == 422

        resp = client.get(CART, headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["lines"][0]["unit_price"] == 100000

    def test_huge_quantity_rejected(self, client, auth_headers):
        assert add(client, auth_headers, 1, "1e25").status_code == 422

        resp = client.patch(f"{CART}/lines/1", json={"quantity": "1e25"}, headers=auth_headers)
        assert resp.status_code == 422

    def test_huge_shipping_fee_rejected(self, client, auth_headers):
        resp = client.put(f"{CART}/shipping-fee", json={"shipping_fee": "1e20"}, headers=auth_headers)
        assert resp.status_code == 422
