"""
주문 API 엔드포인트 통합 테스트
"""

import pytest
from fastapi.testclient import TestClient

from app.core.identifiers import new_id
from app.main import app


@pytest.fixture
def product_ids(test_client):
    """재고 10개(Soap), 5개(Oil)인 상품 두 개를 생성"""
    ids = {}
    for name, stock in (("Soap", 10), ("Oil", 5)):
        response = test_client.post(
            "/products", json={"img": "x", "name": name, "price": 100, "stock": stock}
        )
        ids[name] = response.json()["insertedId"]
    return ids


def order_payload(invoice: str, items: list[tuple[str, str, int]]) -> dict:
    return {
        "invoiceNumber": invoice,
        "customer": {"name": "Rahim", "phone": "01700000000", "address": "Dhaka"},
        "cartItems": [
            {"productId": product_id, "name": name, "quantity": quantity}
            for product_id, name, quantity in items
        ],
        "pricing": {"subtotal": 300, "discount": 0, "deliveryCharge": 60, "total": 360},
    }


def stock(test_client, product_id: str) -> int:
    return test_client.get(f"/products/{product_id}").json()["product"]["stock"]


def place_order(test_client, invoice: str, items) -> str:
    response = test_client.post("/orders", json=order_payload(invoice, items))
    assert response.status_code == 200, response.json()
    return response.json()["orderId"]


class TestOrderCreateAPI:
    """주문 생성 API 테스트 클래스"""

    def test_place_order(self, test_client, product_ids):
        """주문 성공 시 재고 감소"""
        soap, oil = product_ids["Soap"], product_ids["Oil"]

        response = test_client.post(
            "/orders",
            json=order_payload("INV-1", [(soap, "Soap", 3), (oil, "Oil", 5)]),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Order placed successfully"
        assert len(data["orderId"]) == 32
        assert stock(test_client, soap) == 7
        assert stock(test_client, oil) == 0

    def test_over_stock_cart_rejected(self, test_client, product_ids):
        """재고 초과 주문은 400, 어떤 재고도 변경되지 않음"""
        soap, oil = product_ids["Soap"], product_ids["Oil"]

        response = test_client.post(
            "/orders",
            json=order_payload("INV-1", [(soap, "Soap", 2), (oil, "Oil", 6)]),
        )

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Insufficient stock for Oil",
        }
        assert stock(test_client, soap) == 10
        assert stock(test_client, oil) == 5

    def test_duplicate_invoice_rejected(self, test_client, product_ids):
        """중복 인보이스는 400, 재고 변경 없음"""
        soap = product_ids["Soap"]
        place_order(test_client, "INV-1", [(soap, "Soap", 2)])

        response = test_client.post(
            "/orders", json=order_payload("INV-1", [(soap, "Soap", 2)])
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invoice number already exists!"
        assert stock(test_client, soap) == 8

    def test_unknown_product(self, test_client, product_ids):
        """없는 상품은 404"""
        response = test_client.post(
            "/orders", json=order_payload("INV-1", [(new_id(), "Ghost", 1)])
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Product not found: Ghost"

    def test_malformed_product_id(self, test_client):
        """잘못된 상품 ID 형식은 500이 아니라 400"""
        response = test_client.post(
            "/orders", json=order_payload("INV-1", [("123", "Soap", 1)])
        )

        assert response.status_code == 400

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity(self, test_client, product_ids, quantity):
        """수량은 양수여야 함"""
        response = test_client.post(
            "/orders",
            json=order_payload("INV-1", [(product_ids["Soap"], "Soap", quantity)]),
        )

        assert response.status_code == 400
        assert stock(test_client, product_ids["Soap"]) == 10

    def test_empty_cart(self, test_client):
        """빈 장바구니는 400"""
        response = test_client.post("/orders", json=order_payload("INV-1", []))

        assert response.status_code == 400
        assert "cartItems" in response.json()["message"]


class TestOrderListAPI:
    """주문 목록 API 테스트 클래스"""

    def test_list_orders(self, test_client, product_ids):
        """주문 목록: 최신순, 페이지 정보, camelCase 응답"""
        soap = product_ids["Soap"]
        place_order(test_client, "INV-1", [(soap, "Soap", 1)])
        place_order(test_client, "INV-2", [(soap, "Soap", 2)])

        response = test_client.get("/orders", params={"limit": 1})

        data = response.json()
        assert response.status_code == 200
        assert data["totalOrders"] == 2
        assert data["totalPages"] == 2
        assert data["currentPage"] == 1
        order = data["orders"][0]
        assert order["invoiceNumber"] == "INV-2"
        assert order["cartItems"] == [{"productId": soap, "name": "Soap", "quantity": 2}]
        assert order["customer"]["name"] == "Rahim"
        assert order["pricing"]["deliveryCharge"] == 60
        assert order["status"] == "pending"

    def test_list_orders_search_and_status(self, test_client, product_ids):
        """검색어와 상태 필터"""
        soap = product_ids["Soap"]
        first = place_order(test_client, "INV-AAA", [(soap, "Soap", 1)])
        place_order(test_client, "INV-BBB", [(soap, "Soap", 1)])
        test_client.patch(f"/orders/cancel/{first}")

        by_search = test_client.get("/orders", params={"search": "bbb"}).json()
        by_status = test_client.get("/orders", params={"status": "canceled"}).json()

        assert [o["invoiceNumber"] for o in by_search["orders"]] == ["INV-BBB"]
        assert [o["_id"] for o in by_status["orders"]] == [first]

    def test_unknown_order_fields_not_stored(self, test_client, product_ids):
        """정의되지 않은 주문 필드는 저장하지 않음"""
        soap = product_ids["Soap"]
        payload = order_payload("INV-1", [(soap, "Soap", 1)])
        payload["paymentMethod"] = "cod"
        payload["pricing"]["couponCode"] = "SAVE10"
        payload["cartItems"][0]["price"] = 100
        test_client.post("/orders", json=payload)

        order = test_client.get("/orders").json()["orders"][0]

        assert "paymentMethod" not in order
        assert set(order["pricing"]) == {"subtotal", "discount", "deliveryCharge", "total"}
        assert order["cartItems"] == [{"productId": soap, "name": "Soap", "quantity": 1}]


class TestOrderUpdateAPI:
    """주문 수정 API 테스트 클래스"""

    def test_update_reconciles_stock(self, test_client, product_ids):
        """A 5→2, 신규 B 3 → A +3, B -3"""
        soap, oil = product_ids["Soap"], product_ids["Oil"]
        order_id = place_order(test_client, "INV-1", [(soap, "Soap", 5)])

        payload = order_payload("INV-1", [(soap, "Soap", 2), (oil, "Oil", 3)])
        # originalItems는 무시되고 저장된 주문 기준으로 계산
        payload["originalItems"] = [{"productId": soap, "quantity": 99}]
        response = test_client.put(f"/orders/{order_id}", json=payload)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Order updated successfully",
        }
        assert stock(test_client, soap) == 8
        assert stock(test_client, oil) == 2

    def test_update_insufficient_stock(self, test_client, product_ids):
        """재고 부족 시 400, 변경 없음"""
        soap, oil = product_ids["Soap"], product_ids["Oil"]
        order_id = place_order(test_client, "INV-1", [(soap, "Soap", 5)])

        response = test_client.put(
            f"/orders/{order_id}",
            json=order_payload("INV-1", [(oil, "Oil", 9)]),
        )

        assert response.status_code == 400
        assert stock(test_client, soap) == 5
        assert stock(test_client, oil) == 5

    def test_update_canceled_order(self, test_client, product_ids):
        """취소된 주문 수정은 400"""
        soap = product_ids["Soap"]
        order_id = place_order(test_client, "INV-1", [(soap, "Soap", 1)])
        test_client.patch(f"/orders/cancel/{order_id}")

        response = test_client.put(
            f"/orders/{order_id}", json=order_payload("INV-1", [(soap, "Soap", 4)])
        )

        assert response.status_code == 400
        assert stock(test_client, soap) == 10

    def test_confirmed_order_back_to_pending_rejected(self, test_client, product_ids):
        """확정된 주문을 pending으로 수정하면 400, 상태는 confirmed 유지"""
        soap = product_ids["Soap"]
        order_id = place_order(test_client, "INV-1", [(soap, "Soap", 1)])
        test_client.patch(f"/orders/confirm/{order_id}")

        payload = order_payload("INV-1", [(soap, "Soap", 1)])
        payload["status"] = "pending"
        response = test_client.put(f"/orders/{order_id}", json=payload)

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Cannot move a confirmed order back to pending",
        }
        orders = test_client.get("/orders").json()["orders"]
        assert orders[0]["status"] == "confirmed"

    def test_update_missing_order(self, test_client, product_ids):
        """없는 주문은 404"""
        response = test_client.put(
            f"/orders/{new_id()}",
            json=order_payload("INV-1", [(product_ids["Soap"], "Soap", 1)]),
        )

        assert response.status_code == 404


class TestOrderLifecycleAPI:
    """주문 취소/반품/확정/삭제 API 테스트 클래스"""

    def test_cancel_restores_stock_once(self, test_client, product_ids):
        """취소 시 재고 복원, 두 번째 취소는 400이고 재고 변화 없음"""
        soap = product_ids["Soap"]
        order_id = place_order(test_client, "INV-1", [(soap, "Soap", 4)])

        first = test_client.patch(f"/orders/cancel/{order_id}")
        second = test_client.patch(f"/orders/cancel/{order_id}")

        assert first.status_code == 200
        assert first.json()["message"] == "Order canceled and stock restored successfully"
        assert second.status_code == 400
        assert second.json()["message"] == "Order already canceled"
        assert stock(test_client, soap) == 10

    def test_return_restores_stock_once(self, test_client, product_ids):
        """반품 시 재고 복원, 재반품은 400"""
        soap = product_ids["Soap"]
        order_id = place_order(test_client, "INV-1", [(soap, "Soap", 4)])

        first = test_client.patch(f"/orders/return/{order_id}")
        second = test_client.patch(f"/orders/return/{order_id}")

        assert first.status_code == 200
        assert second.status_code == 400
        assert second.json()["message"] == "Order already returned"
        assert stock(test_client, soap) == 10

    def test_confirm_order(self, test_client, product_ids):
        """확정, 재확정은 성공 응답에 다른 메시지"""
        order_id = place_order(test_client, "INV-1", [(product_ids["Soap"], "Soap", 1)])

        first = test_client.patch(f"/orders/confirm/{order_id}")
        second = test_client.patch(f"/orders/confirm/{order_id}")

        assert first.json() == {"success": True, "message": "Order confirmed"}
        assert second.json() == {"success": True, "message": "Order already confirmed"}

    def test_cancel_confirmed_order(self, test_client, product_ids):
        """확정된 주문도 취소 가능"""
        soap = product_ids["Soap"]
        order_id = place_order(test_client, "INV-1", [(soap, "Soap", 2)])
        test_client.patch(f"/orders/confirm/{order_id}")

        response = test_client.patch(f"/orders/cancel/{order_id}")

        assert response.status_code == 200
        assert stock(test_client, soap) == 10

    def test_lifecycle_invalid_and_missing_ids(self, test_client):
        """잘못된 ID는 400, 없는 주문은 404"""
        for action in ("cancel", "return", "confirm"):
            assert test_client.patch(f"/orders/{action}/bogus").status_code == 400
            assert test_client.patch(f"/orders/{action}/{new_id()}").status_code == 404

    def test_delete_order_keeps_stock(self, test_client, product_ids):
        """삭제는 재고를 복원하지 않음"""
        soap = product_ids["Soap"]
        order_id = place_order(test_client, "INV-1", [(soap, "Soap", 3)])

        response = test_client.delete(f"/orders/{order_id}")

        assert response.status_code == 200
        assert response.json()["message"] == "Order deleted successfully"
        assert test_client.get("/orders").json()["totalOrders"] == 0
        assert stock(test_client, soap) == 7
        assert test_client.delete(f"/orders/{order_id}").status_code == 404


class TestAppEndpoints:
    """루트/헬스체크/에러 응답 테스트"""

    def test_root_and_health(self, test_client):
        """루트와 헬스체크"""
        assert test_client.get("/").json()["status"] == "running"
        assert test_client.get("/health").json() == {"status": "healthy"}

    def test_unknown_route_uses_error_envelope(self, test_client):
        """없는 경로도 {success: false, message} 형식"""
        response = test_client.get("/does-not-exist")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_unexpected_error_returns_500(self, test_db, monkeypatch):
        """예상하지 못한 오류는 500 Internal server error"""
        from app.db.database import get_db
        from app.services.order_service import OrderService

        def boom(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(OrderService, "list_orders", boom)
        app.dependency_overrides[get_db] = lambda: test_db

        try:
            with TestClient(app, raise_server_exceptions=False) as client:
                response = client.get("/orders")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error"}
