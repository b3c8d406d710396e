"""
Locust 부하 테스트 시나리오: 한정 재고 상품 동시 주문

테스트 시나리오:
1. 기본 동시성 테스트: 100명이 재고 100개 상품을 1개씩 주문
2. 플래시 세일: 1000명이 재고 100개 상품에 동시에 주문
3. 주문 취소 혼합: 일부 사용자가 주문 직후 취소 (재고 복원 경쟁)

정확도 목표: 초과 판매 0건 (재고가 음수가 되지 않음)
"""

import random
import uuid
from typing import Optional

from locust import HttpUser, TaskSet, task, between, events


placed_orders = 0
rejected_orders = 0
canceled_orders = 0
oversold_count = 0


class ShopperTaskSet(TaskSet):
    """쇼핑몰 사용자 행동 모델"""

    def on_start(self):
        self.customer_name = f"loadtest_customer_{random.randint(1, 1000000)}"
        self.product_id: Optional[str] = None
        self.product_name = ""
        self.order_ids: list[str] = []

    @task(2)
    def list_products(self):
        """상품 목록 조회, 가장 재고가 많은 상품을 대상으로 선택"""
        with self.client.get(
            "/products",
            params={"limit": 20},
            name="[Product] List Products",
            catch_response=True,
        ) as response:
            if response.status_code != 200:
                response.failure(f"List products failed: {response.status_code}")
                return

            products = response.json().get("products", [])
            for product in products:
                if product["stock"] < 0:
                    global oversold_count
                    oversold_count += 1
                    response.failure("Negative stock detected! OVERSOLD!")
                    return
            if products and not self.product_id:
                target = products[0]
                self.product_id = target["_id"]
                self.product_name = target["name"]
            response.success()

    @task(5)
    def place_order(self):
        """주문 생성 (핵심 동시성 테스트)"""
        if not self.product_id:
            self.list_products()
            if not self.product_id:
                return

        global placed_orders, rejected_orders

        with self.client.post(
            "/orders",
            json={
                "invoiceNumber": f"LT-{uuid.uuid4().hex}",
                "customer": {"name": self.customer_name, "phone": "01700000000"},
                "cartItems": [
                    {"productId": self.product_id, "name": self.product_name, "quantity": 1}
                ],
                "pricing": {"subtotal": 100, "total": 100},
            },
            name="[Order] Place Order",
            catch_response=True,
        ) as response:
            if response.status_code == 200:
                placed_orders += 1
                self.order_ids.append(response.json()["orderId"])
                response.success()
            elif response.status_code == 400:
                message = response.json().get("message", "")
                if "Insufficient stock" in message:
                    # 재고 소진 (예상된 실패)
                    rejected_orders += 1
                    response.success()
                else:
                    response.failure(f"Order failed with unexpected error: {message}")
            else:
                response.failure(f"Order failed: {response.status_code}")

    @task(1)
    def cancel_order(self):
        """내 주문 하나를 취소 (재고 복원)"""
        if not self.order_ids:
            return

        order_id = self.order_ids.pop()
        with self.client.patch(
            f"/orders/cancel/{order_id}",
            name="[Order] Cancel Order",
            catch_response=True,
        ) as response:
            if response.status_code == 200:
                global canceled_orders
                canceled_orders += 1
                response.success()
            else:
                response.failure(f"Cancel failed: {response.status_code}")


class NormalShopper(HttpUser):
    """일반 사용자"""

    tasks = [ShopperTaskSet]
    wait_time = between(1, 3)
    host = "http://localhost:8000"


class FlashSaleShopper(HttpUser):
    """플래시 세일 구매자"""

    tasks = [ShopperTaskSet]
    wait_time = between(0.1, 0.5)
    host = "http://localhost:8000"


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    global placed_orders, rejected_orders, canceled_orders, oversold_count
    placed_orders = 0
    rejected_orders = 0
    canceled_orders = 0
    oversold_count = 0

    print("\n" + "=" * 60)
    print("Locust Load Test Started")
    print("=" * 60)
    print(f"Target: {environment.host}")
    print("=" * 60 + "\n")


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    """테스트 종료 시 결과 출력"""
    print("\n" + "=" * 60)
    print("Test Results Summary")
    print("=" * 60)
    print(f"Placed orders: {placed_orders}")
    print(f"Rejected orders (stock exhausted): {rejected_orders}")
    print(f"Canceled orders: {canceled_orders}")
    print(f"OVERSOLD detected: {oversold_count}")
    print("=" * 60)

    if oversold_count > 0:
        print("FAIL: Overselling detected! Stock management has bugs.")
    else:
        print("PASS: No overselling detected.")

    print("=" * 60 + "\n")


"""
기본 실행 (웹 UI):
    locust -f load_tests/locustfile.py --host=http://localhost:8000

헤드리스 모드:
    locust -f load_tests/locustfile.py --headless --users 100 --spawn-rate 10 -t 60s --host=http://localhost:8000

    # 플래시 세일 (1000명, 3분)
    locust -f load_tests/locustfile.py --headless --users 1000 --spawn-rate 50 -t 3m --host=http://localhost:8000 FlashSaleShopper
"""
