"""
상품 API 엔드포인트 통합 테스트
"""

from app.core.identifiers import new_id


def create_product(test_client, **fields) -> dict:
    payload = {"img": "x", "name": "Soap", "price": 100}
    payload.update(fields)
    response = test_client.post("/products", json=payload)
    assert response.status_code == 201
    return response.json()


class TestProductCreateAPI:
    """상품 생성 API 테스트 클래스"""

    def test_create_product_success(self, test_client):
        """상품 생성 성공 (201), finalPrice 서버 계산"""
        data = create_product(test_client, discount=10)

        assert data["success"] is True
        assert data["message"] == "Product inserted successfully"
        assert data["insertedId"] == data["product"]["_id"]
        assert data["product"]["finalPrice"] == 90.0
        assert data["product"]["status"] == "regular"

    def test_create_ignores_client_final_price(self, test_client):
        """요청의 finalPrice는 무시"""
        data = create_product(test_client, discount=50, finalPrice=1)

        assert data["product"]["finalPrice"] == 50.0

    def test_create_accepts_numeric_strings(self, test_client):
        """숫자 문자열은 숫자로 변환"""
        data = create_product(test_client, price="200", discount="25", stock="4")

        assert data["product"]["finalPrice"] == 150.0
        assert data["product"]["stock"] == 4

    def test_create_missing_required_fields(self, test_client):
        """img/name/price 누락 시 400"""
        response = test_client.post("/products", json={"name": "Soap"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "img" in body["message"]
        assert "price" in body["message"]

    def test_create_rejects_non_numeric_price(self, test_client):
        """숫자가 아닌 가격은 0으로 바뀌지 않고 400"""
        response = test_client.post(
            "/products", json={"img": "x", "name": "Soap", "price": "abc"}
        )

        assert response.status_code == 400

    def test_create_rejects_negative_stock(self, test_client):
        """음수 재고는 400"""
        response = test_client.post(
            "/products", json={"img": "x", "name": "Soap", "price": 10, "stock": -1}
        )

        assert response.status_code == 400

    def test_create_rejects_boolean_numbers(self, test_client):
        """true/false는 숫자로 변환하지 않고 400"""
        response = test_client.post(
            "/products",
            json={"img": "x", "name": "Soap", "price": True, "stock": True},
        )

        assert response.status_code == 400
        assert "price" in response.json()["message"]
        assert "stock" in response.json()["message"]

    def test_create_drops_null_description_lines(self, test_client):
        """description의 null 줄은 빈 줄처럼 제거"""
        data = create_product(test_client, description=["Natural", None, "", "Vegan"])

        assert data["product"]["description"] == ["Natural", "Vegan"]


class TestProductUpdateAPI:
    """상품 수정 API 테스트 클래스"""

    def test_price_update_example(self, test_client):
        """생성 시 90.00, 이후 discount 20으로 수정하면 80 (finalPrice 입력 무시)"""
        created = create_product(test_client, img="x", name="Soap", price=100, discount=10)
        product_id = created["insertedId"]
        assert created["product"]["finalPrice"] == 90.0

        response = test_client.put(
            f"/products/{product_id}",
            json={"price": 100, "discount": 20, "finalPrice": 1},
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Product updated successfully",
            "finalPrice": 80.0,
        }
        detail = test_client.get(f"/products/{product_id}").json()
        assert detail["product"]["finalPrice"] == 80.0

    def test_update_ignores_id_in_body(self, test_client):
        """본문의 _id는 무시"""
        product_id = create_product(test_client)["insertedId"]

        response = test_client.put(
            f"/products/{product_id}", json={"_id": new_id(), "name": "Renamed"}
        )

        assert response.status_code == 200
        detail = test_client.get(f"/products/{product_id}").json()
        assert detail["product"]["_id"] == product_id
        assert detail["product"]["name"] == "Renamed"

    def test_update_invalid_id(self, test_client):
        """잘못된 ID 형식은 400"""
        response = test_client.put("/products/123", json={"name": "X"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid product ID"}

    def test_update_rejects_boolean_discount(self, test_client):
        """수정 시에도 true/false 숫자 값은 400"""
        product_id = create_product(test_client)["insertedId"]

        response = test_client.put(f"/products/{product_id}", json={"discount": False})

        assert response.status_code == 400
        assert test_client.get(f"/products/{product_id}").json()["product"]["discount"] == 0

    def test_update_missing_product(self, test_client):
        """없는 상품은 404"""
        response = test_client.put(f"/products/{new_id()}", json={"name": "X"})

        assert response.status_code == 404


class TestProductQueryAPI:
    """상품 조회 API 테스트 클래스"""

    def test_get_product(self, test_client):
        """상품 상세 조회"""
        product_id = create_product(test_client, description=["Natural"])["insertedId"]

        response = test_client.get(f"/products/{product_id}")

        assert response.status_code == 200
        product = response.json()["product"]
        assert product["_id"] == product_id
        assert product["description"] == ["Natural"]
        assert "createdAt" in product

    def test_get_product_invalid_id(self, test_client):
        """잘못된 ID 형식은 500이 아니라 400"""
        response = test_client.get("/products/not-a-valid-id")

        assert response.status_code == 400

    def test_get_product_not_found(self, test_client):
        """없는 상품은 404"""
        response = test_client.get(f"/products/{new_id()}")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Product not found"}

    def test_list_products(self, test_client):
        """목록 조회: 재고 있는 상품 우선, 페이지 정보"""
        create_product(test_client, name="Sold Out", stock=0)
        create_product(test_client, name="Available", stock=3)

        response = test_client.get("/products", params={"page": 1, "limit": 1})

        data = response.json()
        assert response.status_code == 200
        assert data["success"] is True
        assert [p["name"] for p in data["products"]] == ["Available"]
        assert data["hasMore"] is True
        assert data["currentPage"] == 1
        assert data["totalProducts"] == 2

    def test_list_products_lenient_pagination(self, test_client):
        """잘못된 page/limit은 기본값으로 대체"""
        create_product(test_client)

        response = test_client.get("/products", params={"page": "abc", "limit": "-5"})

        assert response.status_code == 200
        assert response.json()["currentPage"] == 1
        assert len(response.json()["products"]) == 1

    def test_list_products_filters(self, test_client):
        """카테고리(쉼표 구분), 상태, 검색 필터"""
        create_product(test_client, name="Coconut Soap", category="soap")
        create_product(test_client, name="Hair Oil", category="oil", status="hot")
        create_product(test_client, name="Face Wash", category="wash")

        by_category = test_client.get("/products", params={"category": "soap,oil"}).json()
        by_status = test_client.get("/products", params={"status": "hot"}).json()
        by_search = test_client.get("/products", params={"search": "coconut"}).json()

        assert by_category["totalProducts"] == 2
        assert [p["name"] for p in by_status["products"]] == ["Hair Oil"]
        assert [p["name"] for p in by_search["products"]] == ["Coconut Soap"]

    def test_list_by_category(self, test_client):
        """카테고리 조회 (페이지네이션 없음)"""
        create_product(test_client, name="A", category="soap")
        create_product(test_client, name="B", category="oil")

        response = test_client.get("/products/category", params={"category": "oil"})

        assert response.status_code == 200
        assert [p["name"] for p in response.json()["products"]] == ["B"]

        # /products/ 는 같은 조회의 별칭, category가 없으면 전체
        everything = test_client.get("/products/").json()
        assert {p["name"] for p in everything["products"]} == {"A", "B"}

    def test_search(self, test_client):
        """이름 검색, 빈 검색어는 빈 목록"""
        create_product(test_client, name="Coconut Soap")

        found = test_client.get("/search", params={"q": "SOAP"}).json()
        empty = test_client.get("/search").json()

        assert [p["name"] for p in found["products"]] == ["Coconut Soap"]
        assert empty == {"success": True, "products": []}


class TestProductDeleteAPI:
    """상품 삭제 API 테스트 클래스"""

    def test_delete_product(self, test_client):
        """삭제 후 404"""
        product_id = create_product(test_client)["insertedId"]

        response = test_client.delete(f"/products/{product_id}")

        assert response.status_code == 200
        assert response.json()["message"] == "Product deleted successfully"
        assert test_client.get(f"/products/{product_id}").status_code == 404

    def test_delete_invalid_id(self, test_client):
        """잘못된 ID 형식은 400"""
        assert test_client.delete("/products/bogus").status_code == 400

    def test_delete_missing_product(self, test_client):
        """없는 상품은 404"""
        assert test_client.delete(f"/products/{new_id()}").status_code == 404
