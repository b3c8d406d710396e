"""
커스텀 예외 정의

애플리케이션 전역에서 사용되는 커스텀 예외 클래스들입니다.
서비스 계층에서 발생시키고, 라우트 계층에서 HTTP 상태 코드로 변환합니다.
"""


class InvalidIdentifierException(Exception):
    """
    형식이 잘못된 식별자로 조회를 시도할 때 발생하는 예외

    HTTP Status Code: 400 Bad Request
    """

    def __init__(self, value: str, kind: str = "ID"):
        self.value = value
        self.kind = kind
        self.message = f"Invalid {kind}"
        super().__init__(self.message)


class ProductNotFoundException(Exception):
    """
    상품을 찾을 수 없을 때 발생하는 예외

    HTTP Status Code: 404 Not Found
    """

    def __init__(self, product_id: str, name: str | None = None):
        self.product_id = product_id
        self.name = name
        if name:
            self.message = f"Product not found: {name}"
        else:
            self.message = "Product not found"
        super().__init__(self.message)


class OrderNotFoundException(Exception):
    """
    주문을 찾을 수 없을 때 발생하는 예외

    HTTP Status Code: 404 Not Found
    """

    def __init__(self, order_id: str):
        self.order_id = order_id
        self.message = "Order not found"
        super().__init__(self.message)


class InsufficientStockException(Exception):
    """
    재고 부족 시 발생하는 예외

    HTTP Status Code: 400 Bad Request
    """

    def __init__(
        self,
        product_id: str,
        requested: int,
        available: int | None,
        name: str | None = None,
    ):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        self.name = name
        self.message = f"Insufficient stock for {name or product_id}"
        super().__init__(self.message)


class DuplicateInvoiceException(Exception):
    """
    이미 존재하는 인보이스 번호로 주문을 생성하려 할 때 발생하는 예외

    HTTP Status Code: 400 Bad Request
    """

    def __init__(self, invoice_number: str):
        self.invoice_number = invoice_number
        self.message = "Invoice number already exists!"
        super().__init__(self.message)


class InvalidOrderStateException(Exception):
    """
    현재 주문 상태에서 허용되지 않는 전이를 시도할 때 발생하는 예외
    (이미 취소된 주문 재취소, 반품된 주문 수정 등)

    HTTP Status Code: 400 Bad Request
    """

    def __init__(self, order_id: str, status: str, message: str):
        self.order_id = order_id
        self.status = status
        self.message = message
        super().__init__(self.message)


class ConcurrentOrderUpdateException(Exception):
    """
    주문 수정 중 다른 요청이 같은 주문을 먼저 변경했을 때 발생하는 예외

    HTTP Status Code: 400 Bad Request
    """

    def __init__(self, order_id: str):
        self.order_id = order_id
        self.message = "Order was modified concurrently, please reload and retry"
        super().__init__(self.message)
