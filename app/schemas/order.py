"""
주문 관련 Pydantic 스키마

API 요청/응답 모델을 정의합니다.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import AliasChoices, ConfigDict, Field, field_validator

from app.schemas.common import CamelModel


class CartItem(CamelModel):
    """
    장바구니 항목 (요청)

    상품 ID는 productId, product_id, _id 중 어느 이름으로 보내도 됩니다.

    Example:
        {"productId": "3f2c7c1be0a54e2f9d1a6b7c8d9e0f11", "name": "Coconut Soap", "quantity": 2}
    """

    product_id: str = Field(
        ...,
        validation_alias=AliasChoices("productId", "product_id", "_id"),
        description="상품 ID",
    )
    name: str = Field("", description="상품명 (주문 시점 스냅샷)")
    quantity: int = Field(..., gt=0, description="주문 수량 (양수)", examples=[2])


class CustomerInfo(CamelModel):
    """고객 정보"""

    name: str = Field(..., min_length=1, description="고객 이름", examples=["Rahim"])
    phone: str = Field("", description="연락처", examples=["01700000000"])
    email: str | None = Field(None, description="이메일 (선택)")
    address: str | None = Field(None, description="배송 주소")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class PricingSummary(CamelModel):
    """
    주문 금액 요약

    Example:
        {"subtotal": 180, "discount": 18, "deliveryCharge": 60, "total": 222}
    """

    subtotal: float = Field(0, ge=0, allow_inf_nan=False)
    discount: float = Field(0, ge=0, allow_inf_nan=False)
    delivery_charge: float = Field(0, ge=0, allow_inf_nan=False)
    total: float = Field(0, ge=0, allow_inf_nan=False)


class OrderCreateRequest(CamelModel):
    """
    주문 생성 요청 스키마

    Example:
        {
            "invoiceNumber": "INV-20250122-0001",
            "customer": {"name": "Rahim", "phone": "01700000000", "address": "Dhaka"},
            "cartItems": [
                {"productId": "3f2c7c1be0a54e2f9d1a6b7c8d9e0f11", "name": "Coconut Soap", "quantity": 2}
            ],
            "pricing": {"subtotal": 180, "total": 180}
        }
    """

    invoice_number: str = Field(..., min_length=1, max_length=100, description="인보이스 번호")
    customer: CustomerInfo
    cart_items: list[CartItem] = Field(..., min_length=1, description="장바구니 항목")
    pricing: PricingSummary = Field(default_factory=PricingSummary)

    @field_validator("invoice_number")
    @classmethod
    def invoice_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class OrderUpdateRequest(CamelModel):
    """
    주문 수정 요청 스키마

    originalItems는 이전 클라이언트와의 호환을 위해 받기만 하고 사용하지 않습니다.
    이전 항목 목록은 항상 저장된 주문에서 다시 읽습니다.
    """

    customer: CustomerInfo
    cart_items: list[CartItem] = Field(..., min_length=1)
    pricing: PricingSummary = Field(default_factory=PricingSummary)
    status: Literal["pending", "confirmed"] | None = Field(
        None, description="수정 후 상태 (생략 시 현재 상태 유지)"
    )
    original_items: list[dict[str, Any]] | None = Field(
        None, description="사용하지 않음 (호환용)"
    )


class OrderItemResponse(CamelModel):
    """주문 항목 응답"""

    model_config = ConfigDict(from_attributes=True)

    product_id: str
    name: str
    quantity: int


class OrderResponse(CamelModel):
    """
    주문 정보 응답 스키마

    Example:
        {
            "_id": "9a1b...",
            "invoiceNumber": "INV-20250122-0001",
            "customer": {"name": "Rahim", "phone": "01700000000", "email": null, "address": "Dhaka"},
            "cartItems": [{"productId": "3f2c...", "name": "Coconut Soap", "quantity": 2}],
            "pricing": {"subtotal": 180.0, "discount": 0.0, "deliveryCharge": 0.0, "total": 180.0},
            "status": "pending",
            "createdAt": "2025-01-22T10:30:00Z",
            "updatedAt": null,
            "canceledAt": null,
            "returnedAt": null
        }
    """

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(
        ...,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
        description="주문 ID",
    )
    invoice_number: str
    customer: CustomerInfo
    cart_items: list[OrderItemResponse] = Field(
        ..., validation_alias=AliasChoices("items", "cart_items", "cartItems")
    )
    pricing: PricingSummary
    status: str
    created_at: datetime
    updated_at: datetime | None = None
    canceled_at: datetime | None = None
    returned_at: datetime | None = None


class OrderListResponse(CamelModel):
    """
    주문 목록 응답 스키마

    Example:
        {
            "success": true,
            "orders": [...],
            "totalPages": 3,
            "currentPage": 1,
            "totalOrders": 25
        }
    """

    success: bool = True
    orders: list[OrderResponse]
    total_pages: int
    current_page: int
    total_orders: int


class OrderCreateResponse(CamelModel):
    """
    주문 생성 응답 스키마

    Example:
        {
            "success": true,
            "orderId": "9a1b...",
            "message": "Order placed successfully"
        }
    """

    success: bool = True
    order_id: str
    message: str
