"""
Pydantic 스키마 모듈
"""

from app.schemas.common import CamelModel, MessageResponse
from app.schemas.catalog import (
    ProductCreateRequest,
    ProductUpdateRequest,
    ProductResponse,
    ProductListResponse,
    ProductsResponse,
    ProductDetailResponse,
    ProductCreateResponse,
    ProductUpdateResponse,
)
from app.schemas.order import (
    CartItem,
    CustomerInfo,
    PricingSummary,
    OrderCreateRequest,
    OrderUpdateRequest,
    OrderItemResponse,
    OrderResponse,
    OrderListResponse,
    OrderCreateResponse,
)

__all__ = [
    "CamelModel",
    "MessageResponse",
    "ProductCreateRequest",
    "ProductUpdateRequest",
    "ProductResponse",
    "ProductListResponse",
    "ProductsResponse",
    "ProductDetailResponse",
    "ProductCreateResponse",
    "ProductUpdateResponse",
    "CartItem",
    "CustomerInfo",
    "PricingSummary",
    "OrderCreateRequest",
    "OrderUpdateRequest",
    "OrderItemResponse",
    "OrderResponse",
    "OrderListResponse",
    "OrderCreateResponse",
]
