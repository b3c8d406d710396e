"""
상품 카탈로그 관련 Pydantic 스키마

API 요청/응답 모델을 정의합니다.
숫자 필드는 lax 모드로 변환됩니다 ("12" → 12). 숫자로 변환할 수 없는 값은
0으로 바뀌지 않고 검증 오류(400)가 됩니다.
"""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, ConfigDict, Field, field_validator

from app.schemas.common import CamelModel


def reject_bool(value: Any) -> Any:
    """JSON true/false는 숫자로 변환하지 않고 거부합니다."""
    if isinstance(value, bool):
        raise ValueError("must be a number")
    return value


class ProductCreateRequest(CamelModel):
    """
    상품 생성 요청 스키마

    finalPrice는 받지 않습니다 (서버에서 계산).

    Example:
        {
            "img": "https://cdn.example.com/soap.png",
            "name": "Coconut Soap",
            "brand": "CocoCare",
            "category": "soap",
            "stock": 20,
            "price": 100,
            "discount": 10,
            "description": ["100% natural", "Made in Sri Lanka"]
        }
    """

    img: str = Field(..., min_length=1, description="상품 이미지 URL")
    name: str = Field(
        ..., min_length=1, max_length=200, description="상품명", examples=["Coconut Soap"]
    )
    short_desc: str = Field("", description="짧은 설명")
    brand: str = Field("", description="브랜드")
    country: str = Field("", description="원산지")
    category: str | None = Field(None, description="카테고리")
    stock: int = Field(0, ge=0, description="초기 재고 수량 (0 이상)", examples=[20])
    price: float = Field(
        ..., ge=0, allow_inf_nan=False, description="정가 (0 이상)", examples=[100]
    )
    discount: float = Field(
        0, ge=0, le=100, allow_inf_nan=False, description="할인율 (0-100)", examples=[10]
    )
    status: str | None = Field(None, description="판매 상태 태그 (기본값: regular)")
    description: list[str | None] = Field(
        default_factory=list, description="상세 설명 줄 목록 (빈 줄/null은 제거)"
    )

    @field_validator("stock", "price", "discount", mode="before")
    @classmethod
    def numbers_not_bool(cls, value: Any) -> Any:
        return reject_bool(value)

    @field_validator("img", "name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class ProductUpdateRequest(CamelModel):
    """
    상품 수정 요청 스키마

    모든 필드는 선택입니다. 클라이언트가 보낸 _id, finalPrice는 정의되지 않은
    필드이므로 무시됩니다.

    Example:
        {
            "price": 100,
            "discount": 20,
            "stock": 15
        }
    """

    img: str | None = Field(None, min_length=1)
    name: str | None = Field(None, min_length=1, max_length=200)
    short_desc: str | None = None
    brand: str | None = None
    country: str | None = None
    category: str | None = None
    stock: int | None = Field(None, ge=0)
    price: float | None = Field(None, ge=0, allow_inf_nan=False)
    discount: float | None = Field(None, ge=0, le=100, allow_inf_nan=False)
    status: str | None = None
    description: list[str | None] | None = None

    @field_validator("stock", "price", "discount", mode="before")
    @classmethod
    def numbers_not_bool(cls, value: Any) -> Any:
        return reject_bool(value)

    @field_validator("img", "name")
    @classmethod
    def not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("must not be blank")
        return value.strip() if value is not None else None


class ProductResponse(CamelModel):
    """
    상품 정보 응답 스키마

    Example:
        {
            "_id": "3f2c7c1be0a54e2f9d1a6b7c8d9e0f11",
            "img": "https://cdn.example.com/soap.png",
            "name": "Coconut Soap",
            "shortDesc": "",
            "brand": "CocoCare",
            "country": "",
            "category": "soap",
            "stock": 20,
            "price": 100.0,
            "discount": 10.0,
            "finalPrice": 90.0,
            "status": "regular",
            "description": ["100% natural"],
            "createdAt": "2025-01-22T10:30:00Z",
            "updatedAt": "2025-01-22T10:30:00Z"
        }
    """

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(
        ...,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
        description="상품 ID",
    )
    img: str
    name: str
    short_desc: str = ""
    brand: str = ""
    country: str = ""
    category: str | None = None
    stock: int
    price: float
    discount: float
    final_price: float
    status: str
    description: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime | None = None


class ProductListResponse(CamelModel):
    """
    페이지네이션 상품 목록 응답 스키마

    Example:
        {
            "success": true,
            "products": [...],
            "hasMore": true,
            "currentPage": 1,
            "totalProducts": 42
        }
    """

    success: bool = True
    products: list[ProductResponse]
    has_more: bool
    current_page: int
    total_products: int


class ProductsResponse(CamelModel):
    """페이지네이션 없는 상품 목록 응답 (카테고리 조회, 검색)"""

    success: bool = True
    products: list[ProductResponse]


class ProductDetailResponse(CamelModel):
    """상품 상세 응답"""

    success: bool = True
    product: ProductResponse


class ProductCreateResponse(CamelModel):
    """
    상품 생성 응답 스키마

    Example:
        {
            "success": true,
            "message": "Product inserted successfully",
            "insertedId": "3f2c7c1be0a54e2f9d1a6b7c8d9e0f11",
            "product": {...}
        }
    """

    success: bool = True
    message: str
    inserted_id: str
    product: ProductResponse


class ProductUpdateResponse(CamelModel):
    """
    상품 수정 응답 스키마

    Example:
        {
            "success": true,
            "message": "Product updated successfully",
            "finalPrice": 80.0
        }
    """

    success: bool = True
    message: str
    final_price: float
