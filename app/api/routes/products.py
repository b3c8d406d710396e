"""
상품 카탈로그 API 엔드포인트

상품 목록/검색/조회, 생성, 수정, 삭제 기능을 제공합니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import Pagination, get_db, get_pagination
from app.core.config import Settings, get_settings
from app.core.exceptions import InvalidIdentifierException, ProductNotFoundException
from app.schemas.catalog import (
    ProductCreateRequest,
    ProductCreateResponse,
    ProductDetailResponse,
    ProductListResponse,
    ProductResponse,
    ProductsResponse,
    ProductUpdateRequest,
    ProductUpdateResponse,
)
from app.schemas.common import MessageResponse
from app.services.product_service import ProductService


router = APIRouter()


@router.get("/products", response_model=ProductListResponse)
def list_products(
    search: str = Query("", description="상품명/카테고리/상태 검색어"),
    category: Optional[str] = Query(None, description="카테고리 (쉼표로 여러 개)"),
    brand: Optional[str] = Query(None, description="브랜드"),
    status_filter: Optional[str] = Query(None, alias="status", description="판매 상태"),
    sort: Optional[str] = Query(None, description="price_asc | price_desc"),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """
    상품 목록을 조회합니다 (검색, 필터, 정렬, 페이지네이션).

    재고가 있는 상품이 먼저 나오고, 그 다음 최신순 또는 가격순으로 정렬됩니다.

    Example:
        GET /products?search=soap&category=soap,oil&sort=price_asc&page=1&limit=10

        Response (200):
        ```json
        {
            "success": true,
            "products": [...],
            "hasMore": false,
            "currentPage": 1,
            "totalProducts": 3
        }
        ```
    """
    categories = [c.strip() for c in category.split(",") if c.strip()] if category else None

    result = ProductService.list_products(
        db,
        page=pagination.page,
        limit=pagination.limit,
        search=search,
        categories=categories,
        brand=brand,
        status=status_filter,
        sort=sort,
    )

    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in result.products],
        has_more=result.has_more,
        current_page=result.page,
        total_products=result.total,
    )


@router.get("/products/category", response_model=ProductsResponse)
@router.get("/products/", response_model=ProductsResponse, include_in_schema=False)
def list_products_by_category(
    category: Optional[str] = Query(None, description="카테고리"),
    db: Session = Depends(get_db),
):
    """
    카테고리별 상품을 조회합니다 (페이지네이션 없음).

    category가 없으면 전체 상품을 반환합니다.
    """
    products = ProductService.list_by_category(db, category)
    return ProductsResponse(
        products=[ProductResponse.model_validate(p) for p in products]
    )


@router.get("/search", response_model=ProductsResponse)
def search_products(
    q: Optional[str] = Query(None, description="상품명 검색어"),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    상품명으로 검색합니다 (최대 20개).

    검색어가 비어 있으면 400이 아니라 빈 목록을 반환합니다.
    """
    products = ProductService.search_products(db, q, settings.search_result_limit)
    return ProductsResponse(
        products=[ProductResponse.model_validate(p) for p in products]
    )


@router.get("/products/{product_id}", response_model=ProductDetailResponse)
def get_product(
    product_id: str,
    db: Session = Depends(get_db),
):
    """
    특정 상품의 상세 정보를 조회합니다.

    Raises:
        HTTPException 400: ID 형식이 잘못된 경우
        HTTPException 404: 상품을 찾을 수 없는 경우
    """
    try:
        product = ProductService.get_product(product_id, db)

    except InvalidIdentifierException as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    return ProductDetailResponse(product=ProductResponse.model_validate(product))


@router.post(
    "/products",
    response_model=ProductCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    product_data: ProductCreateRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    새 상품을 생성합니다.

    finalPrice는 price와 discount로 서버에서 계산합니다.

    Example:
        Request:
        ```json
        {"img": "x", "name": "Soap", "price": 100, "discount": 10}
        ```

        Response (201):
        ```json
        {
            "success": true,
            "message": "Product inserted successfully",
            "insertedId": "3f2c7c1be0a54e2f9d1a6b7c8d9e0f11",
            "product": {"_id": "3f2c...", "name": "Soap", "finalPrice": 90.0, ...}
        }
        ```
    """
    product = ProductService.create_product(product_data, db, settings)

    return ProductCreateResponse(
        message="Product inserted successfully",
        inserted_id=product.id,
        product=ProductResponse.model_validate(product),
    )


@router.put("/products/{product_id}", response_model=ProductUpdateResponse)
def update_product(
    product_id: str,
    product_data: ProductUpdateRequest,
    db: Session = Depends(get_db),
):
    """
    상품을 수정합니다.

    요청의 _id, finalPrice는 무시되고 finalPrice는 다시 계산됩니다.

    Example:
        Request:
        ```json
        {"price": 100, "discount": 20, "finalPrice": 1}
        ```

        Response (200):
        ```json
        {"success": true, "message": "Product updated successfully", "finalPrice": 80.0}
        ```
    """
    try:
        product = ProductService.update_product(product_id, product_data, db)

    except InvalidIdentifierException as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    except ProductNotFoundException as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    return ProductUpdateResponse(
        message="Product updated successfully",
        final_price=product.final_price,
    )


@router.delete("/products/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: str,
    db: Session = Depends(get_db),
):
    """
    상품을 삭제합니다.

    Raises:
        HTTPException 400: ID 형식이 잘못된 경우
        HTTPException 404: 상품을 찾을 수 없는 경우
    """
    try:
        ProductService.delete_product(product_id, db)

    except InvalidIdentifierException as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    except ProductNotFoundException as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    return MessageResponse(message="Product deleted successfully")
