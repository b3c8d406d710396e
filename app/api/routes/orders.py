"""
주문 API 엔드포인트

주문 생성(재고 감소), 목록 조회, 수정(재고 차이 조정), 취소/반품(재고 복원),
확정, 삭제 기능을 제공합니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import Pagination, get_db, get_pagination
from app.core.exceptions import (
    ConcurrentOrderUpdateException,
    DuplicateInvoiceException,
    InsufficientStockException,
    InvalidIdentifierException,
    InvalidOrderStateException,
    OrderNotFoundException,
    ProductNotFoundException,
)
from app.schemas.common import MessageResponse
from app.schemas.order import (
    OrderCreateRequest,
    OrderCreateResponse,
    OrderListResponse,
    OrderResponse,
    OrderUpdateRequest,
)
from app.services.order_service import OrderService


router = APIRouter()


@router.post("/orders", response_model=OrderCreateResponse)
def create_order(
    order_data: OrderCreateRequest,
    db: Session = Depends(get_db),
):
    """
    주문을 생성하고 상품 재고를 감소시킵니다.

    모든 항목의 재고를 먼저 확인하고, 하나라도 부족하면 어떤 재고도 변경하지 않습니다.

    Raises:
        HTTPException 400: 인보이스 중복, 재고 부족, 상품 ID 형식 오류
        HTTPException 404: 상품을 찾을 수 없는 경우

    Example:
        Request:
        ```json
        {
            "invoiceNumber": "INV-0001",
            "customer": {"name": "Rahim", "phone": "01700000000"},
            "cartItems": [{"productId": "3f2c...", "name": "Soap", "quantity": 2}],
            "pricing": {"subtotal": 180, "total": 180}
        }
        ```

        Response (200):
        ```json
        {"success": true, "orderId": "9a1b...", "message": "Order placed successfully"}
        ```
    """
    try:
        order = OrderService.create_order(order_data, db)

    except ProductNotFoundException as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    except (
        DuplicateInvoiceException,
        InsufficientStockException,
        InvalidIdentifierException,
    ) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return OrderCreateResponse(order_id=order.id, message="Order placed successfully")


@router.get("/orders", response_model=OrderListResponse)
def list_orders(
    search: str = Query("", description="고객명/연락처/인보이스 번호/상태 검색어"),
    status_filter: Optional[str] = Query(None, alias="status", description="주문 상태"),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """
    주문 목록을 최신순으로 조회합니다.

    Example:
        Response (200):
        ```json
        {
            "success": true,
            "orders": [...],
            "totalPages": 3,
            "currentPage": 1,
            "totalOrders": 25
        }
        ```
    """
    result = OrderService.list_orders(
        db,
        page=pagination.page,
        limit=pagination.limit,
        search=search,
        status=status_filter,
    )

    return OrderListResponse(
        orders=[OrderResponse.model_validate(o) for o in result.orders],
        total_pages=result.total_pages,
        current_page=result.page,
        total_orders=result.total,
    )


@router.put("/orders/{order_id}", response_model=MessageResponse)
def update_order(
    order_id: str,
    order_data: OrderUpdateRequest,
    db: Session = Depends(get_db),
):
    """
    주문을 수정하고 이전 항목과의 차이만큼 재고를 조정합니다.

    Raises:
        HTTPException 400: ID 형식 오류, 종료된 주문, 재고 부족, 동시 수정 충돌
        HTTPException 404: 주문 또는 추가된 상품을 찾을 수 없는 경우
    """
    try:
        OrderService.update_order(order_id, order_data, db)

    except (OrderNotFoundException, ProductNotFoundException) as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    except (
        InvalidIdentifierException,
        InvalidOrderStateException,
        InsufficientStockException,
        ConcurrentOrderUpdateException,
    ) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return MessageResponse(message="Order updated successfully")


@router.patch("/orders/cancel/{order_id}", response_model=MessageResponse)
def cancel_order(
    order_id: str,
    db: Session = Depends(get_db),
):
    """
    주문을 취소하고 재고를 복원합니다.

    Raises:
        HTTPException 400: ID 형식 오류, 이미 취소/반품된 주문
        HTTPException 404: 주문을 찾을 수 없는 경우
    """
    try:
        OrderService.cancel_order(order_id, db)

    except OrderNotFoundException as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    except (InvalidIdentifierException, InvalidOrderStateException) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return MessageResponse(message="Order canceled and stock restored successfully")


@router.patch("/orders/return/{order_id}", response_model=MessageResponse)
def return_order(
    order_id: str,
    db: Session = Depends(get_db),
):
    """
    주문을 반품 처리하고 재고를 복원합니다.

    Raises:
        HTTPException 400: ID 형식 오류, 이미 반품/취소된 주문
        HTTPException 404: 주문을 찾을 수 없는 경우
    """
    try:
        OrderService.return_order(order_id, db)

    except OrderNotFoundException as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    except (InvalidIdentifierException, InvalidOrderStateException) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return MessageResponse(message="Order returned and stock restored successfully")


@router.patch("/orders/confirm/{order_id}", response_model=MessageResponse)
def confirm_order(
    order_id: str,
    db: Session = Depends(get_db),
):
    """
    주문을 확정합니다 (pending → confirmed).

    이미 확정된 주문은 성공으로 응답합니다 (message: "Order already confirmed").
    """
    try:
        changed = OrderService.confirm_order(order_id, db)

    except OrderNotFoundException as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    except (InvalidIdentifierException, InvalidOrderStateException) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return MessageResponse(
        message="Order confirmed" if changed else "Order already confirmed"
    )


@router.delete("/orders/{order_id}", response_model=MessageResponse)
def delete_order(
    order_id: str,
    db: Session = Depends(get_db),
):
    """
    주문을 삭제합니다. 재고는 복원하지 않습니다.

    Raises:
        HTTPException 400: ID 형식이 잘못된 경우
        HTTPException 404: 주문을 찾을 수 없는 경우
    """
    try:
        OrderService.delete_order(order_id, db)

    except InvalidIdentifierException as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    except OrderNotFoundException as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    return MessageResponse(message="Order deleted successfully")
