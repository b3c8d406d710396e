"""
주문 라이프사이클 서비스

주문 생성/수정/취소/반품/확정/삭제와 그에 따른 재고 조정을 담당합니다.

상태 전이:
    pending → confirmed
    pending | confirmed → canceled
    pending | confirmed → returned
canceled, returned는 종료 상태입니다.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import (
    ConcurrentOrderUpdateException,
    DuplicateInvoiceException,
    InsufficientStockException,
    InvalidOrderStateException,
    OrderNotFoundException,
    ProductNotFoundException,
)
from app.core.identifiers import ensure_valid_id
from app.models import Order, OrderItem, OrderStatus, Product
from app.schemas.order import CartItem, OrderCreateRequest, OrderUpdateRequest
from app.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)


@dataclass
class OrderPage:
    """주문 목록 한 페이지"""

    orders: list[Order]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)


class OrderService:
    """주문 처리 서비스 클래스"""

    @staticmethod
    def quantities_by_product(items: Iterable[CartItem | OrderItem]) -> dict[str, int]:
        """
        상품별 주문 수량 합계를 계산합니다 (처음 등장한 순서 유지).

        같은 상품이 여러 줄에 나오면 수량을 합산합니다.
        """
        quantities: dict[str, int] = {}
        for item in items:
            quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity
        return quantities

    @staticmethod
    def compute_quantity_deltas(
        old: dict[str, int], new: dict[str, int]
    ) -> dict[str, int]:
        """
        이전/새 주문 수량으로 상품별 수량 변화량을 계산합니다.

        - 이전에만 있는 상품: -이전 수량 (재고 전량 복원)
        - 새로 추가된 상품: +새 수량 (재고 감소)
        - 양쪽에 있는 상품: 새 수량 - 이전 수량
        변화량이 0인 상품은 결과에서 제외됩니다.

        Example:
            >>> OrderService.compute_quantity_deltas({"a": 5}, {"a": 2, "b": 3})
            {'a': -3, 'b': 3}
        """
        deltas: dict[str, int] = {}
        for product_id, quantity in old.items():
            if product_id not in new:
                deltas[product_id] = -quantity
        for product_id, quantity in new.items():
            delta = quantity - old.get(product_id, 0)
            if delta != 0:
                deltas[product_id] = delta
        return deltas

    @staticmethod
    def _validate_cart_ids(cart_items: list[CartItem]) -> None:
        for item in cart_items:
            ensure_valid_id(item.product_id, f"product ID for {item.name or 'item'}")

    @staticmethod
    def _build_items(cart_items: list[CartItem], db: Session) -> list[OrderItem]:
        """요청 항목으로 OrderItem 목록을 만듭니다 (이름이 없으면 상품명 사용)."""
        missing_names = {item.product_id for item in cart_items if not item.name}
        product_names = {}
        if missing_names:
            product_names = dict(
                db.query(Product.id, Product.name)
                .filter(Product.id.in_(list(missing_names)))
                .all()
            )

        return [
            OrderItem(
                product_id=item.product_id,
                name=item.name or product_names.get(item.product_id, ""),
                quantity=item.quantity,
                position=position,
            )
            for position, item in enumerate(cart_items)
        ]

    @staticmethod
    def get_order(order_id: str, db: Session) -> Order:
        """
        주문을 조회합니다.

        Raises:
            InvalidIdentifierException: ID 형식이 잘못된 경우
            OrderNotFoundException: 주문이 없는 경우
        """
        ensure_valid_id(order_id, "order ID")
        order = db.query(Order).filter(Order.id == order_id).first()
        if order is None:
            raise OrderNotFoundException(order_id)
        return order

    @staticmethod
    def create_order(data: OrderCreateRequest, db: Session) -> Order:
        """
        주문을 생성하고 재고를 감소시킵니다.

        프로세스:
        1. 인보이스 번호 중복 확인
        2. 모든 항목 검증 (상품 존재, 재고 충분) - 하나라도 실패하면 재고 변경 없음
        3. 주문 저장 (status=pending)
        4. 상품별 조건부 재고 감소 (stock >= quantity 일 때만)
        5. 2~4를 하나의 트랜잭션으로 커밋

        4단계에서 다른 주문이 먼저 재고를 가져가 감소에 실패하면
        트랜잭션 전체를 롤백합니다.

        Args:
            data: 주문 생성 요청
            db: SQLAlchemy 데이터베이스 세션

        Returns:
            Order: 생성된 주문

        Raises:
            DuplicateInvoiceException: 인보이스 번호가 이미 존재하는 경우
            InvalidIdentifierException: 항목의 상품 ID 형식이 잘못된 경우
            ProductNotFoundException: 항목의 상품이 없는 경우
            InsufficientStockException: 재고가 부족한 경우
        """
        existing = (
            db.query(Order.id)
            .filter(Order.invoice_number == data.invoice_number)
            .first()
        )
        if existing:
            raise DuplicateInvoiceException(data.invoice_number)

        OrderService._validate_cart_ids(data.cart_items)

        requested = OrderService.quantities_by_product(data.cart_items)
        names: dict[str, str] = {}
        for item in data.cart_items:
            names.setdefault(item.product_id, item.name)

        products = {
            product.id: product
            for product in db.query(Product)
            .filter(Product.id.in_(list(requested)))
            .all()
        }

        # 검증 단계: 모든 항목을 확인한 뒤에만 재고를 변경
        for product_id, quantity in requested.items():
            product = products.get(product_id)
            if product is None:
                raise ProductNotFoundException(product_id, names[product_id])
            names[product_id] = names[product_id] or product.name
            if product.stock < quantity:
                raise InsufficientStockException(
                    product_id, quantity, product.stock, names[product_id]
                )

        order = Order(
            invoice_number=data.invoice_number,
            customer_name=data.customer.name,
            customer_phone=data.customer.phone,
            customer_email=data.customer.email,
            customer_address=data.customer.address,
            pricing=data.pricing.model_dump(by_alias=True),
            status=OrderStatus.PENDING,
            items=OrderService._build_items(data.cart_items, db),
        )

        try:
            db.add(order)
            db.flush()

            for product_id, quantity in requested.items():
                InventoryService.take_stock(product_id, quantity, db, names[product_id])

            db.commit()

        except IntegrityError:
            # 동시에 같은 인보이스로 생성된 경우 (unique 제약 위반)
            db.rollback()
            raise DuplicateInvoiceException(data.invoice_number)

        except Exception:
            db.rollback()
            raise

        db.refresh(order)
        logger.info(
            "Placed order %s (invoice %s, %d item(s))",
            order.id,
            order.invoice_number,
            len(order.items),
        )
        return order

    @staticmethod
    def list_orders(
        db: Session,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        status: Optional[str] = None,
    ) -> OrderPage:
        """
        주문 목록을 최신순으로 조회합니다.

        Args:
            db: DB 세션
            page: 페이지 번호 (1부터)
            limit: 페이지 크기
            search: 고객명/연락처/인보이스 번호/상태 부분 일치 (대소문자 무시)
            status: 상태 (정확히 일치)
        """
        query = db.query(Order)

        search = (search or "").strip()
        if search:
            query = query.filter(
                or_(
                    Order.customer_name.icontains(search, autoescape=True),
                    Order.customer_phone.icontains(search, autoescape=True),
                    Order.invoice_number.icontains(search, autoescape=True),
                    Order.status.icontains(search, autoescape=True),
                )
            )
        if status:
            query = query.filter(Order.status == status)

        total = query.count()
        orders = (
            query.order_by(Order.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        return OrderPage(orders=orders, total=total, page=page, limit=limit)

    @staticmethod
    def update_order(order_id: str, data: OrderUpdateRequest, db: Session) -> Order:
        """
        주문을 수정하고 재고를 차이만큼 조정합니다.

        이전 항목은 요청 본문(originalItems)이 아니라 저장된 주문에서 읽습니다.
        상품 ID 기준으로 이전/새 항목을 비교합니다:
            - 빠진 상품: 이전 수량만큼 재고 복원
            - 추가된 상품: 새 수량만큼 재고 감소
            - 수량 변경: (새 수량 - 이전 수량)만큼 재고 감소 (음수면 복원)

        다른 요청이 먼저 같은 주문을 변경했다면 (version 불일치)
        재고 조정까지 모두 롤백합니다.

        Raises:
            InvalidIdentifierException: ID 형식이 잘못된 경우
            OrderNotFoundException: 주문이 없는 경우
            InvalidOrderStateException: 취소/반품된 주문이거나 confirmed → pending 변경인 경우
            ProductNotFoundException: 추가된 항목의 상품이 없는 경우
            InsufficientStockException: 재고가 부족한 경우
            ConcurrentOrderUpdateException: 동시 수정 충돌
        """
        order = OrderService.get_order(order_id, db)
        if order.status in OrderStatus.TERMINAL:
            raise InvalidOrderStateException(
                order_id, order.status, f"Cannot update a {order.status} order"
            )

        if (
            order.status == OrderStatus.CONFIRMED
            and data.status == OrderStatus.PENDING
        ):
            raise InvalidOrderStateException(
                order_id, order.status, "Cannot move a confirmed order back to pending"
            )

        OrderService._validate_cart_ids(data.cart_items)

        old = OrderService.quantities_by_product(order.items)
        new = OrderService.quantities_by_product(data.cart_items)
        deltas = OrderService.compute_quantity_deltas(old, new)

        names = {item.product_id: item.name for item in order.items}
        names.update({item.product_id: item.name for item in data.cart_items if item.name})

        try:
            InventoryService.apply_quantity_deltas(deltas, db, names)

            order.customer_name = data.customer.name
            order.customer_phone = data.customer.phone
            order.customer_email = data.customer.email
            order.customer_address = data.customer.address
            order.pricing = data.pricing.model_dump(by_alias=True)
            if data.status is not None:
                order.status = data.status
            order.updated_at = datetime.now(timezone.utc)
            order.items = OrderService._build_items(data.cart_items, db)

            db.commit()

        except StaleDataError:
            db.rollback()
            raise ConcurrentOrderUpdateException(order_id)

        except Exception:
            db.rollback()
            raise

        db.refresh(order)
        logger.info("Updated order %s with stock deltas %s", order.id, deltas)
        return order

    @staticmethod
    def _close_order(
        order_id: str,
        target_status: str,
        timestamp_field: str,
        db: Session,
    ) -> Order:
        """
        주문을 종료 상태(canceled/returned)로 전이하고 재고를 복원합니다.

        상태 변경은 조건부 UPDATE(status IN (pending, confirmed))로 수행하므로
        같은 주문에 대한 동시 취소/반품 요청 중 하나만 재고를 복원합니다.
        """
        order = OrderService.get_order(order_id, db)
        if order.status == target_status:
            raise InvalidOrderStateException(
                order_id, order.status, f"Order already {target_status}"
            )
        if order.status in OrderStatus.TERMINAL:
            raise InvalidOrderStateException(
                order_id,
                order.status,
                f"Order already {order.status}, cannot mark as {target_status}",
            )

        quantities = OrderService.quantities_by_product(order.items)
        names = {item.product_id: item.name for item in order.items}

        try:
            result = db.execute(
                update(Order)
                .where(Order.id == order_id, Order.status.in_(OrderStatus.ACTIVE))
                .values(
                    {
                        Order.status: target_status,
                        getattr(Order, timestamp_field): datetime.now(timezone.utc),
                        Order.version: Order.version + 1,
                    }
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                # 다른 요청이 먼저 종료 상태로 바꿈
                raise InvalidOrderStateException(
                    order_id, target_status, f"Order already {target_status}"
                )

            for product_id, quantity in quantities.items():
                InventoryService.restore_stock(
                    product_id, quantity, db, names.get(product_id)
                )

            db.commit()

        except Exception:
            db.rollback()
            raise

        db.refresh(order)
        logger.info(
            "Order %s %s, restored stock %s", order.id, target_status, quantities
        )
        return order

    @staticmethod
    def cancel_order(order_id: str, db: Session) -> Order:
        """
        주문을 취소하고 모든 항목의 재고를 복원합니다.

        Raises:
            InvalidIdentifierException: ID 형식이 잘못된 경우
            OrderNotFoundException: 주문이 없는 경우
            InvalidOrderStateException: 이미 취소/반품된 주문인 경우
        """
        return OrderService._close_order(
            order_id, OrderStatus.CANCELED, "canceled_at", db
        )

    @staticmethod
    def return_order(order_id: str, db: Session) -> Order:
        """
        주문을 반품 처리하고 모든 항목의 재고를 복원합니다.

        Raises:
            InvalidIdentifierException: ID 형식이 잘못된 경우
            OrderNotFoundException: 주문이 없는 경우
            InvalidOrderStateException: 이미 반품/취소된 주문인 경우
        """
        return OrderService._close_order(
            order_id, OrderStatus.RETURNED, "returned_at", db
        )

    @staticmethod
    def confirm_order(order_id: str, db: Session) -> bool:
        """
        주문을 확정합니다 (pending → confirmed).

        Returns:
            상태가 변경되었으면 True, 이미 확정된 주문이면 False

        Raises:
            InvalidIdentifierException: ID 형식이 잘못된 경우
            OrderNotFoundException: 주문이 없는 경우
            InvalidOrderStateException: 취소/반품된 주문이거나 confirmed → pending 변경인 경우
        """
        ensure_valid_id(order_id, "order ID")

        try:
            result = db.execute(
                update(Order)
                .where(Order.id == order_id, Order.status == OrderStatus.PENDING)
                .values(status=OrderStatus.CONFIRMED, version=Order.version + 1)
                .execution_options(synchronize_session=False)
            )
            changed = result.rowcount == 1
            db.commit()
        except Exception:
            db.rollback()
            raise

        if changed:
            logger.info("Order %s confirmed", order_id)
            return True

        order = OrderService.get_order(order_id, db)
        if order.status == OrderStatus.CONFIRMED:
            return False
        raise InvalidOrderStateException(
            order_id, order.status, f"Cannot confirm a {order.status} order"
        )

    @staticmethod
    def delete_order(order_id: str, db: Session) -> None:
        """
        주문 레코드를 삭제합니다. 재고는 변경하지 않습니다.

        재고를 되돌리려면 삭제 전에 취소 또는 반품해야 합니다.

        Raises:
            InvalidIdentifierException: ID 형식이 잘못된 경우
            OrderNotFoundException: 주문이 없는 경우
        """
        order = OrderService.get_order(order_id, db)
        if order.status in OrderStatus.ACTIVE:
            logger.warning(
                "Deleting %s order %s without restoring its stock",
                order.status,
                order_id,
            )

        try:
            db.delete(order)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info("Deleted order %s", order_id)
