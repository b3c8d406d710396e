"""조건부 UPDATE를 이용한 재고 관리 서비스."""

import logging
from typing import Mapping, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.core.exceptions import InsufficientStockException, ProductNotFoundException
from app.models import Product

logger = logging.getLogger(__name__)


class InventoryService:
    """
    재고 증감을 담당하는 서비스.

    Product.stock을 변경하는 코드는 모두 이 서비스를 거칩니다.
    메서드는 커밋하지 않습니다. 호출한 서비스가 하나의 트랜잭션으로 커밋/롤백합니다.
    """

    @staticmethod
    def get_stock(product_id: str, db: Session) -> Optional[int]:
        """
        현재 재고를 조회합니다.

        Args:
            product_id: 상품 ID
            db: DB 세션

        Returns:
            현재 재고 수량, 상품이 없으면 None
        """
        return db.execute(
            select(Product.stock).where(Product.id == product_id)
        ).scalar_one_or_none()

    @staticmethod
    def decrease_stock(product_id: str, quantity: int, db: Session) -> bool:
        """
        재고가 충분할 때만 재고를 감소시킵니다.

        확인과 감소가 하나의 UPDATE 문으로 실행됩니다:

            UPDATE products SET stock = stock - :quantity
            WHERE id = :product_id AND stock >= :quantity

        Args:
            product_id: 상품 ID
            quantity: 감소시킬 수량 (양수)
            db: DB 세션

        Returns:
            감소 성공 시 True, 재고 부족 또는 상품 없음이면 False
        """
        result = db.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def increase_stock(product_id: str, quantity: int, db: Session) -> bool:
        """
        재고를 증가시킵니다 (주문 취소/반품/수량 감소 시 재고 복원).

        Args:
            product_id: 상품 ID
            quantity: 증가시킬 수량 (양수)
            db: DB 세션

        Returns:
            성공 시 True, 상품이 삭제되어 없으면 False
        """
        result = db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock=Product.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def restore_stock(
        product_id: str, quantity: int, db: Session, name: str | None = None
    ) -> bool:
        """
        재고를 복원합니다. 상품이 이미 삭제된 경우 경고만 남기고 건너뜁니다.
        """
        restored = InventoryService.increase_stock(product_id, quantity, db)
        if not restored:
            logger.warning(
                "Skipped restoring %d unit(s) of %s: product %s no longer exists",
                quantity,
                name or "item",
                product_id,
            )
        return restored

    @staticmethod
    def take_stock(
        product_id: str, quantity: int, db: Session, name: str | None = None
    ) -> None:
        """
        재고를 감소시키고, 실패 원인에 맞는 예외를 발생시킵니다.

        Raises:
            ProductNotFoundException: 상품이 없는 경우
            InsufficientStockException: 재고가 부족한 경우
        """
        if InventoryService.decrease_stock(product_id, quantity, db):
            return

        current_stock = InventoryService.get_stock(product_id, db)
        if current_stock is None:
            raise ProductNotFoundException(product_id, name)
        raise InsufficientStockException(product_id, quantity, current_stock, name)

    @staticmethod
    def apply_quantity_deltas(
        deltas: Mapping[str, int],
        db: Session,
        names: Mapping[str, str] | None = None,
    ) -> None:
        """
        주문 수량 변화량을 재고에 반영합니다.

        delta > 0: 주문 수량이 늘어남 → 재고 감소
        delta < 0: 주문 수량이 줄어듦 → 재고 복원
        delta == 0: 변경 없음

        복원을 먼저 적용한 뒤 감소를 적용합니다. 감소 중 하나라도 실패하면
        예외가 발생하며, 호출한 쪽에서 트랜잭션 전체를 롤백해야 합니다.
        """
        names = names or {}

        for product_id, delta in deltas.items():
            if delta < 0:
                InventoryService.restore_stock(
                    product_id, -delta, db, names.get(product_id)
                )

        for product_id, delta in deltas.items():
            if delta > 0:
                InventoryService.take_stock(
                    product_id, delta, db, names.get(product_id)
                )
