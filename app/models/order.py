"""
Order / OrderItem 모델
"""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from app.core.identifiers import new_id
from app.db.database import Base
from app.models.product import utcnow


class OrderStatus:
    """주문 상태 값"""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"
    RETURNED = "returned"

    # 재고가 아직 주문에 묶여 있는 상태 (수정/취소/반품 가능)
    ACTIVE = (PENDING, CONFIRMED)
    TERMINAL = (CANCELED, RETURNED)
    ALL = (PENDING, CONFIRMED, CANCELED, RETURNED)


class Order(Base):
    """
    주문 모델

    Attributes:
        id: 주문 고유 ID (32자리 hex 문자열, Primary Key)
        invoice_number: 인보이스 번호 (Unique, Not Null)
        customer_name / customer_phone / customer_email / customer_address: 고객 정보
        pricing: 금액 요약 (JSON: subtotal, discount, deliveryCharge, total)
        status: 주문 상태 (pending, confirmed, canceled, returned)
        version: 낙관적 동시성 제어용 버전 (주문 변경 시 1씩 증가)
        created_at: 생성 일시
        updated_at: 마지막 수정 일시 (주문 수정 시 설정)
        canceled_at: 취소 일시
        returned_at: 반품 일시
        items: 장바구니 항목 (OrderItem 목록, position 순)
    """

    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=new_id)
    invoice_number = Column(String(100), unique=True, nullable=False, index=True)
    customer_name = Column(String(200), nullable=False, default="", index=True)
    customer_phone = Column(String(50), nullable=False, default="", index=True)
    customer_email = Column(String(200), nullable=True)
    customer_address = Column(Text, nullable=True)
    pricing = Column(JSON, nullable=False, default=dict)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING, index=True)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, nullable=True)
    canceled_at = Column(DateTime, nullable=True)
    returned_at = Column(DateTime, nullable=True)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
    )

    # ORM UPDATE 시 WHERE version = :loaded 조건을 붙이고, 불일치하면 StaleDataError
    __mapper_args__ = {"version_id_col": version}

    @property
    def customer(self) -> dict:
        """응답용 고객 정보 (중첩 객체)"""
        return {
            "name": self.customer_name,
            "phone": self.customer_phone,
            "email": self.customer_email,
            "address": self.customer_address,
        }

    def __repr__(self) -> str:
        """Order 객체의 문자열 표현"""
        return (
            f"<Order(id={self.id}, invoice_number='{self.invoice_number}', "
            f"status='{self.status}')>"
        )

    def __str__(self) -> str:
        return f"Order: {self.invoice_number} ({self.status})"


class OrderItem(Base):
    """
    주문 항목 모델

    product_id는 외래 키가 아닙니다. 상품이 삭제되어도 과거 주문은
    원래 상품 ID를 그대로 보존합니다.
    """

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(
        String(32),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id = Column(String(32), nullable=False, index=True)
    name = Column(String(200), nullable=False, default="")
    quantity = Column(Integer, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    order = relationship("Order", back_populates="items")

    def __repr__(self) -> str:
        return (
            f"<OrderItem(order_id={self.order_id}, product_id={self.product_id}, "
            f"quantity={self.quantity})>"
        )
