"""
Product 모델
"""

from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Float,
    Integer,
    JSON,
    String,
    Text,
)

from app.core.identifiers import new_id
from app.db.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    """
    상품 모델

    Attributes:
        id: 상품 고유 ID (32자리 hex 문자열, Primary Key)
        img: 상품 이미지 URL (Not Null)
        name: 상품명 (Not Null)
        short_desc: 짧은 설명
        brand: 브랜드
        country: 원산지
        category: 카테고리 (단일 값)
        stock: 현재 재고 수량 (0 이상)
        price: 정가
        discount: 할인율 (0-100, %)
        final_price: 할인 적용가 (서버에서 계산, 소수점 2자리)
        status: 판매 상태 태그 (regular, new, hot, ...)
        description: 상세 설명 줄 목록 (JSON 배열)
        created_at: 생성 일시 (자동 설정, 변경 불가)
        updated_at: 수정 일시 (자동 업데이트)
    """

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    img = Column(Text, nullable=False)
    name = Column(String(200), nullable=False, index=True)
    short_desc = Column(Text, nullable=False, default="")
    brand = Column(String(100), nullable=False, default="", index=True)
    country = Column(String(100), nullable=False, default="")
    category = Column(String(100), nullable=True, index=True)
    stock = Column(Integer, nullable=False, default=0)
    price = Column(Float, nullable=False)
    discount = Column(Float, nullable=False, default=0)
    final_price = Column(Float, nullable=False)
    status = Column(String(50), nullable=False, default="regular", index=True)
    description = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self) -> str:
        """Product 객체의 문자열 표현"""
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock})>"

    def __str__(self) -> str:
        return f"Product: {self.name}"
