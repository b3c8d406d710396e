"""상품 카탈로그 서비스."""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.exceptions import ProductNotFoundException
from app.core.identifiers import ensure_valid_id
from app.models import Product
from app.schemas.catalog import ProductCreateRequest, ProductUpdateRequest

logger = logging.getLogger(__name__)

SORT_PRICE_ASC = "price_asc"
SORT_PRICE_DESC = "price_desc"


@dataclass
class ProductPage:
    """상품 목록 한 페이지"""

    products: list[Product]
    total: int
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def has_more(self) -> bool:
        return self.skip + len(self.products) < self.total


class ProductService:
    """상품 생성, 조회, 수정, 삭제 서비스."""

    @staticmethod
    def calculate_final_price(price: float, discount: float) -> float:
        """
        할인 적용가를 계산합니다.

        Example:
            >>> ProductService.calculate_final_price(100, 10)
            90.0
            >>> ProductService.calculate_final_price(19.99, 15)
            16.99
        """
        return round(max(price - price * discount / 100, 0), 2)

    @staticmethod
    def clean_description(lines: Iterable[str | None]) -> list[str]:
        """빈 줄(공백만 있는 줄, null 포함)을 제거합니다."""
        return [line for line in lines if line and line.strip()]

    @staticmethod
    def create_product(
        data: ProductCreateRequest, db: Session, settings: Settings
    ) -> Product:
        """
        상품을 생성합니다.

        finalPrice는 price/discount로 서버에서 계산하며,
        status가 없으면 설정의 기본 상태(regular)를 사용합니다.

        Args:
            data: 상품 생성 요청
            db: DB 세션
            settings: 애플리케이션 설정

        Returns:
            생성된 Product 객체
        """
        product = Product(
            img=data.img,
            name=data.name,
            short_desc=data.short_desc or "",
            brand=data.brand or "",
            country=data.country or "",
            category=data.category,
            stock=data.stock,
            price=data.price,
            discount=data.discount,
            final_price=ProductService.calculate_final_price(data.price, data.discount),
            status=data.status or settings.default_product_status,
            description=ProductService.clean_description(data.description),
        )
        try:
            db.add(product)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(product)

        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    @staticmethod
    def get_product(product_id: str, db: Session) -> Optional[Product]:
        """
        상품 ID로 상품을 조회합니다.

        Args:
            product_id: 상품 ID
            db: DB 세션

        Returns:
            Product 객체 또는 None

        Raises:
            InvalidIdentifierException: ID 형식이 잘못된 경우
        """
        ensure_valid_id(product_id, "product ID")
        return db.query(Product).filter(Product.id == product_id).first()

    @staticmethod
    def list_products(
        db: Session,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        categories: Optional[list[str]] = None,
        brand: Optional[str] = None,
        status: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> ProductPage:
        """
        상품 목록을 검색/필터/정렬/페이지네이션하여 조회합니다.

        정렬 기준은 항상 재고 내림차순(재고 있는 상품 우선)이 먼저이고,
        그 다음이 sort에 따른 보조 기준입니다:
            - price_asc: finalPrice 오름차순
            - price_desc: finalPrice 내림차순
            - 그 외: 최신순 (createdAt 내림차순)

        Args:
            db: DB 세션
            page: 페이지 번호 (1부터)
            limit: 페이지 크기
            search: 상품명/카테고리/상태 부분 일치 (대소문자 무시)
            categories: 카테고리 목록 (하나라도 일치)
            brand: 브랜드 (정확히 일치)
            status: 상태 (정확히 일치)
            sort: 정렬 키

        Returns:
            ProductPage
        """
        query = db.query(Product)

        search = (search or "").strip()
        if search:
            query = query.filter(
                or_(
                    Product.name.icontains(search, autoescape=True),
                    Product.category.icontains(search, autoescape=True),
                    Product.status.icontains(search, autoescape=True),
                )
            )
        if categories:
            query = query.filter(Product.category.in_(categories))
        if brand:
            query = query.filter(Product.brand == brand)
        if status:
            query = query.filter(Product.status == status)

        total = query.count()

        if sort == SORT_PRICE_ASC:
            secondary = Product.final_price.asc()
        elif sort == SORT_PRICE_DESC:
            secondary = Product.final_price.desc()
        else:
            secondary = Product.created_at.desc()

        skip = (page - 1) * limit
        products = (
            query.order_by(Product.stock.desc(), secondary)
            .offset(skip)
            .limit(limit)
            .all()
        )

        return ProductPage(products=products, total=total, page=page, limit=limit)

    @staticmethod
    def list_by_category(db: Session, category: Optional[str] = None) -> list[Product]:
        """
        카테고리로 상품을 조회합니다 (페이지네이션 없음).

        category가 없으면 전체 상품을 반환합니다.
        """
        query = db.query(Product)
        if category:
            query = query.filter(Product.category == category)
        return query.order_by(Product.created_at.desc()).all()

    @staticmethod
    def search_products(db: Session, q: Optional[str], limit: int = 20) -> list[Product]:
        """
        상품명 부분 일치 검색 (대소문자 무시).

        검색어가 비어 있거나 공백뿐이면 빈 목록을 반환합니다 (오류 아님).
        """
        term = (q or "").strip()
        if not term:
            return []

        return (
            db.query(Product)
            .filter(Product.name.icontains(term, autoescape=True))
            .order_by(Product.created_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def update_product(
        product_id: str, data: ProductUpdateRequest, db: Session
    ) -> Product:
        """
        상품을 수정합니다.

        finalPrice는 요청의 price/discount로 다시 계산합니다. 둘 중 요청에 없는
        값은 저장된 값을 사용합니다.

        Raises:
            InvalidIdentifierException: ID 형식이 잘못된 경우
            ProductNotFoundException: 상품이 없는 경우
        """
        product = ProductService.get_product(product_id, db)
        if product is None:
            raise ProductNotFoundException(product_id)

        changes = data.model_dump(exclude_unset=True)
        for field, value in list(changes.items()):
            if value is not None:
                continue
            # 필수 컬럼은 null로 덮어쓰지 않음
            if field in ("img", "name", "stock", "price", "discount", "status"):
                del changes[field]
            elif field in ("short_desc", "brand", "country"):
                changes[field] = ""
            elif field == "description":
                changes[field] = []
        if changes.get("description"):
            changes["description"] = ProductService.clean_description(
                changes["description"]
            )

        for field, value in changes.items():
            setattr(product, field, value)

        product.final_price = ProductService.calculate_final_price(
            product.price, product.discount
        )

        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(product)

        logger.info("Updated product %s (finalPrice=%s)", product.id, product.final_price)
        return product

    @staticmethod
    def delete_product(product_id: str, db: Session) -> None:
        """
        상품을 삭제합니다. 과거 주문은 삭제된 상품 ID를 그대로 보존합니다.

        Raises:
            InvalidIdentifierException: ID 형식이 잘못된 경우
            ProductNotFoundException: 상품이 없는 경우
        """
        product = ProductService.get_product(product_id, db)
        if product is None:
            raise ProductNotFoundException(product_id)

        try:
            db.delete(product)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info("Deleted product %s", product_id)
