"""비즈니스 로직 서비스."""

from app.services.inventory_service import InventoryService
from app.services.order_service import OrderService
from app.services.product_service import ProductService

__all__ = ["InventoryService", "OrderService", "ProductService"]
