from ticketing.services.catalog_service import CatalogService
from ticketing.services.order_service import OrderRequest, OrderService
from ticketing.services.sale_link_service import SaleLinkService

__all__ = ["CatalogService", "OrderService", "OrderRequest", "SaleLinkService"]
