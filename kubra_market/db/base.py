# Import every model so Base.metadata knows all tables (create_all, mapper setup)
from kubra_market.db.base_class import Base  # noqa: F401
from kubra_market.models.merchant import Merchant, Shop  # noqa: F401
from kubra_market.models.product import Product  # noqa: F401
from kubra_market.models.order import Customer, Order, OrderItem  # noqa: F401
from kubra_market.models.rental import Rental, MaintenanceRequest  # noqa: F401
from kubra_market.models.notification import Notification  # noqa: F401
