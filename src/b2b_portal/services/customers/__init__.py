"""Customer service exports."""

from .service import get_customer, list_customers, remove_special_price, set_special_price, update_customer

__all__ = ["get_customer", "list_customers", "remove_special_price", "set_special_price", "update_customer"]
