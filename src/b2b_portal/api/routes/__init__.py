"""Route group exports."""

from . import applications, customers, health, orders, pricing, products

__all__ = ["applications", "customers", "health", "orders", "pricing", "products"]
