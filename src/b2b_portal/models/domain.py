"""Domain models for catalog, customer, application and order records."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    ACCOUNTING_REVIEW = "accounting_review"
    APPROVAL_PENDING = "approval_pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CustomerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class DiscountSource(str, Enum):
    BASIC = "basic"
    VOLUME = "volume"
    SPECIAL = "special"


@dataclass(slots=True, frozen=True)
class VolumeTier:
    """Quantity threshold at which a catalog-wide percent discount applies."""

    min_quantity: int
    percent: float


@dataclass(slots=True, frozen=True)
class FixedPrice:
    """Per-customer unit price that replaces the list price outright."""

    price: int


@dataclass(slots=True, frozen=True)
class PercentDiscount:
    """Per-customer percent discount that supersedes the basic rate."""

    percent: float


SpecialPrice = Union[FixedPrice, PercentDiscount]


@dataclass(slots=True)
class Product:
    id: str
    name: str
    list_price: int
    volume_tiers: tuple[VolumeTier, ...] = ()
    min_order_quantity: int = 1
    category: Optional[str] = None
    description: Optional[str] = None
    status: str = "active"


@dataclass(slots=True)
class Customer:
    """Approved business customer with its negotiated terms."""

    id: str
    company_name: str
    contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    business_type: Optional[str] = None
    discount_rate: float = 0.0
    credit_limit: int = 0
    payment_terms: int = 30
    special_pricing: dict[str, SpecialPrice] = field(default_factory=dict)
    accounting_id: Optional[str] = None
    application_id: Optional[str] = None
    status: CustomerStatus = CustomerStatus.ACTIVE
    notes: Optional[str] = None


@dataclass(slots=True)
class Application:
    """Prospective-customer submission moving through staff review."""

    id: str
    company_name: str
    contact_name: str
    email: str
    status: ApplicationStatus
    phone: Optional[str] = None
    address: Optional[str] = None
    business_type: Optional[str] = None
    terms_agreed: bool = False
    accounting_id: Optional[str] = None
    discount_rate: Optional[float] = None
    credit_limit: Optional[int] = None
    payment_terms: Optional[int] = None
    special_pricing: dict[str, SpecialPrice] = field(default_factory=dict)
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class OrderLine:
    product_id: str
    quantity: int
    unit_price: int
    subtotal: int
    discount_type: Optional[DiscountSource] = None
    discount_rate: float = 0.0
    discount_amount: int = 0


@dataclass(slots=True)
class Order:
    id: str
    customer_id: str
    status: OrderStatus
    lines: list[OrderLine] = field(default_factory=list)
    subtotal: int = 0
    discount_amount: int = 0
    tax_amount: int = 0
    total_amount: int = 0
    credit_limit_exceeded: bool = False
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
