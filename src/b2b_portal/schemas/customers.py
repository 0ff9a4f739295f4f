"""Customer-facing API schemas."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.domain import Customer, CustomerStatus
from .applications import check_discount_rate, check_payment_terms
from .pricing import SpecialPriceModel


class CustomerModel(BaseModel):
    id: str
    company_name: str
    contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    business_type: Optional[str] = None
    discount_rate: float
    credit_limit: int
    payment_terms: int
    special_pricing: Dict[str, SpecialPriceModel] = Field(default_factory=dict)
    accounting_id: Optional[str] = None
    application_id: Optional[str] = None
    status: CustomerStatus
    notes: Optional[str] = None

    @classmethod
    def from_domain(cls, customer: Customer) -> "CustomerModel":
        return cls(
            id=customer.id,
            company_name=customer.company_name,
            contact_name=customer.contact_name,
            email=customer.email,
            phone=customer.phone,
            address=customer.address,
            business_type=customer.business_type,
            discount_rate=customer.discount_rate,
            credit_limit=customer.credit_limit,
            payment_terms=customer.payment_terms,
            special_pricing={
                product_id: SpecialPriceModel.from_domain(entry)
                for product_id, entry in customer.special_pricing.items()
            },
            accounting_id=customer.accounting_id,
            application_id=customer.application_id,
            status=customer.status,
            notes=customer.notes,
        )


class CustomerUpdate(BaseModel):
    """Staff edit of a customer; only the fields that are set are written."""

    company_name: Optional[str] = None
    contact_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    business_type: Optional[str] = None
    discount_rate: Optional[float] = None
    credit_limit: Optional[int] = Field(default=None, ge=0)
    payment_terms: Optional[int] = None
    accounting_id: Optional[str] = None
    status: Optional[CustomerStatus] = None
    notes: Optional[str] = None

    @field_validator("company_name", "discount_rate", "credit_limit", "payment_terms", "status", mode="before")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        # Unset fields skip validation; an explicit null would blank a required column.
        if value is None:
            raise ValueError("field cannot be null")
        return value

    @field_validator("discount_rate")
    @classmethod
    def validate_discount_rate(cls, value: Optional[float]) -> Optional[float]:
        return check_discount_rate(value)

    @field_validator("payment_terms")
    @classmethod
    def validate_payment_terms(cls, value: Optional[int]) -> Optional[int]:
        return check_payment_terms(value)
