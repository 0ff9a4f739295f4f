"""Pydantic request/response models for application endpoints."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

from ..config import settings
from ..models.domain import Application, ApplicationStatus
from .pricing import SpecialPriceModel

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[\d\-\(\)\+\s]+$")


def check_discount_rate(value: Optional[float]) -> Optional[float]:
    if value is not None and not 0 <= value <= settings.max_discount_rate:
        raise ValueError(f"discount_rate must be between 0 and {settings.max_discount_rate}")
    return value


def check_payment_terms(value: Optional[int]) -> Optional[int]:
    if value is not None and settings.payment_terms_options and value not in settings.payment_terms_options:
        allowed = ", ".join(str(days) for days in settings.payment_terms_options)
        raise ValueError(f"payment_terms must be one of: {allowed}")
    return value


class ApplicationSubmission(BaseModel):
    company_name: str = Field(..., description="Registered company name.")
    contact_name: str = Field(..., description="Person responsible for the account.")
    email: str
    phone: Optional[str] = None
    address: str
    business_type: str
    terms_agreed: bool

    @field_validator("company_name", "contact_name", "address", "business_type")
    @classmethod
    def _required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("field is required")
        return value

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not EMAIL_PATTERN.match(value):
            raise ValueError("invalid email address")
        return value

    @field_validator("phone")
    @classmethod
    def _validate_phone(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        value = value.strip()
        if not PHONE_PATTERN.match(value):
            raise ValueError("invalid phone number")
        return value

    @field_validator("terms_agreed")
    @classmethod
    def _terms_must_be_agreed(cls, value: bool) -> bool:
        if not value:
            raise ValueError("terms of use must be agreed")
        return value


class AccountingReview(BaseModel):
    """Data captured by accounting while an application is under review."""

    accounting_id: Optional[str] = Field(default=None, description="Customer id in the external accounting system.")
    discount_rate: Optional[float] = None
    credit_limit: Optional[int] = Field(default=None, ge=0)
    payment_terms: Optional[int] = None

    @field_validator("discount_rate")
    @classmethod
    def validate_discount_rate(cls, value: Optional[float]) -> Optional[float]:
        return check_discount_rate(value)

    @field_validator("payment_terms")
    @classmethod
    def validate_payment_terms(cls, value: Optional[int]) -> Optional[int]:
        return check_payment_terms(value)


class ApprovalTerms(BaseModel):
    """Final terms set by the approver; unset fields fall back to the review values."""

    discount_rate: Optional[float] = None
    credit_limit: Optional[int] = Field(default=None, ge=0)
    payment_terms: Optional[int] = None
    special_pricing: Optional[Dict[str, SpecialPriceModel]] = None
    notes: Optional[str] = None

    @field_validator("discount_rate")
    @classmethod
    def validate_discount_rate(cls, value: Optional[float]) -> Optional[float]:
        return check_discount_rate(value)

    @field_validator("payment_terms")
    @classmethod
    def validate_payment_terms(cls, value: Optional[int]) -> Optional[int]:
        return check_payment_terms(value)


class ApplicationStatusChange(BaseModel):
    status: ApplicationStatus
    notes: Optional[str] = None
    review: Optional[AccountingReview] = None
    terms: Optional[ApprovalTerms] = None


class RejectionRequest(BaseModel):
    reason: str = Field(..., min_length=1)


class ApplicationModel(BaseModel):
    id: str
    company_name: str
    contact_name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    business_type: Optional[str] = None
    status: ApplicationStatus
    accounting_id: Optional[str] = None
    discount_rate: Optional[float] = None
    credit_limit: Optional[int] = None
    payment_terms: Optional[int] = None
    special_pricing: Dict[str, SpecialPriceModel] = Field(default_factory=dict)
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, application: Application) -> "ApplicationModel":
        return cls(
            id=application.id,
            company_name=application.company_name,
            contact_name=application.contact_name,
            email=application.email,
            phone=application.phone,
            address=application.address,
            business_type=application.business_type,
            status=application.status,
            accounting_id=application.accounting_id,
            discount_rate=application.discount_rate,
            credit_limit=application.credit_limit,
            payment_terms=application.payment_terms,
            special_pricing={
                product_id: SpecialPriceModel.from_domain(entry)
                for product_id, entry in application.special_pricing.items()
            },
            notes=application.notes,
            created_at=application.created_at,
        )
