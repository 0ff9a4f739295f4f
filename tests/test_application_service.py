import pytest

from src.b2b_portal.errors import (
    DuplicateRecordError,
    InconsistentStateError,
    InvalidArgumentError,
    InvalidTransitionError,
    PermissionDeniedError,
    RecordNotFoundError,
    RemoteOperationFailed,
)
from src.b2b_portal.models.domain import ApplicationStatus, CustomerStatus, FixedPrice
from src.b2b_portal.persistence import customers as customer_store
from src.b2b_portal.schemas.applications import (
    AccountingReview,
    ApplicationStatusChange,
    ApplicationSubmission,
    ApprovalTerms,
)
from src.b2b_portal.schemas.pricing import SpecialPriceModel
from src.b2b_portal.services import applications as service


def _submission(email: str = "Buyer@Example.com") -> ApplicationSubmission:
    return ApplicationSubmission(
        company_name=" Acme Trading ",
        contact_name="Hana Sato",
        email=email,
        phone="03-1234-5678",
        address="1-2-3 Chiyoda, Tokyo",
        business_type="retail",
        terms_agreed=True,
    )


def _seed_application(fake_db, status: str, **fields) -> str:
    record = {
        "id": "app-1",
        "company_name": "Acme Trading",
        "contact_name": "Hana Sato",
        "email": "buyer@example.com",
        "address": "Tokyo",
        "business_type": "retail",
        "terms_agreed": True,
        "status": status,
    }
    record.update(fields)
    fake_db.seed("applications", record)
    return record["id"]


def test_submit_application_normalises_and_stores_pending(fake_db) -> None:
    application = service.submit_application(_submission())

    assert application.status == ApplicationStatus.PENDING
    assert application.email == "buyer@example.com"
    assert application.company_name == "Acme Trading"
    assert fake_db.tables["applications"][0]["terms_agreed"] is True


def test_duplicate_email_is_reported(fake_db) -> None:
    service.submit_application(_submission())

    with pytest.raises(DuplicateRecordError):
        service.submit_application(_submission("buyer@example.com"))


@pytest.mark.parametrize(
    "overrides",
    [
        {"email": "not-an-email"},
        {"company_name": "   "},
        {"phone": "call me"},
        {"terms_agreed": False},
    ],
)
def test_submission_validation(overrides: dict) -> None:
    payload = _submission().model_dump()
    payload.update(overrides)
    with pytest.raises(ValueError):
        ApplicationSubmission(**payload)


def test_review_then_request_approval(fake_db, accountant) -> None:
    app_id = _seed_application(fake_db, "pending")

    service.change_application_status(
        accountant, app_id, ApplicationStatusChange(status=ApplicationStatus.ACCOUNTING_REVIEW)
    )
    reviewed = service.record_accounting_review(
        accountant,
        app_id,
        AccountingReview(accounting_id="Y-0042", discount_rate=10, credit_limit=500_000, payment_terms=30),
    )
    assert reviewed.accounting_id == "Y-0042"
    assert fake_db.tables["applications"][0]["yayoi_id"] == "Y-0042"

    moved = service.change_application_status(
        accountant, app_id, ApplicationStatusChange(status=ApplicationStatus.APPROVAL_PENDING)
    )
    assert moved.status == ApplicationStatus.APPROVAL_PENDING


def test_approval_pending_requires_accounting_id(fake_db, accountant) -> None:
    app_id = _seed_application(fake_db, "accounting_review")

    with pytest.raises(InvalidArgumentError):
        service.change_application_status(
            accountant, app_id, ApplicationStatusChange(status=ApplicationStatus.APPROVAL_PENDING)
        )
    assert fake_db.tables["applications"][0]["status"] == "accounting_review"


def test_review_only_during_accounting_review(fake_db, accountant) -> None:
    app_id = _seed_application(fake_db, "pending")

    with pytest.raises(InvalidArgumentError):
        service.record_accounting_review(accountant, app_id, AccountingReview(accounting_id="Y-1"))


def test_president_cannot_record_accounting_review(fake_db, president, admin) -> None:
    app_id = _seed_application(fake_db, "accounting_review")

    with pytest.raises(PermissionDeniedError):
        service.record_accounting_review(president, app_id, AccountingReview(accounting_id="Y-1"))
    assert "yayoi_id" not in fake_db.tables["applications"][0]

    reviewed = service.record_accounting_review(admin, app_id, AccountingReview(accounting_id="Y-1"))
    assert reviewed.accounting_id == "Y-1"


def test_review_rejects_unknown_payment_terms() -> None:
    with pytest.raises(ValueError):
        AccountingReview(payment_terms=31)


def test_approve_creates_exactly_one_customer(fake_db, president) -> None:
    app_id = _seed_application(
        fake_db,
        "approval_pending",
        yayoi_id="Y-0042",
        discount_rate=10,
        credit_limit=500_000,
        payment_terms=30,
    )

    result = service.approve_application(president, app_id)

    assert result.application.status == ApplicationStatus.APPROVED
    assert result.customer.discount_rate == 10
    assert result.customer.credit_limit == 500_000
    assert result.customer.payment_terms == 30
    assert result.customer.status == CustomerStatus.ACTIVE
    assert result.customer.application_id == app_id
    assert result.customer.accounting_id == "Y-0042"
    assert len(fake_db.tables["customers"]) == 1

    with pytest.raises(InvalidTransitionError):
        service.approve_application(president, app_id)
    assert len(fake_db.tables["customers"]) == 1


def test_approval_terms_override_review_values(fake_db, president) -> None:
    app_id = _seed_application(fake_db, "approval_pending", yayoi_id="Y-1", discount_rate=10)

    terms = ApprovalTerms(
        discount_rate=12,
        payment_terms=60,
        special_pricing={"p1": {"mode": "fixed", "value": 450}},
        notes="priority account",
    )
    result = service.approve_application(president, app_id, terms)

    assert result.customer.discount_rate == 12
    assert result.customer.payment_terms == 60
    assert result.customer.credit_limit == 100_000
    assert result.customer.special_pricing == {"p1": FixedPrice(450)}
    assert fake_db.tables["customers"][0]["special_pricing"] == {"p1": {"type": "fixed", "price": 450}}
    assert result.customer.notes == "priority account"


def test_approve_via_status_change(fake_db, admin) -> None:
    app_id = _seed_application(fake_db, "approval_pending", yayoi_id="Y-1")

    application = service.change_application_status(
        admin, app_id, ApplicationStatusChange(status=ApplicationStatus.APPROVED)
    )

    assert application.status == ApplicationStatus.APPROVED
    assert len(fake_db.tables["customers"]) == 1


def test_accounting_cannot_approve(fake_db, accountant) -> None:
    app_id = _seed_application(fake_db, "approval_pending", yayoi_id="Y-1")

    with pytest.raises(PermissionDeniedError):
        service.approve_application(accountant, app_id)
    assert "customers" not in fake_db.tables


def test_existing_customer_is_reused(fake_db, president) -> None:
    app_id = _seed_application(fake_db, "approval_pending", yayoi_id="Y-1")
    fake_db.seed("customers", {"id": "cust-9", "company_name": "Acme Trading", "application_id": app_id})

    result = service.approve_application(president, app_id)

    assert result.customer.id == "cust-9"
    assert len(fake_db.tables["customers"]) == 1
    assert ("customers", "insert") not in fake_db.calls


def test_failed_customer_insert_reverts_application(fake_db, president) -> None:
    app_id = _seed_application(fake_db, "approval_pending", yayoi_id="Y-1")
    fake_db.fail("customers", "insert")

    with pytest.raises(RemoteOperationFailed):
        service.approve_application(president, app_id)

    assert fake_db.tables["applications"][0]["status"] == "approval_pending"
    assert fake_db.tables.get("customers", []) == []


def test_failed_revert_raises_inconsistent_state(fake_db, president) -> None:
    app_id = _seed_application(fake_db, "approval_pending", yayoi_id="Y-1")
    fake_db.fail("customers", "insert")
    fake_db.fail("applications", "update", skip=1)

    with pytest.raises(InconsistentStateError):
        service.approve_application(president, app_id)

    assert fake_db.tables["applications"][0]["status"] == "approved"


def test_invalid_terms_leave_application_untouched(fake_db, president) -> None:
    app_id = _seed_application(fake_db, "approval_pending", yayoi_id="Y-1")
    terms = ApprovalTerms(
        special_pricing={"p1": SpecialPriceModel.model_construct(mode="percent_discount", value=150)}
    )

    with pytest.raises(InvalidArgumentError):
        service.approve_application(president, app_id, terms)

    assert fake_db.tables["applications"][0]["status"] == "approval_pending"
    assert ("applications", "update") not in fake_db.calls
    assert fake_db.tables.get("customers", []) == []


def test_empty_customer_insert_reverts_application(fake_db, president, monkeypatch) -> None:
    app_id = _seed_application(fake_db, "approval_pending", yayoi_id="Y-1")

    def insert_nothing(record):
        raise RecordNotFoundError("customers", record["application_id"])

    monkeypatch.setattr(customer_store, "insert_customer", insert_nothing)

    with pytest.raises(RecordNotFoundError):
        service.approve_application(president, app_id)

    assert fake_db.tables["applications"][0]["status"] == "approval_pending"


@pytest.mark.parametrize("status", ["pending", "accounting_review", "approval_pending"])
def test_reject_from_any_open_state(fake_db, admin, status: str) -> None:
    app_id = _seed_application(fake_db, status)

    rejected = service.reject_application(admin, app_id, "incomplete documents")

    assert rejected.status == ApplicationStatus.REJECTED
    assert rejected.notes == "incomplete documents"
    assert ("customers", "insert") not in fake_db.calls


def test_rejected_is_terminal(fake_db, admin) -> None:
    app_id = _seed_application(fake_db, "rejected")

    with pytest.raises(InvalidTransitionError):
        service.reject_application(admin, app_id)


def test_list_and_get(fake_db, admin, customer_session) -> None:
    _seed_application(fake_db, "pending")
    fake_db.seed("applications", {"id": "app-2", "company_name": "B", "contact_name": "B", "email": "b@b.jp", "status": "rejected"})

    assert [a.id for a in service.list_applications(admin)] == ["app-2", "app-1"]
    assert [a.id for a in service.list_applications(admin, ApplicationStatus.PENDING)] == ["app-1"]
    with pytest.raises(RecordNotFoundError):
        service.get_application(admin, "missing")
    with pytest.raises(PermissionDeniedError):
        service.list_applications(customer_session("c1"))


def test_unconfigured_store_is_an_operation_failure(monkeypatch, admin) -> None:
    from src.b2b_portal.db import supabase as supabase_module

    monkeypatch.setattr(supabase_module, "get_supabase_client", lambda: None)

    with pytest.raises(RemoteOperationFailed):
        service.list_applications(admin)
