"""Tests for document integrity checks."""

from datetime import date
from decimal import Decimal

from rentlog.models.document import Document
from rentlog.validation import DocumentValidator


def test_clean_document_has_no_issues(sample_document):
    result = DocumentValidator().validate(sample_document)
    assert result.issues == []
    assert result.is_valid


def test_orphaned_tenant_is_a_warning():
    document = Document.model_validate({
        "properties": [],
        "tenants": [{"id": 1, "propertyId": 99, "name": "Ravi", "rent": 5000}],
    })

    result = DocumentValidator().validate(document)

    assert [issue.issue_type for issue in result.issues] == ["orphaned"]
    assert result.warnings[0].entity_id == 1
    assert result.is_valid
    # Reported, not repaired
    assert document.tenants[0].property_id == 99


def test_duplicate_ids_are_errors():
    document = Document.model_validate({
        "properties": [{"id": 5, "name": "A", "address": "B"}],
        "tenants": [{"id": 5, "propertyId": 5, "name": "Ravi", "rent": 5000}],
    })

    result = DocumentValidator().validate(document)

    assert result.has_errors
    assert result.error_count == 1
    assert result.issues[0].entity_id == 5


def test_date_checks(sample_document):
    tenant = sample_document.tenants[0]
    bill = tenant.bills[0]
    sample_document.mark_bill_paid(tenant.id, bill.id, date(2024, 1, 2))
    sample_document.add_payment(tenant.id, Decimal("100"), date(2023, 5, 1))

    result = DocumentValidator().validate(sample_document)

    kinds = {issue.issue_type: issue.severity for issue in result.issues}
    assert kinds == {"paid_before_due": "info", "before_move_in": "warning"}
    assert result.is_valid
