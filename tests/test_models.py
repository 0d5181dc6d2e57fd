"""
Tests for RentLog models

Test strategy:
1. Unit tests for the document models and their invariants
2. Id generation and schema migration
3. No file system access here (see test_local.py)
"""

import pytest
from datetime import date
from decimal import Decimal

from pydantic import ValidationError

from rentlog.models.document import (
    Bill,
    Document,
    EntityNotFoundError,
    MissingPropertyError,
    Payment,
    PaymentType,
    Property,
    Tenant,
    new_document,
    next_id,
)
from rentlog.models.migrations import (
    CURRENT_VERSION,
    MigrationError,
    migrate,
    read_version,
)
from rentlog.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestEntityModels:
    """Tests for property, tenant, bill and payment models."""

    def test_property_keeps_text_as_given(self):
        prop = Property(id=1, name="  Lake View  ", address=" 4 Hill St ")
        assert prop.name == "  Lake View  "
        assert prop.address == " 4 Hill St "

    def test_long_text_is_accepted(self):
        prop = Property(id=1, name="x" * 500, address="a" * 2000)
        assert len(prop.name) == 500

    def test_property_rejects_empty_name(self):
        with pytest.raises(ValidationError):
            Property(id=1, name="   ", address="4 Hill St")

    def test_tenant_reads_camel_case_keys(self):
        tenant = Tenant.model_validate({
            "id": 7,
            "propertyId": 1,
            "name": "Ravi",
            "rent": 5000,
            "moveInDate": "2024-01-01",
        })
        assert tenant.property_id == 1
        assert tenant.move_in_date == date(2024, 1, 1)
        assert tenant.rent == Decimal("5000")
        assert tenant.bills == []
        assert tenant.payments == []

    def test_tenant_rejects_blank_name(self):
        with pytest.raises(ValidationError):
            Tenant(id=1, property_id=1, name="  ", rent=Decimal("10"))

    def test_tenant_rejects_non_positive_rent(self):
        with pytest.raises(ValidationError):
            Tenant(id=1, property_id=1, name="Ravi", rent=Decimal("0"))

    def test_tenant_blank_move_in_date_is_none(self):
        tenant = Tenant.model_validate({
            "id": 1, "propertyId": 1, "name": "Ravi", "rent": 10, "moveInDate": "",
        })
        assert tenant.move_in_date is None

    def test_bill_unpaid_until_paid_on_set(self):
        bill = Bill(id=1, amount=Decimal("300"), due_date=date(2024, 2, 1))
        assert bill.is_paid is False
        bill.paid_on = date(2024, 2, 3)
        assert bill.is_paid is True

    def test_payment_reads_type_and_date_keys(self):
        payment = Payment.model_validate({
            "id": 3, "amount": 800, "date": "2024-02-01", "type": "utility",
        })
        assert payment.payment_type == PaymentType.UTILITY
        assert payment.payment_date == date(2024, 2, 1)
        assert payment.notes is None

    def test_payment_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            Payment.model_validate({"id": 3, "amount": 800, "date": "2024-02-01", "type": "deposit"})

    def test_unknown_keys_are_kept(self):
        prop = Property.model_validate({"id": 1, "name": "A", "address": "B", "color": "blue"})
        assert prop.model_dump(by_alias=True)["color"] == "blue"

    def test_tenant_outstanding_counts_only_unpaid_bills(self):
        tenant = Tenant(
            id=1,
            property_id=1,
            name="Ravi",
            rent=Decimal("5000"),
            bills=[
                Bill(id=2, amount=Decimal("100.25"), due_date=date(2024, 1, 1)),
                Bill(id=3, amount=Decimal("50"), due_date=date(2024, 2, 1), paid_on=date(2024, 2, 1)),
            ],
        )
        assert tenant.outstanding == Decimal("100.25")


class TestIdGeneration:
    """Ids are time based but unique within a document."""

    def test_uses_clock_when_ahead(self):
        assert next_id(iter([5, 9]), clock=lambda: 1000) == 1000

    def test_bumps_past_highest_used_id(self):
        assert next_id(iter([1000, 1001]), clock=lambda: 1000) == 1002

    def test_same_millisecond_creations_do_not_collide(self):
        document = Document()
        frozen = lambda: 1_700_000_000_000
        ids = set()
        for _ in range(5):
            new = document.new_id(clock=frozen)
            document.properties.append(Property(id=new, name="P", address="A"))
            ids.add(new)
        assert len(ids) == 5

    def test_ids_unique_across_entity_kinds(self, sample_document):
        ids = list(sample_document.iter_ids())
        assert len(ids) == len(set(ids)) == 4


class TestDocumentEdits:
    """Tests for document-level edits."""

    def test_new_document_has_first_property(self):
        document = new_document()
        assert [p.name for p in document.properties] == ["My First Property"]
        assert document.properties[0].address == "123 Example St"
        assert document.tenants == []
        assert document.version == CURRENT_VERSION

    def test_add_tenant_requires_a_property(self):
        with pytest.raises(MissingPropertyError, match="add a property"):
            Document().add_tenant(1, "Ravi", Decimal("5000"))

    def test_add_tenant_requires_existing_property(self):
        document = new_document()
        with pytest.raises(EntityNotFoundError):
            document.add_tenant(42, "Ravi", Decimal("5000"))

    def test_edit_property_validates_before_changing(self):
        document = new_document()
        prop = document.properties[0]
        with pytest.raises(ValidationError):
            document.edit_property(prop.id, "Renamed", "")
        assert prop.name == "My First Property"
        assert prop.address == "123 Example St"

    def test_edits_trim_user_input(self):
        document = new_document()
        prop = document.add_property("  Lake View ", " 9 Shore Rd  ")
        tenant = document.add_tenant(prop.id, " Meera ", Decimal("5000"))
        payment = document.add_payment(tenant.id, Decimal("10"), date(2024, 1, 1), notes="   ")
        assert (prop.name, prop.address) == ("Lake View", "9 Shore Rd")
        assert tenant.name == "Meera"
        assert payment.notes is None

    def test_edit_property_in_place(self):
        document = new_document()
        prop_id = document.properties[0].id
        document.edit_property(prop_id, "Lake View", "9 Shore Rd")
        assert document.properties[0].name == "Lake View"
        assert document.properties[0].id == prop_id

    def test_orphaned_tenant_shows_na(self):
        document = Document.model_validate({
            "properties": [],
            "tenants": [{"id": 1, "propertyId": 99, "name": "Ravi", "rent": 5000}],
        })
        tenant = document.tenants[0]
        assert document.property_name_for(tenant) == "N/A"
        assert document.orphaned_tenants() == [tenant]

    def test_mark_bill_paid(self, sample_document):
        tenant = sample_document.tenants[0]
        bill = tenant.bills[0]
        sample_document.mark_bill_paid(tenant.id, bill.id, date(2024, 1, 9))
        assert bill.paid_on == date(2024, 1, 9)

    def test_remove_payment(self, sample_document):
        tenant = sample_document.tenants[0]
        payment = tenant.payments[0]
        removed = sample_document.remove_payment(tenant.id, payment.id)
        assert removed == payment
        assert tenant.payments == []

    def test_remove_unknown_payment(self, sample_document):
        tenant = sample_document.tenants[0]
        with pytest.raises(EntityNotFoundError, match="Payment not found"):
            sample_document.remove_payment(tenant.id, 12345)


class TestMigrations:
    """Tests for the versioned migration step."""

    def test_missing_version_is_legacy(self):
        assert read_version({"properties": [], "tenants": []}) == 1

    def test_v1_tenants_gain_empty_ledgers(self):
        raw = {
            "properties": [{"id": 1, "name": "A", "address": "B"}],
            "tenants": [{"id": 2, "propertyId": 1, "name": "Ravi", "rent": 5000}],
        }
        migrated = migrate(raw)
        assert "version" not in migrated
        assert migrated["tenants"][0]["bills"] == []
        assert migrated["tenants"][0]["payments"] == []
        assert migrated["tenants"][0]["rent"] == 5000

    def test_migrate_does_not_modify_input(self):
        raw = {"properties": [], "tenants": [{"id": 2, "propertyId": 1, "name": "R", "rent": 1}]}
        migrate(raw)
        assert "bills" not in raw["tenants"][0]
        assert "version" not in raw

    def test_version_tag_is_not_rewritten(self):
        raw = {
            "version": 1,
            "properties": [],
            "tenants": [{"id": 2, "propertyId": 1, "name": "R", "rent": 1}],
        }
        migrated = migrate(raw)
        assert migrated["version"] == 1
        assert migrated["tenants"][0]["payments"] == []

    def test_existing_ledgers_are_kept(self):
        bill = {"id": 3, "amount": 10, "dueDate": "2024-01-01", "paidOn": None}
        raw = {
            "version": 1,
            "properties": [],
            "tenants": [{"id": 2, "propertyId": 1, "name": "R", "rent": 1, "bills": [bill]}],
        }
        migrated = migrate(raw)
        assert migrated["tenants"][0]["bills"] == [bill]
        assert migrated["tenants"][0]["payments"] == []

    def test_newer_version_passes_through(self):
        raw = {"version": CURRENT_VERSION + 1, "properties": [], "tenants": []}
        assert migrate(raw) == raw

    @pytest.mark.parametrize("version", ["2", 0, True, 1.5])
    def test_bad_version_tag(self, version):
        with pytest.raises(MigrationError):
            migrate({"version": version, "properties": [], "tenants": []})


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.DOCUMENT_OPENED,
            description="Data file opened",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.is_user_action is False

    def test_audit_event_to_log_dict(self):
        event = AuditEventBuilder.document_opened("rent.json", properties=2, tenants=5)
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "document_opened"
        assert log_dict["details"]["tenants"] == 5
        assert log_dict["is_user_action"] is True

    def test_save_failed_is_error(self):
        event = AuditEventBuilder.save_failed("rent.json", "Permission denied")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "Permission denied"

    def test_cancellations_are_not_errors(self):
        assert AuditEventBuilder.open_cancelled().severity == AuditSeverity.INFO
        assert AuditEventBuilder.save_cancelled().severity == AuditSeverity.INFO


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
