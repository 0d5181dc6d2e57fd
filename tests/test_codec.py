"""Tests for the data file codec."""

import json
import pytest
from datetime import date
from decimal import Decimal

from rentlog.models.document import Document, PaymentType, new_document
from rentlog.models.migrations import CURRENT_VERSION
from rentlog.persistence.codec import (
    decode_content,
    default_file_name,
    parse_document,
    serialize_document,
)
from rentlog.persistence.interface import InvalidDocumentError, ParseFailureError


class TestSerialize:
    """Tests for writing the data file."""

    def test_output_is_indented_json_with_file_keys(self, sample_document):
        text = serialize_document(sample_document)
        assert text.startswith("{\n  \"version\"")
        raw = json.loads(text)
        tenant = raw["tenants"][0]
        assert set(tenant) >= {"id", "propertyId", "name", "rent", "moveInDate", "bills", "payments"}
        assert tenant["moveInDate"] == "2023-06-01"
        assert tenant["bills"][0]["dueDate"] == "2024-01-10"
        assert tenant["bills"][0]["paidOn"] is None
        assert tenant["payments"][0]["type"] == "rent"
        assert tenant["payments"][0]["date"] == "2024-01-05"

    def test_amounts_are_plain_numbers(self, sample_document):
        raw = json.loads(serialize_document(sample_document))
        tenant = raw["tenants"][0]
        assert tenant["rent"] == 15000
        assert isinstance(tenant["rent"], int)
        assert tenant["bills"][0]["amount"] == 1200.5

    def test_non_ascii_text_survives(self):
        document = Document()
        document.add_property("Gulmohar Niwās", "Pune")
        assert "Gulmohar Niwās" in parse_document(serialize_document(document)).properties[0].name


class TestRoundTrip:
    """parse(serialize(d)) == d"""

    def test_sample_document_round_trips(self, sample_document):
        assert parse_document(serialize_document(sample_document)) == sample_document

    def test_new_document_round_trips(self):
        document = new_document()
        assert parse_document(serialize_document(document)) == document

    def test_unknown_keys_round_trip(self):
        text = json.dumps({
            "version": CURRENT_VERSION,
            "theme": "dark",
            "properties": [{"id": 1, "name": "A", "address": "B", "floor": 3}],
            "tenants": [],
        })
        raw = json.loads(serialize_document(parse_document(text)))
        assert raw["theme"] == "dark"
        assert raw["properties"][0]["floor"] == 3

    def test_version_tag_round_trips(self):
        document = Document(version=1)
        assert parse_document(serialize_document(document)).version == 1

    def test_stored_version_is_kept_on_open(self):
        assert parse_document('{"version": 1, "properties": [], "tenants": []}').version == 1

    def test_text_is_read_back_unchanged(self):
        long_name = "x" * 201
        text = json.dumps({
            "version": CURRENT_VERSION,
            "properties": [
                {"id": 1, "name": long_name, "address": "a"},
                {"id": 2, "name": "Flat 1 ", "address": "  7 Park St"},
            ],
            "tenants": [{
                "id": 3, "propertyId": 2, "name": "Ravi ", "rent": 5000,
                "payments": [{"id": 4, "amount": 10, "date": "2024-01-01", "notes": "n" * 1500}],
            }],
        })
        document = parse_document(text)

        assert document.properties[0].name == long_name
        assert document.properties[1].name == "Flat 1 "
        assert document.properties[1].address == "  7 Park St"
        assert document.tenants[0].name == "Ravi "
        assert len(document.tenants[0].payments[0].notes) == 1500
        assert parse_document(serialize_document(document)) == document

    def test_first_property_scenario(self):
        document = Document()
        prop = document.add_property("My First Property", "123 Example St")
        tenant = document.add_tenant(prop.id, "Meera", Decimal("5000"), date(2024, 1, 1))
        document.add_payment(tenant.id, Decimal("5000"), date(2024, 2, 1), PaymentType.RENT)

        parsed = parse_document(serialize_document(document))

        parsed_tenant = parsed.tenants[0]
        assert parsed_tenant.rent == Decimal("5000")
        assert parsed_tenant.move_in_date == date(2024, 1, 1)
        assert parsed_tenant.bills == []
        assert len(parsed_tenant.payments) == 1
        payment = parsed_tenant.payments[0]
        assert payment.id == tenant.payments[0].id
        assert payment.amount == Decimal("5000")
        assert payment.payment_type == PaymentType.RENT
        assert payment.payment_date == date(2024, 2, 1)


class TestParse:
    """Tests for strict reading of the data file."""

    @pytest.mark.parametrize("text", [
        '{"foo": 1}',
        '{"properties": []}',
        '{"tenants": []}',
        '{"properties": {}, "tenants": []}',
        '{"properties": [], "tenants": null}',
        '[]',
        '"rentlog"',
    ])
    def test_wrong_shape_is_invalid_document(self, text):
        with pytest.raises(InvalidDocumentError):
            parse_document(text)

    @pytest.mark.parametrize("text", ["", "not json", "{'properties': []}", '{"properties": ['])
    def test_non_json_is_parse_failure(self, text):
        with pytest.raises(ParseFailureError):
            parse_document(text)

    def test_invalid_entities_are_invalid_document(self):
        text = json.dumps({
            "properties": [{"id": 1, "name": "", "address": "B"}],
            "tenants": [],
        })
        with pytest.raises(InvalidDocumentError, match="properties.0.name"):
            parse_document(text)

    def test_bad_version_is_invalid_document(self):
        with pytest.raises(InvalidDocumentError, match="Version"):
            parse_document('{"version": "two", "properties": [], "tenants": []}')

    def test_legacy_file_gets_empty_ledgers(self):
        # Written before tenants had bills, payments or a move-in date
        text = json.dumps({
            "properties": [{"id": 1700000000000, "name": "My First Property", "address": "123 Example St"}],
            "tenants": [{"id": 1700000000001, "propertyId": 1700000000000, "name": "Ravi", "rent": 5000}],
        })
        document = parse_document(text)
        tenant = document.tenants[0]
        assert tenant.bills == []
        assert tenant.payments == []
        assert tenant.name == "Ravi"
        assert tenant.rent == Decimal("5000")
        assert tenant.property_id == 1700000000000
        assert document.version == CURRENT_VERSION

    def test_empty_lists_are_a_valid_document(self):
        document = parse_document('{"properties": [], "tenants": []}')
        assert document.properties == []
        assert document.tenants == []


class TestHelpers:

    def test_decode_strips_bom(self):
        assert decode_content("\ufeff{}".encode("utf-8")) == "{}"

    def test_decode_rejects_binary(self):
        with pytest.raises(ParseFailureError):
            decode_content(b"\xff\xfe\x00garbage")

    def test_default_file_name_is_date_stamped(self):
        assert default_file_name(today=date(2024, 3, 5)) == "rentlog-data-2024-03-05.json"
        assert default_file_name("flat", date(2024, 12, 31)) == "flat-2024-12-31.json"
