"""
Main Orchestrator for RentLog

This module ties together all the components and defines the
workspace the frontend talks to:
1. File flow (open / create / save / save as)
2. Record edits (properties, tenants, bills, payments)

DESIGN DECISION: The workspace enforces the boundaries:
- The current document is replaced only by a successful open or create
- A failed or cancelled open/save never touches the in-memory records
- Payments are removed only with explicit confirmation
- Every step is audited
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Union

from rentlog.audit import AuditLogger, JsonLinesAuditStorage, configure_logging
from rentlog.config import RentLogSettings, get_settings
from rentlog.models.document import (
    Bill,
    Document,
    DocumentError,
    Payment,
    PaymentType,
    Property,
    Tenant,
    new_document,
)
from rentlog.models.validation import ValidationResult
from rentlog.persistence import (
    FallbackHost,
    HandleCapableHost,
    InterfaceLabels,
    OpenResult,
    PersistenceGateway,
    PersistenceSession,
    SaveResult,
    create_gateway,
)
from rentlog.queries import DocumentSummary, summarize
from rentlog.validation import DocumentValidator


Amount = Union[Decimal, int, float, str]


class NoDocumentError(DocumentError):
    """No data file has been opened or created yet."""
    pass


def _as_amount(value: Amount) -> Union[Decimal, int, str]:
    """Floats go through their shortest repr so 0.1 stays 0.1; the models validate the rest."""
    if isinstance(value, float):
        return Decimal(repr(value))
    return value


class RentLogWorkspace:
    """
    The application shell around one data file.

    Holds the current document and the persistence session, and
    routes every user action through the gateway and the audit log.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        session: Optional[PersistenceSession] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[DocumentValidator] = None,
    ):
        self._gateway = gateway
        self.session = session or PersistenceSession()
        self._audit_logger = audit_logger or AuditLogger()
        self._validator = validator or DocumentValidator()

        self.document: Optional[Document] = None
        self.dirty = False
        # Bumped whenever the in-memory records change or are replaced
        self.revision = 0
        self.last_validation: Optional[ValidationResult] = None

    @property
    def interface_labels(self) -> InterfaceLabels:
        return self._gateway.configure_interface()

    @property
    def display_name(self) -> str:
        return self.session.display_name

    def require_document(self) -> Document:
        if self.document is None:
            raise NoDocumentError("Open a data file or create a new one first.")
        return self.document

    # -------------------------------------------------------------------------
    # File flow
    # -------------------------------------------------------------------------

    async def open_file(self) -> OpenResult:
        """
        Ask the user for a data file and make it current.

        On any outcome but OK the previous document stays current.
        """
        result = await self._gateway.open_document(self.session)
        await self._audit_logger.log_open_result(result)

        if result.ok:
            self.document = result.document
            self.dirty = False
            self.revision += 1
            await self._check_integrity()
        return result

    async def create_file(self) -> Document:
        """Start a new document with one example property. Nothing is saved yet."""
        self.document = new_document()
        self._touch()
        self.last_validation = None
        await self._audit_logger.log_document_created(len(self.document.properties))
        return self.document

    async def save(self) -> SaveResult:
        document = self.require_document()
        result = await self._gateway.save_document(self.session, document)
        return await self._after_save(result, save_as=False)

    async def save_as(self) -> SaveResult:
        document = self.require_document()
        result = await self._gateway.save_document_as(self.session, document)
        return await self._after_save(result, save_as=True)

    async def _after_save(self, result: SaveResult, save_as: bool) -> SaveResult:
        await self._audit_logger.log_save_result(result, save_as=save_as)
        if result.success:
            self.dirty = False
        return result

    def _touch(self) -> None:
        self.dirty = True
        self.revision += 1

    async def _check_integrity(self) -> None:
        self.last_validation = self._validator.validate(self.document)
        if self.last_validation.issues:
            await self._audit_logger.log_integrity_issues(
                [issue.to_log_dict() for issue in self.last_validation.issues]
            )

    def summary(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> DocumentSummary:
        return summarize(self.require_document(), date_from, date_to)

    # -------------------------------------------------------------------------
    # Record edits
    # -------------------------------------------------------------------------

    async def add_property(self, name: str, address: str) -> Property:
        prop = self.require_document().add_property(name, address)
        self._touch()
        await self._audit_logger.log_entity_added("property", prop.id, {"name": prop.name})
        return prop

    async def edit_property(self, property_id: int, name: str, address: str) -> Property:
        prop = self.require_document().edit_property(property_id, name, address)
        self._touch()
        await self._audit_logger.log_entity_updated("property", prop.id, {"name": prop.name})
        return prop

    async def add_tenant(
        self,
        property_id: int,
        name: str,
        rent: Amount,
        move_in_date: Optional[date] = None,
    ) -> Tenant:
        tenant = self.require_document().add_tenant(
            property_id, name, _as_amount(rent), move_in_date
        )
        self._touch()
        await self._audit_logger.log_entity_added(
            "tenant",
            tenant.id,
            {"name": tenant.name, "property_id": tenant.property_id, "rent": str(tenant.rent)},
        )
        return tenant

    async def add_bill(
        self,
        tenant_id: int,
        amount: Amount,
        due_date: date,
    ) -> Bill:
        bill = self.require_document().add_bill(tenant_id, _as_amount(amount), due_date)
        self._touch()
        await self._audit_logger.log_entity_added(
            "bill", bill.id, {"tenant_id": tenant_id, "amount": str(bill.amount)}
        )
        return bill

    async def mark_bill_paid(self, tenant_id: int, bill_id: int, paid_on: date) -> Bill:
        bill = self.require_document().mark_bill_paid(tenant_id, bill_id, paid_on)
        self._touch()
        await self._audit_logger.log_entity_updated(
            "bill", bill.id, {"paid_on": paid_on.isoformat()}
        )
        return bill

    async def add_payment(
        self,
        tenant_id: int,
        amount: Amount,
        payment_date: date,
        payment_type: Union[PaymentType, str] = PaymentType.RENT,
        notes: Optional[str] = None,
    ) -> Payment:
        payment = self.require_document().add_payment(
            tenant_id,
            _as_amount(amount),
            payment_date,
            PaymentType(payment_type),
            notes,
        )
        self._touch()
        await self._audit_logger.log_entity_added(
            "payment",
            payment.id,
            {
                "tenant_id": tenant_id,
                "amount": str(payment.amount),
                "type": payment.payment_type.value,
            },
        )
        return payment

    async def remove_payment(
        self,
        tenant_id: int,
        payment_id: int,
        confirmed: bool = False,
    ) -> Optional[Payment]:
        """
        Remove a payment.

        CRITICAL: Nothing is removed unless the user confirmed.
        Returns the removed payment, or None when not confirmed.
        """
        document = self.require_document()
        if not confirmed:
            return None
        payment = document.remove_payment(tenant_id, payment_id)
        self._touch()
        await self._audit_logger.log_entity_removed("payment", payment.id)
        return payment


def create_workspace(
    host: Union[HandleCapableHost, FallbackHost],
    settings: Optional[RentLogSettings] = None,
) -> RentLogWorkspace:
    """
    Factory function to create a workspace for a host.

    Configures logging, picks the gateway variant once and wires
    the audit sink when one is configured.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    storage = JsonLinesAuditStorage(settings.audit_log_path) if settings.audit_log_path else None

    return RentLogWorkspace(
        gateway=create_gateway(host, settings),
        audit_logger=AuditLogger(storage),
    )
