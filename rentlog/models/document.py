"""
Core Data Models for RentLog

These models define the in-memory document that the landlord edits
and that is written to the data file. They are designed to:
1. Enforce the record invariants at runtime (non-empty names, positive amounts)
2. Read and write the camelCase keys used by the data file
3. Keep unknown keys so older and newer files survive a load/save cycle
4. Store loaded text exactly as read; only the edit methods trim input

DESIGN DECISION: Monetary amounts are Decimal in memory and plain
JSON numbers on disk. This keeps arithmetic exact while staying
compatible with files written before amounts were typed.

The models do no I/O. Reading and writing is the job of
rentlog.persistence.
"""

import time
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Callable, Iterator, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)

from rentlog.models.migrations import CURRENT_VERSION


# =============================================================================
# FIELD TYPES
# =============================================================================

def _money_to_json(value: Decimal) -> Union[int, float]:
    """Write whole amounts as integers and the rest as plain numbers."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


Money = Annotated[
    Decimal,
    Field(gt=0),
    PlainSerializer(_money_to_json, return_type=Union[int, float], when_used="json"),
]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _require_text(value: str) -> str:
    """Reject blank text but store it exactly as given."""
    if not value.strip():
        raise ValueError("must not be blank")
    return value


class PaymentType(str, Enum):
    """What a payment was for."""
    RENT = "rent"
    UTILITY = "utility"


class DocumentError(Exception):
    """Base exception for document edits."""
    pass


class EntityNotFoundError(DocumentError):
    """No property, tenant, bill or payment with the given id."""
    pass


class MissingPropertyError(DocumentError):
    """A tenant needs a property to live in."""
    pass


class _Record(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        extra="allow",
    )


# =============================================================================
# ENTITIES
# =============================================================================

class Property(_Record):
    """A rentable property. Edited in place, never deleted."""

    id: int
    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)

    @field_validator('name', 'address')
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _require_text(v)


class Bill(_Record):
    """
    An amount a tenant owes.

    A bill is unpaid while `paid_on` is None.
    """

    id: int
    amount: Money
    due_date: date = Field(..., alias="dueDate")
    paid_on: Optional[date] = Field(default=None, alias="paidOn")

    @field_validator('paid_on', mode='before')
    @classmethod
    def blank_paid_on(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @property
    def is_paid(self) -> bool:
        return self.paid_on is not None


class Payment(_Record):
    """Money received from a tenant."""

    id: int
    amount: Money
    payment_date: date = Field(..., alias="date")
    payment_type: PaymentType = Field(default=PaymentType.RENT, alias="type")
    notes: Optional[str] = None


class Tenant(_Record):
    """
    A tenant of one property.

    Bills and payments belong to exactly one tenant. Files written
    before ledgers existed have neither list; both default to empty.
    """

    id: int
    property_id: int = Field(..., alias="propertyId")
    name: str = Field(..., min_length=1)
    rent: Money
    move_in_date: Optional[date] = Field(default=None, alias="moveInDate")
    bills: list[Bill] = Field(default_factory=list)
    payments: list[Payment] = Field(default_factory=list)

    @field_validator('name')
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _require_text(v)

    @field_validator('move_in_date', mode='before')
    @classmethod
    def blank_move_in_date(cls, v: Any) -> Any:
        return _blank_to_none(v)

    def find_bill(self, bill_id: int) -> Optional[Bill]:
        return next((b for b in self.bills if b.id == bill_id), None)

    def find_payment(self, payment_id: int) -> Optional[Payment]:
        return next((p for p in self.payments if p.id == payment_id), None)

    @property
    def outstanding(self) -> Decimal:
        """Total of unpaid bills."""
        return sum((b.amount for b in self.bills if not b.is_paid), Decimal("0"))


# =============================================================================
# IDENTITY
# =============================================================================

def current_millis() -> int:
    """Wall clock in milliseconds."""
    return time.time_ns() // 1_000_000


def next_id(used_ids: Iterator[int], clock: Callable[[], int] = current_millis) -> int:
    """
    Generate a new entity id.

    Ids are time based but never collide inside a document: the
    candidate is bumped past the largest id already in use, so two
    entities created in the same millisecond still get distinct ids.
    """
    candidate = clock()
    highest = max(used_ids, default=0)
    return max(candidate, highest + 1)


# =============================================================================
# DOCUMENT
# =============================================================================

class Document(_Record):
    """
    The whole data file: every property and tenant.

    A tenant whose property_id matches no property is orphaned. That
    is tolerated, never repaired; its property shows as "N/A".
    """

    version: int = Field(default=CURRENT_VERSION, ge=1)
    properties: list[Property] = Field(default_factory=list)
    tenants: list[Tenant] = Field(default_factory=list)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def find_property(self, property_id: int) -> Optional[Property]:
        return next((p for p in self.properties if p.id == property_id), None)

    def find_tenant(self, tenant_id: int) -> Optional[Tenant]:
        return next((t for t in self.tenants if t.id == tenant_id), None)

    def get_property(self, property_id: int) -> Property:
        prop = self.find_property(property_id)
        if prop is None:
            raise EntityNotFoundError(f"Property not found: {property_id}")
        return prop

    def get_tenant(self, tenant_id: int) -> Tenant:
        tenant = self.find_tenant(tenant_id)
        if tenant is None:
            raise EntityNotFoundError(f"Tenant not found: {tenant_id}")
        return tenant

    def property_name_for(self, tenant: Tenant) -> str:
        prop = self.find_property(tenant.property_id)
        return prop.name if prop else "N/A"

    def orphaned_tenants(self) -> list[Tenant]:
        property_ids = {p.id for p in self.properties}
        return [t for t in self.tenants if t.property_id not in property_ids]

    def iter_ids(self) -> Iterator[int]:
        """Every id in use, across all entity kinds."""
        for prop in self.properties:
            yield prop.id
        for tenant in self.tenants:
            yield tenant.id
            for bill in tenant.bills:
                yield bill.id
            for payment in tenant.payments:
                yield payment.id

    def new_id(self, clock: Callable[[], int] = current_millis) -> int:
        return next_id(self.iter_ids(), clock)

    # -------------------------------------------------------------------------
    # Edits
    # -------------------------------------------------------------------------

    def add_property(self, name: str, address: str) -> Property:
        prop = Property(id=self.new_id(), name=name.strip(), address=address.strip())
        self.properties.append(prop)
        return prop

    def edit_property(self, property_id: int, name: str, address: str) -> Property:
        prop = self.get_property(property_id)
        name, address = name.strip(), address.strip()
        # Validate both before touching either field
        Property(id=prop.id, name=name, address=address)
        prop.name = name
        prop.address = address
        return prop

    def add_tenant(
        self,
        property_id: int,
        name: str,
        rent: Decimal,
        move_in_date: Optional[date] = None,
    ) -> Tenant:
        if not self.properties:
            raise MissingPropertyError("Please add a property before adding a tenant.")
        self.get_property(property_id)

        tenant = Tenant(
            id=self.new_id(),
            property_id=property_id,
            name=name.strip(),
            rent=rent,
            move_in_date=move_in_date,
        )
        self.tenants.append(tenant)
        return tenant

    def add_bill(self, tenant_id: int, amount: Decimal, due_date: date) -> Bill:
        tenant = self.get_tenant(tenant_id)
        bill = Bill(id=self.new_id(), amount=amount, due_date=due_date)
        tenant.bills.append(bill)
        return bill

    def mark_bill_paid(self, tenant_id: int, bill_id: int, paid_on: date) -> Bill:
        tenant = self.get_tenant(tenant_id)
        bill = tenant.find_bill(bill_id)
        if bill is None:
            raise EntityNotFoundError(f"Bill not found: {bill_id}")
        bill.paid_on = paid_on
        return bill

    def add_payment(
        self,
        tenant_id: int,
        amount: Decimal,
        payment_date: date,
        payment_type: PaymentType = PaymentType.RENT,
        notes: Optional[str] = None,
    ) -> Payment:
        tenant = self.get_tenant(tenant_id)
        payment = Payment(
            id=self.new_id(),
            amount=amount,
            payment_date=payment_date,
            payment_type=payment_type,
            notes=(notes or "").strip() or None,
        )
        tenant.payments.append(payment)
        return payment

    def remove_payment(self, tenant_id: int, payment_id: int) -> Payment:
        tenant = self.get_tenant(tenant_id)
        payment = tenant.find_payment(payment_id)
        if payment is None:
            raise EntityNotFoundError(f"Payment not found: {payment_id}")
        tenant.payments.remove(payment)
        return payment


def new_document() -> Document:
    """A fresh document with one example property to start from."""
    document = Document()
    document.add_property(name="My First Property", address="123 Example St")
    return document
