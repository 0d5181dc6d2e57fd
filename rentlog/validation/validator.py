"""
Document Integrity Checks

Runs after every successful open and reports anything suspicious in
the landlord's records:

- Orphaned tenants (property no longer in the file)
- Duplicate ids (two records answering to the same id)
- Bills marked paid before they were due
- Payments dated before the tenant moved in

IMPORTANT: Validation NEVER silently fixes issues.
An orphaned tenant stays orphaned and shows "N/A" as its property.
"""

from collections import Counter

from rentlog.models.document import Document
from rentlog.models.validation import ValidationIssue, ValidationResult


class DocumentValidator:
    """Checks cross-record integrity that the per-record models cannot see."""

    def validate(self, document: Document) -> ValidationResult:
        issues: list[ValidationIssue] = []
        issues.extend(self._check_orphans(document))
        issues.extend(self._check_duplicate_ids(document))
        issues.extend(self._check_dates(document))
        return ValidationResult(issues=issues)

    def _check_orphans(self, document: Document) -> list[ValidationIssue]:
        return [
            ValidationIssue(
                entity_type="tenant",
                entity_id=tenant.id,
                issue_type="orphaned",
                message=f"Tenant '{tenant.name}' refers to missing property {tenant.property_id}",
                severity="warning",
                suggested_fix="The tenant is kept; its property shows as N/A",
            )
            for tenant in document.orphaned_tenants()
        ]

    def _check_duplicate_ids(self, document: Document) -> list[ValidationIssue]:
        counts = Counter(document.iter_ids())
        return [
            ValidationIssue(
                entity_type="document",
                entity_id=entity_id,
                issue_type="duplicate_id",
                message=f"Id {entity_id} is used by {count} records",
                severity="error",
                suggested_fix="Edit the data file so every record has its own id",
            )
            for entity_id, count in sorted(counts.items())
            if count > 1
        ]

    def _check_dates(self, document: Document) -> list[ValidationIssue]:
        issues = []
        for tenant in document.tenants:
            for bill in tenant.bills:
                if bill.paid_on and bill.paid_on < bill.due_date:
                    # Early payment is legitimate; just note it
                    issues.append(ValidationIssue(
                        entity_type="bill",
                        entity_id=bill.id,
                        issue_type="paid_before_due",
                        message=f"Bill {bill.id} of '{tenant.name}' was paid before its due date",
                        severity="info",
                    ))

            if tenant.move_in_date is None:
                continue
            for payment in tenant.payments:
                if payment.payment_date < tenant.move_in_date:
                    issues.append(ValidationIssue(
                        entity_type="payment",
                        entity_id=payment.id,
                        issue_type="before_move_in",
                        message=(
                            f"Payment {payment.id} of '{tenant.name}' is dated "
                            f"{payment.payment_date.isoformat()}, before move-in on "
                            f"{tenant.move_in_date.isoformat()}"
                        ),
                        severity="warning",
                        suggested_fix="Check the payment date",
                    ))
        return issues
