"""Summary queries package."""

from rentlog.queries.summary import DocumentSummary, TenantSummary, format_money, summarize

__all__ = ["DocumentSummary", "TenantSummary", "format_money", "summarize"]
