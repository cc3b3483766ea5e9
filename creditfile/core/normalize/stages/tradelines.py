"""Tradelines.

One tradeline per ``(source_system, group_key)``: the same account reported by
two CRAs stays two tradelines, linked only through ``canonical_id``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from creditfile.core.mapping.mappers import (
    map_account_status,
    map_account_type,
    map_payment_code,
    map_payment_text,
)
from creditfile.core.models.credit_file import (
    Tradeline,
    TradelineEvent,
    TradelineIdentifier,
    TradelineMonthlyMetric,
    TradelineSnapshot,
    TradelineTerms,
)
from creditfile.core.normalize.context import NormalizationContext, normalize_org_name
from creditfile.core.normalize.grouping import FieldGroup
from creditfile.core.normalize.ids import content_id
from creditfile.core.normalize.parsers import parse_amount, parse_date, parse_int

logger = logging.getLogger(__name__)

_PAYMENT_HISTORY_RE = re.compile(r"^payment_history_(\d{4})_(\d{2})$")
_ENDING_RE = re.compile(r"Ending\s+(\S+)", re.IGNORECASE)

_TERM_TYPES = {
    "credit_card": "revolving",
    "budget_account": "revolving",
    "mortgage": "mortgage",
    "rental": "rental",
    "unsecured_loan": "installment",
    "secured_loan": "installment",
}

# adapters whose payment history cells hold CRA codes rather than text
_CODE_ADAPTERS = {"equifax-pdf"}


@dataclass(frozen=True)
class Heading:
    lender: Optional[str] = None
    account_type: Optional[str] = None
    last4: Optional[str] = None
    prefix: Optional[str] = None


def parse_heading(group_key: str) -> Heading:
    """Split ``[prefix:]Lender - Account Type - Ending 1234``."""

    prefix, sep, heading = group_key.partition(":")
    if not sep:
        prefix, heading = "", group_key
    parts = [p.strip() for p in heading.split(" - ")]
    last4 = None
    if len(parts) >= 3:
        match = _ENDING_RE.search(parts[2])
        if match:
            last4 = match.group(1)
    return Heading(
        lender=parts[0] or None,
        account_type=parts[1] if len(parts) >= 2 and parts[1] else None,
        last4=last4,
        prefix=prefix or None,
    )


def infer_term_type(account_type: str) -> str:
    return _TERM_TYPES.get(account_type, "other")


class _Builder:
    """Builds one tradeline from one field group."""

    def __init__(self, ctx: NormalizationContext, group: FieldGroup) -> None:
        self.ctx = ctx
        self.group = group
        self.source = group.source_system
        self.import_id = ctx.cra_import_id(self.source, "tradelines")

    def _warn(self, field_name: str, message: str, raw: Optional[str], severity: str = "warning") -> None:
        self.ctx.warn(
            "tradelines",
            field_name,
            message,
            severity=severity,
            raw_value=raw,
            source_system=self.source,
        )

    def date(self, field_name: str, *names: str) -> Optional[str]:
        raw = self.group.value(*names)
        if raw is None:
            return None
        parsed = parse_date(raw)
        if parsed is None:
            self._warn(field_name, f'Could not parse {field_name} date "{raw}"', raw)
        return parsed

    def amount(self, field_name: str, *names: str) -> Optional[int]:
        raw = self.group.value(*names)
        if raw is None:
            return None
        parsed = parse_amount(raw)
        if parsed is None:
            self._warn(field_name, f'Could not parse {field_name} amount "{raw}"', raw)
        return parsed

    def identifiers(self, last4: Optional[str]) -> List[TradelineIdentifier]:
        values = [last4, self.group.value("account_number", "account-number")]
        identifiers: List[TradelineIdentifier] = []
        for value in values:
            if not value:
                continue
            identifiers.append(
                TradelineIdentifier(
                    identifier_id=self.ctx.next_id("tid"),
                    identifier_type="masked_account_number",
                    value=value,
                    source_import_id=self.import_id,
                )
            )
        return identifiers

    def terms(self, account_type: str) -> tuple[Optional[TradelineTerms], Optional[int]]:
        period_raw = self.group.value("repayment-period", "repayment_period")
        payment_raw = self.group.value("regular-payment", "regular_payment")
        if period_raw is None and payment_raw is None:
            return None, None

        term_count = None
        if period_raw is not None:
            term_count = parse_int(period_raw)
            if term_count is None:
                self._warn("term_count", f'Could not parse repayment period "{period_raw}"', period_raw)
        payment = self.amount("regular_payment_amount", "regular-payment", "regular_payment")

        terms = TradelineTerms(
            terms_id=self.ctx.next_id("trm"),
            term_type=infer_term_type(account_type),
            term_count=term_count,
            term_payment_amount=payment,
            source_import_id=self.import_id,
        )
        return terms, payment

    def snapshot(self, status: Optional[str]) -> Optional[TradelineSnapshot]:
        opening = self.amount("opening_balance", "opening-balance", "opening_balance")
        balance = self.amount("current_balance", "balance", "current_balance")
        limit = self.amount("credit_limit", "limit", "credit_limit")
        as_of = self.date("as_of_date", "reported-until", "reported_until")
        if as_of is None:
            as_of = self.date("as_of_date", "date_updated", "date-updated")
        if opening is None and balance is None and limit is None and as_of is None:
            return None
        return TradelineSnapshot(
            snapshot_id=self.ctx.next_id("snap"),
            as_of_date=as_of,
            status_current=status,
            current_balance=balance,
            opening_balance=opening,
            credit_limit=limit,
            source_import_id=self.import_id,
        )

    def monthly_metrics(self) -> List[TradelineMonthlyMetric]:
        metadata = self.ctx.metadata
        uses_codes = (
            metadata.adapter_id in _CODE_ADAPTERS or (metadata.artifact_type or "").lower() == "pdf"
        )
        metrics: List[TradelineMonthlyMetric] = []
        for name, raw in self.group.fields.items():
            match = _PAYMENT_HISTORY_RE.match(name)
            if not match:
                continue
            value = raw.value.strip()
            if uses_codes:
                mapped = map_payment_code(value, self.source)
            else:
                mapped = map_payment_text(value)
            self.ctx.add_warning(mapped.warning)
            metrics.append(
                TradelineMonthlyMetric(
                    monthly_metric_id=self.ctx.next_id("mm"),
                    period=f"{match.group(1)}-{match.group(2)}",
                    metric_type="payment_status",
                    value_text=None if uses_codes else value,
                    raw_status_code=value if uses_codes else None,
                    canonical_status=mapped.value,
                    source_import_id=self.import_id,
                )
            )
        return metrics

    def _event(self, event_type: str, event_date: Optional[str], raw_status: str) -> Optional[TradelineEvent]:
        if event_date is None:
            self._warn(
                "events",
                f'Status "{raw_status}" implies a {event_type} event but no date is available; '
                "event skipped",
                raw_status,
                severity="info",
            )
            return None
        return TradelineEvent(
            event_id=self.ctx.next_id("evt"),
            event_type=event_type,
            event_date=event_date,
            source_import_id=self.import_id,
        )

    def events(
        self, status: Optional[str], opened_at: Optional[str], closed_at: Optional[str]
    ) -> List[TradelineEvent]:
        if not status:
            return []
        lowered = status.lower()
        candidates = []
        if "default" in lowered:
            default_date = self.date("default_date", "default_date", "default-date")
            candidates.append(("default", default_date or closed_at or opened_at))
        if ("settled" in lowered or "satisfied" in lowered) and closed_at:
            candidates.append(("settled", closed_at))
        if "arrangement" in lowered:
            candidates.append(("arrangement_to_pay", opened_at))

        events = []
        for event_type, event_date in candidates:
            event = self._event(event_type, event_date, status)
            if event is not None:
                events.append(event)
        return events

    def build(self) -> Tradeline:
        ctx, group = self.ctx, self.group
        heading = parse_heading(group.group_key)

        furnisher = group.value("heading_lender", "lender", "furnisher") or heading.lender
        furnisher_org_id = None
        if furnisher:
            furnisher_org_id = ctx.register_organisation(furnisher, "furnisher", self.import_id)
        else:
            self._warn("furnisher", "Tradeline has no furnisher name", group.group_key, severity="error")

        raw_type = group.value("heading_account_type", "account-type", "account_type") or heading.account_type or ""
        account_type = map_account_type(raw_type, self.source)
        ctx.add_warning(account_type.warning)

        opened_at = self.date("opened_at", "opened", "date_opened")
        closed_at = self.date("closed_at", "closed", "date_closed")
        if closed_at is None:
            closed_at = self.date("closed_at", "date_satisfied", "date-satisfied")

        status = None
        raw_status = group.value("status", "account_status")
        if raw_status:
            mapped_status = map_account_status(raw_status, self.source)
            ctx.add_warning(mapped_status.warning)
            status = mapped_status.value
        if status is None and (group.value("is_closed") or "").lower() == "true":
            status = "settled"

        last4 = group.value("heading_last4", "last4") or heading.last4
        identifiers = self.identifiers(last4)
        terms, regular_payment = self.terms(account_type.value)
        snapshot = self.snapshot(status)
        metrics = self.monthly_metrics()
        events = self.events(status, opened_at, closed_at)

        return Tradeline(
            tradeline_id=ctx.next_id("tl"),
            canonical_id=content_id(
                "canon",
                normalize_org_name(furnisher or ""),
                account_type.value,
                last4 or "",
                opened_at or "",
            ),
            furnisher_organisation_id=furnisher_org_id,
            furnisher_name_raw=furnisher,
            account_type=account_type.value,
            opened_at=opened_at,
            closed_at=closed_at,
            status_current=status,
            regular_payment_amount=regular_payment,
            identifiers=identifiers or None,
            terms=terms,
            snapshots=[snapshot] if snapshot is not None else None,
            monthly_metrics=metrics or None,
            events=events or None,
            source_import_id=self.import_id,
        )


def build_tradelines(ctx: NormalizationContext) -> None:
    for group in ctx.groups("tradelines", keep_ungrouped=False):
        ctx.tradelines.append(_Builder(ctx, group).build())
    logger.debug("NORMALIZE_TRADELINES_BUILT count=%d", len(ctx.tradelines))
