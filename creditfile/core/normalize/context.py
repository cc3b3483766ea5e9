"""Mutable state owned by one normalization run.

Nothing here outlives :func:`creditfile.core.normalize.engine.normalize`; two
runs never share a context.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from creditfile.config import NormalizerConfig
from creditfile.core.mapping.rules import MappingRules
from creditfile.core.models.credit_file import (
    Address,
    AddressAssociation,
    AddressLink,
    CreditScore,
    DateOfBirthRecord,
    ElectoralRollEntry,
    FinancialAssociate,
    FraudMarker,
    ImportBatch,
    NoticeOfCorrection,
    Organisation,
    PersonName,
    PublicRecord,
    SearchRecord,
    Tradeline,
)
from creditfile.core.models.raw import ExtractionMetadata, PageInfo, RawSection
from creditfile.core.models.result import NormalizationWarning
from creditfile.core.normalize.address import ParsedAddress, parse_uk_address
from creditfile.core.normalize.grouping import FieldGroup, KeyedRegistry, group_fields
from creditfile.core.normalize.ids import IdCounters, content_id
from creditfile.core.taxonomy import COMPOSITE_KEY

_ORG_SUFFIX_RE = re.compile(r"\s+(LTD|PLC|LIMITED|INC|CORP)\.?$", re.IGNORECASE)


def normalize_org_name(name: str) -> str:
    """Upper-case, drop a trailing company suffix, collapse whitespace."""

    collapsed = " ".join(name.split()).upper()
    return _ORG_SUFFIX_RE.sub("", collapsed).strip()


@dataclass
class NormalizationContext:
    config: NormalizerConfig
    metadata: ExtractionMetadata
    page_info: PageInfo
    rules: MappingRules
    sections: List[RawSection] = field(default_factory=list)

    imports: Dict[str, ImportBatch] = field(default_factory=dict)
    # raw section tag (lower-cased) -> canonical source system
    source_tags: Dict[str, str] = field(default_factory=dict)
    subject_id: Optional[str] = None

    names: List[PersonName] = field(default_factory=list)
    dates_of_birth: List[DateOfBirthRecord] = field(default_factory=list)
    address_links: List[AddressLink] = field(default_factory=list)
    tradelines: List[Tradeline] = field(default_factory=list)
    searches: List[SearchRecord] = field(default_factory=list)
    credit_scores: List[CreditScore] = field(default_factory=list)
    electoral_roll_entries: List[ElectoralRollEntry] = field(default_factory=list)
    financial_associates: List[FinancialAssociate] = field(default_factory=list)
    public_records: List[PublicRecord] = field(default_factory=list)
    fraud_markers: List[FraudMarker] = field(default_factory=list)
    notices_of_correction: List[NoticeOfCorrection] = field(default_factory=list)

    warnings: List[NormalizationWarning] = field(default_factory=list)
    counters: IdCounters = field(default_factory=IdCounters)

    def __post_init__(self) -> None:
        self.address_registry: KeyedRegistry[ParsedAddress, Address] = KeyedRegistry(
            lambda parsed: parsed.normalized_single_line, self._create_address
        )
        self.association_registry: KeyedRegistry[
            Tuple[str, str, str], AddressAssociation
        ] = KeyedRegistry(lambda item: item[:2], self._create_association)
        self.organisation_registry: KeyedRegistry[
            Tuple[str, str, str], Organisation
        ] = KeyedRegistry(
            lambda item: normalize_org_name(item[0]),
            self._create_organisation,
            self._merge_organisation,
        )

    # -- ids / warnings -----------------------------------------------------

    def next_id(self, prefix: str) -> str:
        return self.counters.next(prefix)

    def warn(
        self,
        domain: str,
        field_name: Optional[str],
        message: str,
        *,
        severity: str = "warning",
        raw_value: Optional[str] = None,
        source_system: Optional[str] = None,
    ) -> None:
        self.warnings.append(
            NormalizationWarning(
                domain=domain,
                field=field_name,
                message=message,
                severity=severity,
                raw_value=raw_value,
                source_system=source_system,
            )
        )

    def add_warning(self, warning: Optional[NormalizationWarning]) -> None:
        if warning is not None:
            self.warnings.append(warning)

    # -- sources and import batches -----------------------------------------

    def source_of(self, section: RawSection) -> Optional[str]:
        """Canonical source system for ``section``; ``None`` means composite."""

        if section.source_system is None:
            return None
        return self.source_tags.get(section.source_system.strip().lower(), "other")

    def domain_sections(self, domain: str) -> List[Tuple[int, RawSection, Optional[str]]]:
        return [
            (index, section, self.source_of(section))
            for index, section in enumerate(self.sections)
            if section.domain == domain
        ]

    def groups(
        self, domain: str, *, keep_ungrouped: bool = True, report_dropped: bool = True
    ) -> List[FieldGroup]:
        groups, dropped = group_fields(self.domain_sections(domain), keep_ungrouped=keep_ungrouped)
        if dropped and report_dropped:
            self.warn(
                domain,
                "group_key",
                f"{dropped} field(s) without a group key ignored",
                severity="info",
            )
        return groups

    def composite_import_id(self) -> str:
        return self.imports[COMPOSITE_KEY].import_id

    def import_id_for(self, source: Optional[str]) -> str:
        """Import id for a section's source system, composite when untagged."""

        if source and source in self.imports:
            return self.imports[source].import_id
        return self.composite_import_id()

    def cra_import_id(self, source: Optional[str], domain: str) -> str:
        """Import id for an entity that must belong to a CRA batch.

        Untagged data goes to the only CRA batch when exactly one exists;
        otherwise it falls back to composite with a warning.
        """

        if source and source in self.imports:
            return self.imports[source].import_id
        cra_batches = [key for key in self.imports if key != COMPOSITE_KEY]
        if len(cra_batches) == 1:
            return self.imports[cra_batches[0]].import_id
        self.warn(
            domain,
            "source_import_id",
            f"{domain} record has no attributable source system; attributed to composite import",
            source_system=source,
        )
        return self.composite_import_id()

    # -- addresses ------------------------------------------------------------

    def _create_address(self, parsed: ParsedAddress) -> Address:
        return Address(
            address_id=content_id("addr", parsed.normalized_single_line),
            line_1=parsed.line_1 or None,
            line_2=parsed.line_2,
            town_city=parsed.town_city,
            postcode=parsed.postcode,
            country_code=parsed.country_code,
            normalized_single_line=parsed.normalized_single_line,
        )

    def register_address(self, raw: str) -> str:
        """Register an address mention; the same normalized line yields one id."""

        address, _ = self.address_registry.add(parse_uk_address(raw))
        return address.address_id

    def find_address(self, raw: str) -> Optional[str]:
        address = self.address_registry.get(parse_uk_address(raw).normalized_single_line)
        return address.address_id if address is not None else None

    def _create_association(self, item: Tuple[str, str, str]) -> AddressAssociation:
        address_id, import_id, role = item
        return AddressAssociation(
            association_id=self.next_id("addr-assoc"),
            address_id=address_id,
            role=role,
            source_import_id=import_id,
        )

    def associate_address(self, address_id: str, import_id: str, role: str) -> AddressAssociation:
        """One association per (address, import); the first role reported wins."""

        association, _ = self.association_registry.add((address_id, import_id, role))
        return association

    # -- organisations ----------------------------------------------------------

    def _create_organisation(self, item: Tuple[str, str, str]) -> Organisation:
        name, role, import_id = item
        return Organisation(
            organisation_id=content_id("org", normalize_org_name(name)),
            name=name.strip(),
            roles=[role],
            source_import_id=import_id,
        )

    @staticmethod
    def _merge_organisation(org: Organisation, item: Tuple[str, str, str]) -> None:
        role = item[1]
        if role not in org.roles:
            org.roles.append(role)

    def register_organisation(self, name: str, role: str, import_id: str) -> Optional[str]:
        if not normalize_org_name(name):
            return None
        org, _ = self.organisation_registry.add((name, role, import_id))
        return org.organisation_id


__all__ = ["NormalizationContext", "normalize_org_name"]
