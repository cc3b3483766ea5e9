from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Set

from creditfile.core.models.credit_file import CreditFile
from creditfile.core.models.result import NormalizationWarning
from creditfile.validation.schema import as_document


def _ids(items: Optional[Iterable[Mapping[str, Any]]], key: str) -> Set[str]:
    return {item.get(key) for item in items or [] if isinstance(item, Mapping) and item.get(key)}


class _Checker:
    def __init__(self, document: Mapping[str, Any]) -> None:
        self.imports = _ids(document.get("imports"), "import_id")
        self.addresses = _ids(document.get("addresses"), "address_id")
        self.organisations = _ids(document.get("organisations"), "organisation_id")
        self.errors: List[NormalizationWarning] = []

    def check(
        self,
        item: Mapping[str, Any],
        field: str,
        valid: Set[str],
        target: str,
        domain: str,
        label: str,
    ) -> None:
        ref = item.get(field)
        if ref is None or ref in valid:
            return
        self.errors.append(
            NormalizationWarning(
                domain=domain,
                field=field,
                message=f'{label} references non-existent {target} "{ref}"',
                severity="error",
                raw_value=str(ref),
            )
        )

    def imports_of(self, item: Mapping[str, Any], domain: str, label: str) -> None:
        self.check(item, "source_import_id", self.imports, "import", domain, label)


def _items(document: Mapping[str, Any], key: str) -> List[Mapping[str, Any]]:
    return [item for item in document.get(key) or [] if isinstance(item, Mapping)]


def validate_referential_integrity(
    credit_file: CreditFile | Mapping[str, Any],
) -> List[NormalizationWarning]:
    """Check every foreign key resolves; report each dangling reference.

    Covers ``source_import_id`` on every entity (nested tradeline parts
    included), ``address_id``/``from_address_id``/``to_address_id``/
    ``input_address_id`` against addresses, and ``organisation_id``/
    ``furnisher_organisation_id`` against organisations.
    """

    document = as_document(credit_file)
    checker = _Checker(document)

    subject = document.get("subject") or {}
    for name in _items(subject, "names"):
        checker.imports_of(name, "subject.names", f'Name "{name.get("name_id")}"')
    for dob in _items(subject, "dates_of_birth"):
        checker.imports_of(dob, "subject.dates_of_birth", f'Date of birth "{dob.get("dob")}"')

    for org in _items(document, "organisations"):
        checker.imports_of(org, "organisations", f'Organisation "{org.get("organisation_id")}"')

    for assoc in _items(document, "address_associations"):
        label = f'Association "{assoc.get("association_id")}"'
        checker.imports_of(assoc, "address_associations", label)
        checker.check(assoc, "address_id", checker.addresses, "address", "address_associations", label)

    for link in _items(document, "address_links"):
        label = f'Link "{link.get("address_link_id")}"'
        checker.imports_of(link, "address_links", label)
        checker.check(link, "from_address_id", checker.addresses, "address", "address_links", label)
        checker.check(link, "to_address_id", checker.addresses, "address", "address_links", label)

    for tradeline in _items(document, "tradelines"):
        label = f'Tradeline "{tradeline.get("tradeline_id")}"'
        checker.imports_of(tradeline, "tradelines", label)
        checker.check(
            tradeline,
            "furnisher_organisation_id",
            checker.organisations,
            "organisation",
            "tradelines",
            label,
        )
        terms = tradeline.get("terms")
        parts = list(_items(tradeline, "identifiers"))
        parts += [terms] if isinstance(terms, Mapping) else []
        for key in ("snapshots", "monthly_metrics", "events"):
            parts += _items(tradeline, key)
        for part in parts:
            checker.imports_of(part, "tradelines", f"{label} component")

    for search in _items(document, "searches"):
        label = f'Search "{search.get("search_id")}"'
        checker.imports_of(search, "searches", label)
        checker.check(search, "organisation_id", checker.organisations, "organisation", "searches", label)
        checker.check(search, "input_address_id", checker.addresses, "address", "searches", label)

    simple = (
        ("credit_scores", "score_id", "Credit score", False),
        ("electoral_roll_entries", "electoral_entry_id", "Electoral entry", True),
        ("financial_associates", "associate_id", "Financial associate", False),
        ("public_records", "public_record_id", "Public record", True),
        ("notices_of_correction", "notice_id", "Notice", False),
        ("fraud_markers", "fraud_marker_id", "Fraud marker", True),
    )
    for collection, id_key, noun, has_address in simple:
        for item in _items(document, collection):
            label = f'{noun} "{item.get(id_key)}"'
            checker.imports_of(item, collection, label)
            if has_address:
                checker.check(item, "address_id", checker.addresses, "address", collection, label)

    return checker.errors


__all__ = ["validate_referential_integrity"]
