from __future__ import annotations

from creditfile.core.mapping.mappers import map_search_section, map_search_type
from creditfile.core.models.credit_file import SearchRecord
from creditfile.core.normalize.context import NormalizationContext
from creditfile.core.normalize.grouping import FieldGroup, is_ungrouped
from creditfile.core.normalize.parsers import parse_date

_PURPOSE_FIELDS = ("search_purpose", "purpose", "search-purpose")
_COMPANY_FIELDS = ("companyName", "company", "company_name", "organisation")


def _section_kind(group: FieldGroup) -> str | None:
    """``hard``/``soft`` from an explicit field or the group key, if present."""

    explicit = group.value("search_kind", "visibility")
    if explicit and explicit.lower() in ("hard", "soft"):
        return explicit.lower()
    if is_ungrouped(group):
        return None
    key = group.group_key.lower()
    if "hard" in key:
        return "hard"
    if "soft" in key:
        return "soft"
    return None


def build_searches(ctx: NormalizationContext) -> None:
    """Searches; each is attributed to a CRA import batch.

    An explicit purpose is mapped through the search-type tables. Without one,
    or when the purpose is unrecognised but the search was listed under a
    hard/soft section, the section decides.
    """

    for group in ctx.groups("searches"):
        source = group.source_system
        import_id = ctx.cra_import_id(source, "searches")

        purpose = group.value(*_PURPOSE_FIELDS)
        kind = _section_kind(group)
        if purpose:
            mapped = map_search_type(purpose, source)
            if mapped.warning is not None and kind is not None:
                mapped = map_search_section(kind, source)
        else:
            mapped = map_search_section(kind or "soft", source)
        ctx.add_warning(mapped.warning)

        searched_at = None
        raw_date = group.value("date", "searched_at", "search_date")
        if raw_date:
            searched_at = parse_date(raw_date)
            if searched_at is None:
                ctx.warn(
                    "searches",
                    "searched_at",
                    f'Could not parse search date "{raw_date}"',
                    raw_value=raw_date,
                    source_system=source,
                )

        company = group.value(*_COMPANY_FIELDS)
        organisation_id = None
        if company:
            organisation_id = ctx.register_organisation(company, "searcher", import_id)
        else:
            ctx.warn(
                "searches",
                "organisation",
                "Search has no organisation name",
                source_system=source,
            )

        input_address_id = None
        raw_address = group.value("address", "input_address")
        if raw_address:
            input_address_id = ctx.register_address(raw_address)
            ctx.associate_address(input_address_id, import_id, "search_input")

        ctx.searches.append(
            SearchRecord(
                search_id=ctx.next_id("search"),
                searched_at=searched_at,
                organisation_id=organisation_id,
                organisation_name_raw=company,
                search_type=mapped.value.search_type,
                visibility=mapped.value.visibility,
                input_name=group.value("name", "input_name"),
                input_address_id=input_address_id,
                purpose_text=purpose,
                source_import_id=import_id,
            )
        )
