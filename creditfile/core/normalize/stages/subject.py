"""Subject identity: subject id, legal name, aliases and dates of birth."""

from __future__ import annotations

from typing import Set

from creditfile.core.models.credit_file import DateOfBirthRecord, PersonName
from creditfile.core.normalize.context import NormalizationContext
from creditfile.core.normalize.ids import ID_PATTERN
from creditfile.core.normalize.parsers import parse_date

_SUBJECT_ID_FIELDS = ("subject_id", "subject-id")
_ALIAS_FIELDS = ("alias-name", "alias_name")
_DOB_FIELDS = ("date-of-birth", "date_of_birth", "dob")


def _fold(text: str) -> str:
    return " ".join(text.split()).casefold()


def build_subject(ctx: NormalizationContext) -> None:
    personal = ctx.groups("personal_info")

    for group in personal:
        subject_id = group.value(*_SUBJECT_ID_FIELDS)
        if not subject_id:
            continue
        if ID_PATTERN.match(subject_id):
            ctx.subject_id = subject_id
        else:
            ctx.warn(
                "subject",
                "subject_id",
                f'Invalid subject id "{subject_id}", using the configured default',
                raw_value=subject_id,
                source_system=group.source_system,
            )
        break
    if not ctx.subject_id:
        ctx.subject_id = ctx.config.default_subject_id

    seen_names: Set[str] = set()
    legal_name = (ctx.page_info.subject_name or "").strip()
    if legal_name:
        seen_names.add(_fold(legal_name))
        ctx.names.append(
            PersonName(
                name_id=ctx.next_id("name"),
                full_name=legal_name,
                name_type="legal",
                source_import_id=ctx.composite_import_id(),
            )
        )

    for group in personal:
        alias = group.value(*_ALIAS_FIELDS)
        if not alias or _fold(alias) in seen_names:
            continue
        seen_names.add(_fold(alias))
        ctx.names.append(
            PersonName(
                name_id=ctx.next_id("name"),
                full_name=alias,
                name_type="alias",
                source_import_id=ctx.import_id_for(group.source_system),
            )
        )

    seen_dobs: Set[str] = set()
    for group in personal + ctx.groups("tradelines", keep_ungrouped=False, report_dropped=False):
        raw = group.value(*_DOB_FIELDS)
        if not raw:
            continue
        dob = parse_date(raw)
        if dob is None:
            ctx.warn(
                "personal_info",
                "date_of_birth",
                f'Could not parse date of birth "{raw}"',
                raw_value=raw,
                source_system=group.source_system,
            )
            continue
        if dob in seen_dobs:
            continue
        seen_dobs.add(dob)
        ctx.dates_of_birth.append(
            DateOfBirthRecord(dob=dob, source_import_id=ctx.import_id_for(group.source_system))
        )
