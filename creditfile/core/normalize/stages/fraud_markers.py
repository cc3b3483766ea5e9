from __future__ import annotations

from creditfile.core.mapping.mappers import (
    map_fraud_address_scope,
    map_fraud_marker_type,
    map_fraud_scheme,
)
from creditfile.core.models.credit_file import FraudMarker
from creditfile.core.normalize.context import NormalizationContext
from creditfile.core.normalize.parsers import parse_date


def build_fraud_markers(ctx: NormalizationContext) -> None:
    for group in ctx.groups("fraud_markers"):
        raw_type = group.value("marker_type", "type", "fraud-marker")
        raw_scheme = group.value("scheme")
        if raw_type is None and raw_scheme is None:
            continue
        source = group.source_system
        import_id = ctx.import_id_for(source)

        scheme = map_fraud_scheme(raw_scheme or "cifas", source)
        marker_type = map_fraud_marker_type(raw_type or "", source)
        ctx.add_warning(scheme.warning)
        ctx.add_warning(marker_type.warning)

        scope = None
        raw_scope = group.value("address_scope", "scope")
        if raw_scope:
            mapped_scope = map_fraud_address_scope(raw_scope, source)
            ctx.add_warning(mapped_scope.warning)
            scope = mapped_scope.value

        dates = {}
        for field_name, names in (
            ("placed_at", ("placed_at", "date", "date_placed")),
            ("expires_at", ("expires_at", "expiry", "expiry_date")),
        ):
            raw = group.value(*names)
            dates[field_name] = parse_date(raw) if raw else None
            if raw and dates[field_name] is None:
                ctx.warn(
                    "fraud_markers",
                    field_name,
                    f'Could not parse {field_name} date "{raw}"',
                    raw_value=raw,
                    source_system=source,
                )

        address_id = None
        raw_address = group.value("address")
        if raw_address:
            address_id = ctx.register_address(raw_address)
            ctx.associate_address(address_id, import_id, "other")

        ctx.fraud_markers.append(
            FraudMarker(
                fraud_marker_id=ctx.next_id("fm"),
                scheme=scheme.value,
                marker_type=marker_type.value,
                placed_at=dates["placed_at"],
                expires_at=dates["expires_at"],
                address_scope=scope,
                address_id=address_id,
                source_import_id=import_id,
            )
        )
