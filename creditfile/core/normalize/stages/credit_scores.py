from __future__ import annotations

from creditfile.core.models.credit_file import CreditScore
from creditfile.core.normalize.context import NormalizationContext
from creditfile.core.normalize.parsers import parse_date, parse_int
from creditfile.core.taxonomy import COMPOSITE_KEY


def build_credit_scores(ctx: NormalizationContext) -> None:
    """Scores, with the provider's published scale from the mapping rules.

    Untagged scores are the broker's own composite score.
    """

    calculated_at = None
    if ctx.page_info.report_date:
        calculated_at = parse_date(ctx.page_info.report_date)

    for group in ctx.groups("credit_scores"):
        raw_score = group.value("score", "score_value")
        if raw_score is None:
            continue
        source = group.source_system

        value = parse_int(raw_score.replace(",", ""))
        if value is None:
            ctx.warn(
                "credit_scores",
                "score",
                f'Could not parse score value "{raw_score}"',
                raw_value=raw_score,
                source_system=source,
            )
            continue

        scale = ctx.rules.score_ranges.get(source or COMPOSITE_KEY)
        name = group.value("score_name", "provider")
        if name is None and scale is not None:
            name = scale.name
        if scale is not None and not scale.minimum <= value <= scale.maximum:
            ctx.warn(
                "credit_scores",
                "score",
                f"Score {value} outside the {scale.minimum}-{scale.maximum} range for {name}",
                raw_value=raw_score,
                source_system=source,
            )

        ctx.credit_scores.append(
            CreditScore(
                score_id=ctx.next_id("score"),
                score_type="credit_score",
                score_name=name,
                score_value=value,
                score_min=scale.minimum if scale is not None else None,
                score_max=scale.maximum if scale is not None else None,
                calculated_at=calculated_at,
                source_import_id=ctx.import_id_for(source),
            )
        )
