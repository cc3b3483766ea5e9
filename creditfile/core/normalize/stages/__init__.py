"""Per-domain entity builders, in the order the engine runs them."""

from typing import Callable, List, Tuple

from creditfile.core.normalize.context import NormalizationContext

from .addresses import build_addresses
from .assemble import assemble_credit_file, summarize
from .credit_scores import build_credit_scores
from .electoral_roll import build_electoral_roll
from .financial_associates import build_financial_associates
from .fraud_markers import build_fraud_markers
from .imports import build_import_batches
from .public_records import build_notices, build_public_records
from .searches import build_searches
from .subject import build_subject
from .tradelines import build_tradelines

# Addresses precede electoral roll (which looks addresses up) and every stage
# that adds its own address mentions.
STAGES: List[Tuple[str, Callable[[NormalizationContext], None]]] = [
    ("import_batches", build_import_batches),
    ("subject", build_subject),
    ("addresses", build_addresses),
    ("electoral_roll", build_electoral_roll),
    ("tradelines", build_tradelines),
    ("searches", build_searches),
    ("credit_scores", build_credit_scores),
    ("financial_associates", build_financial_associates),
    ("public_records", build_public_records),
    ("fraud_markers", build_fraud_markers),
    ("notices_of_correction", build_notices),
]

__all__ = ["STAGES", "assemble_credit_file", "summarize"]
