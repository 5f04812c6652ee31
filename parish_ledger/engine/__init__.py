"""
Ledger Computation Engine

Pure functions over snapshots: no I/O, no logging, no shared state.
Every result is recomputed from the arguments on each call.
"""

from parish_ledger.engine.aggregation import (
    available_years,
    summarize_periods,
    totals_by_main_category,
    week_start,
)
from parish_ledger.engine.balance import net_total, running_balances, split_balance
from parish_ledger.engine.category_codec import (
    decode,
    encode,
    main_category,
    render,
    rename_main_category,
    rename_sub_category,
)
from parish_ledger.engine.collation import compare_korean, korean_sort_key
from parish_ledger.engine.hangul import (
    CONSONANTS,
    OTHER_BUCKET,
    filter_by_initial,
    group_by_initial,
    initial_consonant,
)
from parish_ledger.engine.ordering import (
    canonical_order,
    member_display_name,
    simple_order,
)

__all__ = [
    # Aggregation
    "available_years",
    "summarize_periods",
    "totals_by_main_category",
    "week_start",
    # Balance
    "net_total",
    "running_balances",
    "split_balance",
    # Category codec
    "decode",
    "encode",
    "main_category",
    "render",
    "rename_main_category",
    "rename_sub_category",
    # Collation
    "compare_korean",
    "korean_sort_key",
    # Hangul
    "CONSONANTS",
    "OTHER_BUCKET",
    "filter_by_initial",
    "group_by_initial",
    "initial_consonant",
    # Ordering
    "canonical_order",
    "member_display_name",
    "simple_order",
]
