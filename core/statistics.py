# =============================================================================
# core/statistics.py - Counting and frequency tables
# =============================================================================

from collections import Counter
from typing import Any, Callable, Iterable, List

from core.models import FrequencyRow


def format_percentage(count: int, denominator: int) -> str:
    """Render count/denominator as a percentage with two decimals"""
    if denominator == 0:
        return "0.00%"
    return f"{count / denominator:.2%}"


def count_where(records: Iterable[Any], predicate: Callable[[Any], bool]) -> int:
    """Count records satisfying predicate"""
    return sum(1 for record in records if predicate(record))


def frequency_table(values: Iterable[str]) -> List[FrequencyRow]:
    """
    Tally values into rows sorted by count descending.

    The denominator is the number of values tallied. Ties keep the order in
    which values were first seen, so output is stable for identical input.
    """
    counter = Counter(values)
    total = sum(counter.values())
    if total == 0:
        return []

    return [
        FrequencyRow(label=label, count=count, percentage=format_percentage(count, total))
        for label, count in counter.most_common()
    ]


def usage_table(counts: List[tuple], denominator: int) -> List[FrequencyRow]:
    """Build rows from precomputed (label, count) pairs against a shared denominator"""
    if denominator == 0:
        return []

    rows = [
        FrequencyRow(label=label, count=count, percentage=format_percentage(count, denominator))
        for label, count in counts
    ]
    return sorted(rows, key=lambda row: row.count, reverse=True)


def frequency_rows_to_dicts(rows: List[FrequencyRow], label_column: str) -> List[dict]:
    """Convert frequency rows to dictionaries for CSV output"""
    return [
        {label_column: row.label, 'Count': row.count, 'PercentUse': row.percentage}
        for row in rows
    ]
