"""Portfolio-level drift classification."""

import logging
from decimal import Decimal
from typing import Mapping, Optional

from .allocation import (
    ZERO,
    allocation_total,
    compute_deviations,
    normalize_allocation,
    validate_allocation,
)
from .config import (
    ATTENTION_THRESHOLD,
    NEEDED_THRESHOLD,
    OPTIONAL_THRESHOLD,
    URGENT_THRESHOLD,
    AnalysisStatus,
)
from .models import AnalysisResult, ValidationWarning

logger = logging.getLogger(__name__)


def classify(max_deviation: Decimal) -> AnalysisStatus:
    """Map the largest absolute deviation to a status.

    Boundaries are exclusive: exactly 10.0 is OPTIONAL, 10.01 is NEEDED.
    """
    if max_deviation > URGENT_THRESHOLD:
        return AnalysisStatus.URGENT
    if max_deviation > NEEDED_THRESHOLD:
        return AnalysisStatus.NEEDED
    if max_deviation > OPTIONAL_THRESHOLD:
        return AnalysisStatus.OPTIONAL
    return AnalysisStatus.BALANCED


def analyze(
    current: Mapping[str, object],
    target: Mapping[str, object],
    attention_threshold: Decimal = ATTENTION_THRESHOLD,
) -> AnalysisResult:
    """Compare a current allocation with a target allocation.

    Both maps are percentage weights keyed by symbol. Malformed input
    (totals off 100%, negative weights, symbols held but not targeted) is
    reported in ``warnings`` rather than rejected.

    Args:
        current: Current weights by symbol.
        target: Target weights by symbol; should sum to 100.
        attention_threshold: ``needs_attention`` is set when the max
            deviation is strictly above this value.

    Returns:
        AnalysisResult with deviations sorted by |deviation| descending.
    """
    current_map, current_warnings = normalize_allocation(current)
    target_map, target_warnings = normalize_allocation(target)

    warnings: list[ValidationWarning] = [*current_warnings, *target_warnings]
    warnings += validate_allocation(current_map, expect_total=False)
    warnings += validate_allocation(target_map, expect_total=True)
    warnings += [
        ValidationWarning(
            "UNKNOWN_SYMBOL",
            f"{symbol} is held but not in the target allocation; treated as 0% target",
            symbol,
        )
        for symbol in current_map
        if symbol not in target_map
    ]

    entries = compute_deviations(current_map, target_map)

    max_deviation = entries[0].abs_deviation if entries else ZERO
    max_symbol: Optional[str] = entries[0].symbol if entries else None
    status = classify(max_deviation)

    for warning in warnings:
        logger.warning("Allocation warning: %s", warning.message)
    logger.debug("Max deviation %s on %s (%s)", max_deviation, max_symbol, status.value)

    return AnalysisResult(
        current_allocation=current_map,
        target_allocation=target_map,
        entries=tuple(entries),
        max_deviation=max_deviation,
        max_deviation_symbol=max_symbol,
        needs_attention=max_deviation > attention_threshold,
        status=status,
        target_total=allocation_total(target_map),
        warnings=tuple(warnings),
    )
