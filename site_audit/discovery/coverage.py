# File: site_audit/discovery/coverage.py
"""site_audit.discovery.coverage: приблизительная оценка покрытия сайта выборкой."""

from __future__ import annotations

MIN_ASSUMED_SITE_SIZE = 20
SITE_SIZE_FACTOR = 1.5
LARGE_SELECTION = 40
LARGE_SELECTION_FLOOR = 75


def estimate_coverage(selected_count: int) -> int:
    """Оценка (в процентах) доли реального сайта, которую покрывает выборка.

    Только для отчётов: на планирование аудита не влияет.
    """
    if selected_count <= 0:
        return 0
    assumed_total = max(MIN_ASSUMED_SITE_SIZE, selected_count * SITE_SIZE_FACTOR)
    coverage = min(100, round(selected_count / assumed_total * 100))
    if selected_count > LARGE_SELECTION:
        coverage = max(coverage, LARGE_SELECTION_FLOOR)
    return coverage
