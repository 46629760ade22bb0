from __future__ import annotations

import logging
import math

from impulso.domain.entities import TaskMetrics
from impulso.domain.enums import MetricType, MetricValue

logger = logging.getLogger(__name__)

# Weights sum to 1.0.
WEIGHTS: dict[MetricType, float] = {
    MetricType.IMPACT: 0.30,
    MetricType.MOMENTUM: 0.25,
    MetricType.ALIGNMENT: 0.20,
    MetricType.FUN: 0.15,
    MetricType.EFFORT: 0.10,
}

NORMALIZED: dict[MetricValue, float] = {
    MetricValue.UNSET: 0.0,
    MetricValue.LOW: 0.33,
    MetricValue.MEDIUM: 0.66,
    MetricValue.HIGH: 1.0,
}

# Lower effort contributes more.
NORMALIZED_INVERTED: dict[MetricValue, float] = {
    MetricValue.UNSET: 1.0,
    MetricValue.LOW: 0.66,
    MetricValue.MEDIUM: 0.33,
    MetricValue.HIGH: 0.0,
}

INVERTED_METRICS = frozenset({MetricType.EFFORT})

MIN_SCORE = 0.0
MAX_SCORE = 100.0


class PriorityCalculator:
    def __init__(self, weights: dict[MetricType, float] | None = None) -> None:
        self._weights = dict(weights or WEIGHTS)

    def calculate_priority(self, metrics: TaskMetrics) -> float:
        total = 0.0
        for metric, weight in self._weights.items():
            value = metrics.value(metric)
            mapping = NORMALIZED_INVERTED if metric in INVERTED_METRICS else NORMALIZED
            component = mapping[value] * weight
            logger.debug("%s (%s): %s * %s = %s", metric.value, value.name, mapping[value], weight, component)
            total += component

        score = _round_half_up(total * 100)
        logger.debug("Priority total %s -> %s", total * 100, score)
        return min(max(score, MIN_SCORE), MAX_SCORE)


def _round_half_up(value: float, digits: int = 1) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


_DEFAULT = PriorityCalculator()


def calculate_priority(metrics: TaskMetrics) -> float:
    return _DEFAULT.calculate_priority(metrics)
