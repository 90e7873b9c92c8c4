"""
EvmTracker for earned value management figures.

All figures are computed on demand from the root task and the leaf statuses;
nothing is cached.
"""

import math

from pydantic import BaseModel

from wsb.managers.wsb_engine import WsbEngine
from wsb.models.store import TaskStore


class EvmSummary(BaseModel):
    """Project-level EVM figures."""

    planned_value: float
    actual_cost: float
    completion_percentage: float
    earned_value: float
    spi: float
    sv: float
    cpi: float
    cv: float


def _ratio(numerator: float, denominator: float) -> float:
    """Division that yields 0.0 where the quotient is undefined or NaN."""
    if denominator == 0.0:
        return 0.0
    quotient = numerator / denominator
    if math.isnan(quotient):
        return 0.0
    return quotient


class EvmTracker:
    """
    Computes EVM indicators for a project.

    Completion is measured over work packages (leaf tasks) only.
    """

    def __init__(self, engine: WsbEngine) -> None:
        """
        Initialize EvmTracker.

        Args:
            engine: WsbEngine used to read the root and list work packages.
        """
        self.engine = engine

    def completion_percentage(self, store: TaskStore) -> float:
        """Fraction of work packages that are done, between 0.0 and 1.0."""
        leaves = self.engine.tasks(store)
        done = self.engine.done_tasks(store)
        return _ratio(len(done), len(leaves))

    def earned_value(self, store: TaskStore) -> float:
        return self.engine.planned_value(store) * self.completion_percentage(store)

    def spi(self, store: TaskStore) -> float:
        """Schedule performance index, 0.0 while nothing is planned."""
        return _ratio(self.earned_value(store), self.engine.planned_value(store))

    def sv(self, store: TaskStore) -> float:
        """Schedule variance."""
        return self.earned_value(store) - self.engine.planned_value(store)

    def cpi(self, store: TaskStore) -> float:
        """Cost performance index, 0.0 while nothing is spent."""
        return _ratio(self.earned_value(store), self.engine.actual_cost(store))

    def cv(self, store: TaskStore) -> float:
        """Cost variance."""
        return self.earned_value(store) - self.engine.actual_cost(store)

    def summary(self, store: TaskStore) -> EvmSummary:
        return EvmSummary(
            planned_value=self.engine.planned_value(store),
            actual_cost=self.engine.actual_cost(store),
            completion_percentage=self.completion_percentage(store),
            earned_value=self.earned_value(store),
            spi=self.spi(store),
            sv=self.sv(store),
            cpi=self.cpi(store),
            cv=self.cv(store),
        )
