"""Per day-plan macro targets."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from diet_planner.domain import advisor, targets
from diet_planner.domain.advisor import MacroSuggestion
from diet_planner.domain.energy import EnergyResult
from diet_planner.domain.precision import Number
from diet_planner.domain.targets import Macro, MacroTarget, MacroTargetChange

_logger = logging.getLogger(__name__)

CommitCallback = Callable[[MacroTargetChange], None]


@dataclass
class DayPlanTargetService:
    """Holds one MacroTarget per day-plan and applies edits atomically.

    Targets are created zeroed on first access. Each edit runs a pure
    transition and replaces the stored value in one step under a lock, then
    notifies subscribers with the before/after pair.
    """

    _targets: dict[str, MacroTarget] = field(default_factory=dict)
    _subscribers: list[CommitCallback] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def subscribe(self, callback: CommitCallback) -> None:
        """Register a callback invoked after every committed edit."""
        self._subscribers.append(callback)

    def get(self, day_plan_id: str) -> MacroTarget:
        """Return the day-plan's targets, creating zeroed ones if needed."""
        with self._lock:
            return self._targets.setdefault(day_plan_id, MacroTarget())

    def set_calories(self, day_plan_id: str, calories: Number) -> MacroTarget:
        return self._commit(day_plan_id, lambda t: targets.set_calories(t, calories))

    def set_percentage(
        self, day_plan_id: str, macro: Macro, percentage: Number
    ) -> MacroTarget:
        return self._commit(
            day_plan_id, lambda t: targets.set_macro_percentage(t, macro, percentage)
        )

    def set_grams(self, day_plan_id: str, macro: Macro, grams: Number) -> MacroTarget:
        return self._commit(
            day_plan_id, lambda t: targets.set_macro_grams(t, macro, grams)
        )

    def set_fiber(self, day_plan_id: str, grams: Number) -> MacroTarget:
        return self._commit(day_plan_id, lambda t: targets.set_fiber_grams(t, grams))

    def seed_from_energy(self, day_plan_id: str, energy: EnergyResult) -> MacroTarget:
        """Use TDEE as the calorie target, keeping any gram targets."""
        return self.set_calories(day_plan_id, energy.tdee)

    def suggestions(self, day_plan_id: str) -> list[MacroSuggestion]:
        """Return gram suggestions that would close the calorie gap."""
        return advisor.suggestions(self.get(day_plan_id))

    def apply_suggestion(self, day_plan_id: str, macro: Macro) -> MacroTarget:
        """Close the current calorie gap through ``macro`` alone."""

        def transition(target: MacroTarget) -> MacroTarget:
            if target.calories <= 0:
                return target
            delta = advisor.suggest_gram_delta(advisor.missing_calories(target), macro)
            return advisor.apply_suggestion(target, macro, delta)

        return self._commit(day_plan_id, transition)

    def remove(self, day_plan_id: str) -> bool:
        """Drop a day-plan's targets; returns False when none were stored."""
        with self._lock:
            return self._targets.pop(day_plan_id, None) is not None

    def _commit(
        self, day_plan_id: str, transition: Callable[[MacroTarget], MacroTarget]
    ) -> MacroTarget:
        with self._lock:
            before = self._targets.get(day_plan_id, MacroTarget())
            after = transition(before)
            self._targets[day_plan_id] = after
        change = MacroTargetChange(day_plan_id=day_plan_id, before=before, after=after)
        if change.changed:
            for callback in self._subscribers:
                try:
                    callback(change)
                except Exception:
                    _logger.exception(
                        "Target commit callback failed for day-plan %s", day_plan_id
                    )
        return after
