"""
Single-selection state machine.

States are ``Empty`` (no selection) and ``Committed`` (one run). ``toggle``
is the only transition:

* clicking a slot inside the committed run clears it;
* clicking elsewhere replaces it with the run resolved from the click;
* a click that cannot resolve leaves the state untouched and is reported
  as blocked. Text that is not a generated slot always counts as such.

Every machine starts empty.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .models import Selection
from .range_resolver import RangeResolver

logger = logging.getLogger(__name__)


class ToggleOutcome(str, Enum):
    SELECTED = "selected"
    CLEARED = "cleared"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class ToggleResult:
    outcome: ToggleOutcome
    selection: Selection | None

    @property
    def blocked(self) -> bool:
        return self.outcome is ToggleOutcome.BLOCKED


class SelectionStateMachine:
    """Owns the one committed selection of a slot schedule."""

    def __init__(self, resolver: RangeResolver):
        self._resolver = resolver
        self._selection: Selection | None = None

    @property
    def selection(self) -> Selection | None:
        return self._selection

    @property
    def is_empty(self) -> bool:
        return self._selection is None

    def toggle(self, clicked_label: str) -> ToggleResult:
        """Apply a click on ``clicked_label`` and report what happened."""
        current = self._selection
        clicked = self._resolver.schedule.get(clicked_label)

        if current is not None and clicked is not None and current.contains(clicked.label):
            self._selection = None
            return ToggleResult(outcome=ToggleOutcome.CLEARED, selection=None)

        run = self._resolver.resolve(clicked_label)
        if run is None:
            logger.warning(
                "Selection blocked at %s: range would overlap or skip over an occupied slot",
                clicked_label,
            )
            return ToggleResult(outcome=ToggleOutcome.BLOCKED, selection=current)

        self._selection = run.to_selection()
        return ToggleResult(outcome=ToggleOutcome.SELECTED, selection=self._selection)
