"""Domain models for externally optimized ingredient proposals."""

from dataclasses import dataclass, field
from enum import Enum

from diet_planner.domain.ingredients import IngredientLine
from diet_planner.domain.nutrition import MacroTotals


class Feasibility(str, Enum):
    """Feasibility tier reported by the optimization service."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ProposalEntry:
    """One ingredient quantity suggested by the optimization service."""

    product_id: str
    quantity: float
    unit: str
    name: str | None = None
    macros: MacroTotals | None = None


@dataclass(frozen=True)
class OptimizationProposal:
    """Proposed ingredient set, possibly naming products not yet in the meal."""

    entries: list[ProposalEntry] = field(default_factory=list)


@dataclass(frozen=True)
class Achievability:
    """How reachable the requested targets are, as judged remotely."""

    overall_score: float
    feasibility: Feasibility
    main_challenges: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OptimizationResponse:
    """Proposal plus the narrative fields passed through untouched."""

    proposal: OptimizationProposal
    comment: str = ""
    achievability: Achievability | None = None


@dataclass(frozen=True)
class MergeResult:
    """Merged ingredient lines with bookkeeping about the proposal."""

    lines: list[IngredientLine]
    skipped: list[str] = field(default_factory=list)
    untouched: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OptimizationOutcome:
    """Merged lines, their new totals and the passed-through narrative."""

    merge: MergeResult
    totals: MacroTotals
    previous_totals: MacroTotals
    comment: str
    achievability: Achievability | None
