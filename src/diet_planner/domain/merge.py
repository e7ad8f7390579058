"""Merge an optimization proposal into the current ingredient lines.

A proposal may only change quantities of matched products and append new
ones; it can never remove a line the user already has.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace

from diet_planner.domain.ingredients import IngredientLine, make_line, new_line_id
from diet_planner.domain.nutrition import Product
from diet_planner.domain.optimization import (
    MergeResult,
    OptimizationProposal,
    ProposalEntry,
)

_logger = logging.getLogger(__name__)


def merge_proposal(
    current: Sequence[IngredientLine],
    proposal: OptimizationProposal,
    products: Mapping[str, Product],
) -> MergeResult:
    """Reconcile ``proposal`` into ``current``; every line gets a fresh id."""
    by_product: dict[str, ProposalEntry] = {}
    for entry in proposal.entries:
        by_product.setdefault(entry.product_id, entry)

    merged: list[IngredientLine] = []
    untouched: list[str] = []
    for line in current:
        entry = by_product.get(line.product_id)
        if entry is None:
            untouched.append(line.product_id)
            merged.append(_with_fresh_id(line))
            continue
        merged.append(
            make_line(
                line.product_id,
                entry.quantity,
                entry.unit,
                line.unit_weight,
                name=line.name,
                macros=entry.macros,
            )
        )

    current_ids = {line.product_id for line in current}
    skipped: list[str] = []
    for product_id, entry in by_product.items():
        if product_id in current_ids:
            continue
        product = products.get(product_id)
        if product is None:
            _logger.warning("Skipping proposed product %s: not in catalog", product_id)
            skipped.append(product_id)
            continue
        merged.append(
            make_line(
                product_id,
                entry.quantity,
                entry.unit,
                product.unit_weight,
                name=entry.name or product.name,
                macros=entry.macros,
            )
        )

    if untouched:
        _logger.info("Proposal omitted %s current products, kept as is", len(untouched))
    return MergeResult(lines=merged, skipped=skipped, untouched=untouched)


def _with_fresh_id(line: IngredientLine) -> IngredientLine:
    return replace(line, id=new_line_id())
