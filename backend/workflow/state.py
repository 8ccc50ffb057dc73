"""
Inventory screen state.

One immutable ``InventoryState`` per screen; every change goes through
``workflow.transitions.transition`` which returns a new state.
"""

import enum
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, FrozenSet, Optional, Tuple

from schemas.stock import DEFAULT_UNIT, IntakeEntry, StockItem


class DeletionStage(str, enum.Enum):
    CLOSED = "CLOSED"
    AWAITING_INITIAL_CONFIRM = "AWAITING_INITIAL_CONFIRM"
    AWAITING_TYPED_CONFIRM = "AWAITING_TYPED_CONFIRM"


# Names used in InventoryState.in_flight
ACTION_SUBMIT = "submit"
ACTION_MERGE = "merge"
ACTION_DELETE = "delete"


@dataclass(frozen=True)
class IntakeDraft:
    """Raw operator input; only validated when submitted."""

    code: str = ""
    description: str = ""
    brand: str = ""
    incoming_quantity: Any = 0
    unit_cost: Any = 0
    unit: str = DEFAULT_UNIT

    EDITABLE = ("code", "description", "brand", "incoming_quantity", "unit_cost", "unit")


@dataclass(frozen=True)
class IntakeState:
    draft: IntakeDraft = field(default_factory=IntakeDraft)
    feedback_active: bool = False
    # bumped on every auto-fill so a stale timer cannot clear a newer flag
    feedback_token: int = 0


@dataclass(frozen=True)
class MergeState:
    existing: StockItem
    incoming: IntakeEntry

    @property
    def new_quantity(self) -> Decimal:
        return self.existing.current_quantity + Decimal(self.incoming.incoming_quantity)

    def merged_item(self) -> StockItem:
        # stock is cumulative; descriptive fields take the latest entry
        return self.existing.model_copy(
            update={
                "current_quantity": self.new_quantity,
                "unit_cost": self.incoming.unit_cost,
                "description": self.incoming.description,
                "brand": self.incoming.brand,
            }
        )


@dataclass(frozen=True)
class DeletionState:
    stage: DeletionStage = DeletionStage.CLOSED
    target: Optional[StockItem] = None
    typed_text: str = ""

    @property
    def can_confirm(self) -> bool:
        return (
            self.stage is DeletionStage.AWAITING_TYPED_CONFIRM
            and self.target is not None
            and self.typed_text == self.target.description
        )


@dataclass(frozen=True)
class InventoryState:
    catalog: Tuple[StockItem, ...] = ()
    loading: bool = True
    intake: Optional[IntakeState] = None
    merge: Optional[MergeState] = None
    deletion: DeletionState = field(default_factory=DeletionState)
    in_flight: FrozenSet[str] = frozenset()
    error: Optional[str] = None
    notice: Optional[str] = None
