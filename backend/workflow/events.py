"""Events fed into the inventory workflow and effects it asks the controller to run."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from schemas.stock import StockItem


# Operator intents

@dataclass(frozen=True)
class OpenIntake:
    pass


@dataclass(frozen=True)
class CloseIntake:
    pass


@dataclass(frozen=True)
class SetDraftField:
    name: str
    value: Any


@dataclass(frozen=True)
class SetDraftFields:
    """Several draft fields applied together, or none of them."""

    values: Dict[str, Any]


@dataclass(frozen=True)
class CodeBlurred:
    code: str


@dataclass(frozen=True)
class SubmitIntake:
    pass


@dataclass(frozen=True)
class ConfirmMerge:
    pass


@dataclass(frozen=True)
class CancelMerge:
    pass


@dataclass(frozen=True)
class OpenDelete:
    item_id: int


@dataclass(frozen=True)
class ProceedDelete:
    pass


@dataclass(frozen=True)
class SetTypedText:
    text: str


@dataclass(frozen=True)
class ConfirmDelete:
    pass


@dataclass(frozen=True)
class CancelDelete:
    pass


# Completions (collaborator answers, timers)

@dataclass(frozen=True)
class CatalogLoaded:
    items: Tuple[StockItem, ...]


@dataclass(frozen=True)
class CatalogLoadFailed:
    message: str


@dataclass(frozen=True)
class CreateSucceeded:
    item: Optional[StockItem] = None


@dataclass(frozen=True)
class CreateFailed:
    message: str


@dataclass(frozen=True)
class UpdateSucceeded:
    item: Optional[StockItem] = None


@dataclass(frozen=True)
class UpdateFailed:
    message: str


@dataclass(frozen=True)
class DeleteSucceeded:
    item_id: int


@dataclass(frozen=True)
class DeleteFailed:
    message: str


@dataclass(frozen=True)
class FeedbackExpired:
    token: int


# Effects

@dataclass(frozen=True)
class LoadCatalog:
    pass


@dataclass(frozen=True)
class CreateItem:
    item: StockItem


@dataclass(frozen=True)
class UpdateItem:
    item_id: int
    item: StockItem


@dataclass(frozen=True)
class DeleteItem:
    item_id: int


@dataclass(frozen=True)
class ScheduleFeedbackClear:
    token: int
