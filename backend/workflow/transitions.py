"""
Pure transition function for the inventory screen.

    new_state, effects = transition(state, event)

No I/O happens here: network calls and timers are returned as effects and
run by ``workflow.controller.InventoryController``. Intents that are not
allowed raise a ``WorkflowError`` and leave the caller's state untouched.
"""

import logging
from dataclasses import asdict, replace
from typing import Callable, Dict, List, Tuple

from pydantic import ValidationError as SchemaValidationError

from core.errors import (
    ActionInProgressError,
    ConfirmationMismatchError,
    InvalidTransitionError,
    ValidationError,
)
from schemas.stock import IntakeEntry
from workflow import events as ev
from workflow import messages
from workflow.lookup import find_by_code
from workflow.state import (
    ACTION_DELETE,
    ACTION_MERGE,
    ACTION_SUBMIT,
    DeletionStage,
    DeletionState,
    IntakeDraft,
    IntakeState,
    InventoryState,
    MergeState,
)

logger = logging.getLogger(__name__)

Result = Tuple[InventoryState, List[object]]


def validate_draft(draft: IntakeDraft) -> IntakeEntry:
    """Gate applied before any create/merge: required fields, quantity, cost."""
    try:
        return IntakeEntry(**asdict(draft))
    except SchemaValidationError as e:
        fields: Dict[str, str] = {}
        for err in e.errors():
            name = ".".join(str(p) for p in err.get("loc", ())) or "draft"
            fields[name] = err.get("msg", "").removeprefix("Value error, ")
        raise ValidationError(fields=fields)


def _start(state: InventoryState, action: str) -> InventoryState:
    if action in state.in_flight:
        raise ActionInProgressError(action=action)
    return replace(state, in_flight=state.in_flight | {action})


def _finish(state: InventoryState, action: str) -> InventoryState:
    return replace(state, in_flight=state.in_flight - {action})


def _require_intake(state: InventoryState) -> IntakeState:
    if state.intake is None:
        raise InvalidTransitionError("A entrada de estoque não está aberta")
    return state.intake


# Intake

def _open_intake(state: InventoryState, event: ev.OpenIntake) -> Result:
    if state.intake is not None:
        return state, []
    return replace(state, intake=IntakeState()), []


def _close_intake(state: InventoryState, event: ev.CloseIntake) -> Result:
    return replace(state, intake=None, merge=None), []


def _set_draft_fields(state: InventoryState, event: ev.SetDraftFields) -> Result:
    intake = _require_intake(state)
    if state.merge is not None:
        raise InvalidTransitionError("Revise a entrada antes de alterar o formulário")
    unknown = {name: "unknown field" for name in event.values if name not in IntakeDraft.EDITABLE}
    if unknown:
        raise ValidationError(fields=unknown)
    changes = {}
    for name, value in event.values.items():
        if name in ("code", "description", "brand", "unit"):
            value = "" if value is None else str(value)
        changes[name] = value
    draft = replace(intake.draft, **changes)
    return replace(state, intake=replace(intake, draft=draft)), []


def _set_draft_field(state: InventoryState, event: ev.SetDraftField) -> Result:
    return _set_draft_fields(state, ev.SetDraftFields(values={event.name: event.value}))


def _code_blurred(state: InventoryState, event: ev.CodeBlurred) -> Result:
    intake = _require_intake(state)
    draft = replace(intake.draft, code=event.code or "")
    match = find_by_code(state.catalog, draft.code)
    if match is None:
        return replace(state, intake=replace(intake, draft=draft)), []

    # incoming_quantity is operator input and is never auto-filled
    draft = replace(
        draft,
        description=match.description,
        brand=match.brand,
        unit_cost=match.unit_cost,
    )
    token = intake.feedback_token + 1
    intake = replace(intake, draft=draft, feedback_active=True, feedback_token=token)
    return replace(state, intake=intake), [ev.ScheduleFeedbackClear(token=token)]


def _feedback_expired(state: InventoryState, event: ev.FeedbackExpired) -> Result:
    intake = state.intake
    if intake is None or intake.feedback_token != event.token:
        return state, []
    return replace(state, intake=replace(intake, feedback_active=False)), []


def _submit_intake(state: InventoryState, event: ev.SubmitIntake) -> Result:
    intake = _require_intake(state)
    if state.merge is not None:
        raise InvalidTransitionError("Confirme ou revise a entrada pendente")
    if ACTION_SUBMIT in state.in_flight:
        raise ActionInProgressError(action=ACTION_SUBMIT)

    entry = validate_draft(intake.draft)
    # looked up again here: the code may have changed after the last blur
    existing = find_by_code(state.catalog, entry.code)
    if existing is not None:
        logger.info("intake code %s matches item %s, asking for merge", entry.code, existing.id)
        return replace(state, merge=MergeState(existing=existing, incoming=entry)), []

    state = _start(state, ACTION_SUBMIT)
    return state, [ev.CreateItem(item=entry.as_new_item())]


def _create_succeeded(state: InventoryState, event: ev.CreateSucceeded) -> Result:
    state = _finish(state, ACTION_SUBMIT)
    state = replace(state, intake=None, merge=None, notice=messages.ITEM_CREATED)
    return state, [ev.LoadCatalog()]


def _create_failed(state: InventoryState, event: ev.CreateFailed) -> Result:
    return replace(_finish(state, ACTION_SUBMIT), error=event.message), []


# Merge confirmation

def _confirm_merge(state: InventoryState, event: ev.ConfirmMerge) -> Result:
    merge = state.merge
    if merge is None:
        raise InvalidTransitionError("Não há entrada pendente de confirmação")
    if merge.existing.id is None:
        raise InvalidTransitionError(messages.UNKNOWN_ITEM)
    state = _start(state, ACTION_MERGE)
    return state, [ev.UpdateItem(item_id=merge.existing.id, item=merge.merged_item())]


def _cancel_merge(state: InventoryState, event: ev.CancelMerge) -> Result:
    if state.merge is None:
        raise InvalidTransitionError("Não há entrada pendente de confirmação")
    # back to the intake form, draft untouched
    return replace(state, merge=None), []


def _update_succeeded(state: InventoryState, event: ev.UpdateSucceeded) -> Result:
    state = _finish(state, ACTION_MERGE)
    state = replace(state, intake=None, merge=None, notice=messages.STOCK_MERGED)
    return state, [ev.LoadCatalog()]


def _update_failed(state: InventoryState, event: ev.UpdateFailed) -> Result:
    return replace(_finish(state, ACTION_MERGE), error=event.message), []


# Deletion guard

def _require_stage(state: InventoryState, stage: DeletionStage) -> DeletionState:
    if state.deletion.stage is not stage:
        raise InvalidTransitionError(
            expected=stage.value,
            actual=state.deletion.stage.value,
        )
    return state.deletion


def _open_delete(state: InventoryState, event: ev.OpenDelete) -> Result:
    _require_stage(state, DeletionStage.CLOSED)
    target = next((i for i in state.catalog if i.id == event.item_id), None)
    if target is None:
        raise InvalidTransitionError(messages.UNKNOWN_ITEM, item_id=event.item_id)
    deletion = DeletionState(stage=DeletionStage.AWAITING_INITIAL_CONFIRM, target=target, typed_text="")
    return replace(state, deletion=deletion), []


def _proceed_delete(state: InventoryState, event: ev.ProceedDelete) -> Result:
    deletion = _require_stage(state, DeletionStage.AWAITING_INITIAL_CONFIRM)
    return replace(state, deletion=replace(deletion, stage=DeletionStage.AWAITING_TYPED_CONFIRM)), []


def _set_typed_text(state: InventoryState, event: ev.SetTypedText) -> Result:
    deletion = _require_stage(state, DeletionStage.AWAITING_TYPED_CONFIRM)
    # replaces, never appends (pasted text substitutes what was typed)
    return replace(state, deletion=replace(deletion, typed_text=event.text or "")), []


def _confirm_delete(state: InventoryState, event: ev.ConfirmDelete) -> Result:
    deletion = _require_stage(state, DeletionStage.AWAITING_TYPED_CONFIRM)
    if ACTION_DELETE in state.in_flight:
        raise ActionInProgressError(action=ACTION_DELETE)
    # exact, case-sensitive; re-checked here whatever the caller is
    if not deletion.can_confirm:
        logger.info("delete of item %s rejected: confirmation text mismatch", deletion.target.id)
        raise ConfirmationMismatchError(fields={"typed_text": "does not match the item description"})
    state = _start(state, ACTION_DELETE)
    return state, [ev.DeleteItem(item_id=deletion.target.id)]


def _cancel_delete(state: InventoryState, event: ev.CancelDelete) -> Result:
    return replace(state, deletion=DeletionState()), []


def _delete_succeeded(state: InventoryState, event: ev.DeleteSucceeded) -> Result:
    state = replace(_finish(state, ACTION_DELETE), notice=messages.ITEM_DELETED)
    target = state.deletion.target
    if target is not None and target.id == event.item_id:
        state = replace(state, deletion=DeletionState())
    return state, [ev.LoadCatalog()]


def _delete_failed(state: InventoryState, event: ev.DeleteFailed) -> Result:
    # stage and typed text are kept so the operator can retry after reading
    return replace(_finish(state, ACTION_DELETE), error=event.message), []


# Catalog

def _catalog_loaded(state: InventoryState, event: ev.CatalogLoaded) -> Result:
    return replace(state, catalog=tuple(event.items), loading=False), []


def _catalog_load_failed(state: InventoryState, event: ev.CatalogLoadFailed) -> Result:
    return replace(state, loading=False, error=event.message), []


_INTENTS: Dict[type, Callable[..., Result]] = {
    ev.OpenIntake: _open_intake,
    ev.CloseIntake: _close_intake,
    ev.SetDraftField: _set_draft_field,
    ev.SetDraftFields: _set_draft_fields,
    ev.CodeBlurred: _code_blurred,
    ev.SubmitIntake: _submit_intake,
    ev.ConfirmMerge: _confirm_merge,
    ev.CancelMerge: _cancel_merge,
    ev.OpenDelete: _open_delete,
    ev.ProceedDelete: _proceed_delete,
    ev.SetTypedText: _set_typed_text,
    ev.ConfirmDelete: _confirm_delete,
    ev.CancelDelete: _cancel_delete,
}

_COMPLETIONS: Dict[type, Callable[..., Result]] = {
    ev.CatalogLoaded: _catalog_loaded,
    ev.CatalogLoadFailed: _catalog_load_failed,
    ev.CreateSucceeded: _create_succeeded,
    ev.CreateFailed: _create_failed,
    ev.UpdateSucceeded: _update_succeeded,
    ev.UpdateFailed: _update_failed,
    ev.DeleteSucceeded: _delete_succeeded,
    ev.DeleteFailed: _delete_failed,
    ev.FeedbackExpired: _feedback_expired,
}


def transition(state: InventoryState, event: object) -> Result:
    handler = _INTENTS.get(type(event))
    if handler is not None:
        # a new operator action dismisses the previous message
        return handler(replace(state, error=None, notice=None), event)
    handler = _COMPLETIONS.get(type(event))
    if handler is None:
        raise TypeError(f"unknown inventory event: {event!r}")
    return handler(state, event)
