from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.config import settings
from core.dependencies import get_inventory_controller, http_error
from core.errors import WorkflowError
from schemas.inventory import (
    CodeBlur,
    DeletionRead,
    DraftPatch,
    IntakeDraftRead,
    IntakeRead,
    InventorySnapshot,
    MergeRead,
    TypedText,
)
from schemas.stock import StockSummary
from services.stock import stock_summary, to_read
from workflow import events as ev
from workflow.controller import InventoryController
from workflow.state import InventoryState

router = APIRouter()


def _serialize_state(state: InventoryState) -> InventorySnapshot:
    threshold = settings.low_stock_threshold
    summary = stock_summary(state.catalog, threshold)

    intake = None
    if state.intake is not None:
        d = state.intake.draft
        intake = IntakeRead(
            draft=IntakeDraftRead(
                code=d.code,
                description=d.description,
                brand=d.brand,
                incoming_quantity=d.incoming_quantity,
                unit_cost=d.unit_cost,
                unit=d.unit,
            ),
            feedback_active=state.intake.feedback_active,
        )

    merge = None
    if state.merge is not None:
        m = state.merge
        merge = MergeRead(
            existing=to_read(m.existing, threshold),
            current_quantity=m.existing.current_quantity,
            incoming_quantity=m.incoming.incoming_quantity,
            new_quantity=m.new_quantity,
            description=m.incoming.description,
            brand=m.incoming.brand,
            unit_cost=m.incoming.unit_cost,
        )

    deletion = state.deletion
    return InventorySnapshot(
        loading=state.loading,
        catalog=summary.items,
        item_count=summary.item_count,
        total_value=summary.total_value,
        low_stock_count=summary.low_stock_count,
        intake=intake,
        merge=merge,
        deletion=DeletionRead(
            stage=deletion.stage.value,
            target=to_read(deletion.target, threshold) if deletion.target else None,
            typed_text=deletion.typed_text,
            can_confirm=deletion.can_confirm,
        ),
        busy=sorted(state.in_flight),
        error=state.error,
        notice=state.notice,
    )


async def _dispatch(controller: InventoryController, event: object) -> InventorySnapshot:
    try:
        state = await controller.dispatch(event)
    except WorkflowError as e:
        raise http_error(e)
    return _serialize_state(state)


@router.get("/", response_model=InventorySnapshot)
async def get_inventory(controller: InventoryController = Depends(get_inventory_controller)):
    """Current state of the inventory screen"""
    return _serialize_state(controller.state)


@router.post("/refresh", response_model=InventorySnapshot)
async def refresh_inventory(controller: InventoryController = Depends(get_inventory_controller)):
    return _serialize_state(await controller.refresh())


@router.get("/summary", response_model=StockSummary)
async def get_stock_summary(
    q: Optional[str] = Query(None, description="code, description or brand"),
    controller: InventoryController = Depends(get_inventory_controller),
):
    return stock_summary(controller.state.catalog, settings.low_stock_threshold, q)


# Intake

@router.post("/intake", response_model=InventorySnapshot)
async def open_intake(controller: InventoryController = Depends(get_inventory_controller)):
    return await _dispatch(controller, ev.OpenIntake())


@router.delete("/intake", response_model=InventorySnapshot)
async def close_intake(controller: InventoryController = Depends(get_inventory_controller)):
    return await _dispatch(controller, ev.CloseIntake())


@router.patch("/intake/draft", response_model=InventorySnapshot)
async def set_draft_fields(payload: DraftPatch, controller: InventoryController = Depends(get_inventory_controller)):
    """Set one or more draft fields; a rejected field leaves the draft unchanged"""
    if not payload.fields:
        raise HTTPException(status_code=422, detail="fields is required")
    return await _dispatch(controller, ev.SetDraftFields(values=dict(payload.fields)))


@router.post("/intake/code-blur", response_model=InventorySnapshot)
async def code_blur(payload: CodeBlur, controller: InventoryController = Depends(get_inventory_controller)):
    """Auto-fill the draft from an existing item with the same code"""
    return await _dispatch(controller, ev.CodeBlurred(code=payload.code))


@router.post("/intake/submit", response_model=InventorySnapshot)
async def submit_intake(controller: InventoryController = Depends(get_inventory_controller)):
    """Create the item, or open the merge confirmation when the code exists"""
    return await _dispatch(controller, ev.SubmitIntake())


# Merge confirmation

@router.post("/merge/confirm", response_model=InventorySnapshot)
async def confirm_merge(controller: InventoryController = Depends(get_inventory_controller)):
    return await _dispatch(controller, ev.ConfirmMerge())


@router.post("/merge/cancel", response_model=InventorySnapshot)
async def cancel_merge(controller: InventoryController = Depends(get_inventory_controller)):
    """Back to the intake form ("Revisar") with the draft kept"""
    return await _dispatch(controller, ev.CancelMerge())


# Deletion guard

@router.post("/deletion/proceed", response_model=InventorySnapshot)
async def proceed_delete(controller: InventoryController = Depends(get_inventory_controller)):
    return await _dispatch(controller, ev.ProceedDelete())


@router.put("/deletion/typed-text", response_model=InventorySnapshot)
async def set_typed_text(payload: TypedText, controller: InventoryController = Depends(get_inventory_controller)):
    return await _dispatch(controller, ev.SetTypedText(text=payload.text))


@router.post("/deletion/confirm", response_model=InventorySnapshot)
async def confirm_delete(controller: InventoryController = Depends(get_inventory_controller)):
    """Permanently delete the target; the typed text must equal its description"""
    return await _dispatch(controller, ev.ConfirmDelete())


@router.delete("/deletion", response_model=InventorySnapshot)
async def cancel_delete(controller: InventoryController = Depends(get_inventory_controller)):
    return await _dispatch(controller, ev.CancelDelete())


@router.post("/deletion/{item_id}", response_model=InventorySnapshot)
async def open_delete(item_id: int, controller: InventoryController = Depends(get_inventory_controller)):
    return await _dispatch(controller, ev.OpenDelete(item_id=item_id))
