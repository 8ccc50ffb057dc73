import asyncio
import logging
from typing import List, Optional, Protocol

from core.errors import ConflictError, DataApiError, NotFoundError
from schemas.stock import StockItem
from workflow import events as ev
from workflow import messages
from workflow.state import InventoryState
from workflow.transitions import transition

logger = logging.getLogger(__name__)


class StockItemStore(Protocol):
    """The four calls the inventory screen needs from the data API."""

    async def list(self) -> List[StockItem]: ...

    async def create(self, item: StockItem) -> Optional[StockItem]: ...

    async def update(self, item_id: int, item: StockItem) -> Optional[StockItem]: ...

    async def delete(self, item_id: int) -> None: ...


class InventoryController:
    """
    Owns the state of one inventory screen.

    ``dispatch(event)`` applies the pure transition, then runs the effects it
    returned (data API calls, the auto-fill timer) and feeds their outcome
    back in. It returns once every call triggered by the event has answered.
    Local rejections (``WorkflowError``) propagate to the caller with the
    state unchanged; data API failures end up in ``state.error``.
    """

    def __init__(self, store: StockItemStore, *, feedback_seconds: float = 3.0):
        self.store = store
        self.feedback_seconds = feedback_seconds
        self.state = InventoryState()
        self._feedback_timer: Optional[asyncio.TimerHandle] = None

    async def refresh(self) -> InventoryState:
        await self._run([ev.LoadCatalog()])
        return self.state

    async def dispatch(self, event: object) -> InventoryState:
        self.state, effects = transition(self.state, event)
        await self._run(effects)
        return self.state

    def close(self) -> None:
        if self._feedback_timer is not None:
            self._feedback_timer.cancel()
            self._feedback_timer = None

    async def _run(self, effects: List[object]) -> None:
        pending = list(effects)
        while pending:
            outcome = await self._execute(pending.pop(0))
            if outcome is not None:
                # other intents may have landed while we awaited: use the live state
                self.state, more = transition(self.state, outcome)
                pending.extend(more)

    async def _execute(self, effect: object) -> Optional[object]:
        if isinstance(effect, ev.LoadCatalog):
            try:
                items = await self.store.list()
            except DataApiError as e:
                logger.warning("[inventory] catalog load failed: %r", e)
                return ev.CatalogLoadFailed(message=messages.CATALOG_FAILED)
            return ev.CatalogLoaded(items=tuple(items))

        if isinstance(effect, ev.CreateItem):
            try:
                created = await self.store.create(effect.item)
            except ConflictError as e:
                logger.warning("[inventory] create %s rejected: %r", effect.item.code, e)
                return ev.CreateFailed(message=messages.CREATE_CONFLICT)
            except DataApiError as e:
                logger.warning("[inventory] create %s failed: %r", effect.item.code, e)
                return ev.CreateFailed(message=messages.CREATE_FAILED)
            logger.info("[inventory] created item %s", effect.item.code)
            return ev.CreateSucceeded(item=created)

        if isinstance(effect, ev.UpdateItem):
            try:
                updated = await self.store.update(effect.item_id, effect.item)
            except NotFoundError as e:
                logger.warning("[inventory] merge into %s failed: %r", effect.item_id, e)
                return ev.UpdateFailed(message=messages.MERGE_NOT_FOUND)
            except DataApiError as e:
                logger.warning("[inventory] merge into %s failed: %r", effect.item_id, e)
                return ev.UpdateFailed(message=messages.MERGE_FAILED)
            logger.info(
                "[inventory] merged intake into item %s, quantity now %s",
                effect.item_id,
                effect.item.current_quantity,
            )
            return ev.UpdateSucceeded(item=updated)

        if isinstance(effect, ev.DeleteItem):
            try:
                await self.store.delete(effect.item_id)
            except DataApiError as e:
                logger.warning("[inventory] delete %s failed: %r", effect.item_id, e)
                return ev.DeleteFailed(message=e.server_message or messages.DELETE_FAILED)
            logger.info("[inventory] deleted item %s", effect.item_id)
            return ev.DeleteSucceeded(item_id=effect.item_id)

        if isinstance(effect, ev.ScheduleFeedbackClear):
            self._schedule_feedback_clear(effect.token)
            return None

        raise TypeError(f"unknown inventory effect: {effect!r}")

    def _schedule_feedback_clear(self, token: int) -> None:
        if self._feedback_timer is not None:
            self._feedback_timer.cancel()
        loop = asyncio.get_running_loop()
        self._feedback_timer = loop.call_later(self.feedback_seconds, self._expire_feedback, token)

    def _expire_feedback(self, token: int) -> None:
        self._feedback_timer = None
        self.state, _ = transition(self.state, ev.FeedbackExpired(token=token))
