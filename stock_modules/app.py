"""
Client composition root (``stock_modules.app``).

Responsibility
--------------
Builds one client's object graph from a record store and a ``StockConfig``:
the kernel ``ClientState``, every orchestrator, the location directory, the
user session and the notification emitter, wired so placeholder ids
reconcile everywhere (including the emitter's dedup set).

Usage::

    app = StockApp.create(store, get_active_config(), sink=show_alert)
    app.state.load()
    app.session.login(app.directory.find_by_username("warehouse"))
"""

from __future__ import annotations

from dataclasses import dataclass

from stock_config.bridges import build_locations
from stock_config.schema import StockConfig
from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.domain.identifiers import IdGenerator
from stock_kernel.logging_config import get_logger
from stock_kernel.selectors.inventory_selector import InventorySelector
from stock_kernel.selectors.transaction_selector import TransactionSelector
from stock_kernel.services.client_state import ClientState
from stock_kernel.services.record_store import RecordStore
from stock_modules.access.directory import LocationDirectory
from stock_modules.access.session import UserSession
from stock_modules.catalogue.service import CatalogueService
from stock_modules.daily_log.service import DailyLogService
from stock_modules.notifications.emitter import (
    Notification,
    NotificationEmitter,
    NotificationSink,
    NotificationText,
)
from stock_modules.transfers.config import TransferConfig
from stock_modules.transfers.service import TransferService

logger = get_logger("modules.app")


def _discard_notification(title: str, body: str) -> None:
    """Sink used when the caller supplies none."""


@dataclass
class StockApp:
    """Everything one client needs, built around a single ClientState."""

    config: StockConfig
    state: ClientState
    transfers: TransferService
    daily_log: DailyLogService
    catalogue: CatalogueService
    directory: LocationDirectory
    session: UserSession
    emitter: NotificationEmitter
    transaction_view: TransactionSelector
    inventory_view: InventorySelector
    language: str = "en"

    @classmethod
    def create(
        cls,
        store: RecordStore,
        config: StockConfig,
        clock: Clock | None = None,
        sink: NotificationSink | None = None,
        auto_flush: bool = False,
    ) -> StockApp:
        clock = clock or SystemClock()
        state = ClientState(
            store,
            clock=clock,
            ids=IdGenerator(clock, config.group_id_prefix),
            auto_flush=auto_flush,
        )
        emitter = NotificationEmitter(
            sink or _discard_notification,
            texts={
                t.language: NotificationText(title=t.title, from_word=t.from_word)
                for t in config.notification_texts
            } or None,
            default_language=config.default_language,
        )
        state.add_reconcile_listener(emitter.reconcile_id)
        directory = LocationDirectory(
            state,
            static_locations=build_locations(config),
            branch_description=config.branch_description,
            branch_icon=config.branch_icon,
        )
        transfer_config = TransferConfig(
            received_category=config.received_category,
            returned_category=config.returned_category,
            central_locations=config.central_location_ids,
        )
        logger.debug("stock_app_created", extra={"auto_flush": auto_flush})
        return cls(
            config=config,
            state=state,
            transfers=TransferService(state, transfer_config),
            daily_log=DailyLogService(state),
            catalogue=CatalogueService(state),
            directory=directory,
            session=UserSession(directory, emitter),
            emitter=emitter,
            transaction_view=TransactionSelector(state.transactions),
            inventory_view=InventorySelector(state.inventory),
            language=config.default_language,
        )

    def notify(self) -> tuple[Notification, ...]:
        """Alert for incoming transfers at the active location."""
        return self.emitter.observe(
            self.state.transactions, self.session.location_id, self.language,
        )

    def refresh(self) -> tuple[Notification, ...]:
        """Re-read the store, then alert for anything new."""
        self.state.load()
        return self.notify()
