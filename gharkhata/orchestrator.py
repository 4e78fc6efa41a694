"""
Main Orchestrator for GharKhata

Ties the store, the ledgers and the statement engine together for one
household profile.

DESIGN DECISION: The profile is explicit. A Household is bound to one
(store, profile_id) pair when it is built and every ledger it owns is
bound to the same pair. There is no process-wide "active profile" to
switch behind anyone's back; switching profile means building another
Household.
"""

from pathlib import Path
from typing import Optional, Union

from gharkhata.config import Settings, get_settings
from gharkhata.ledgers import AttendanceLedger, HelperRegistry, MilkLedger, PaymentLedger
from gharkhata.logger import get_logger
from gharkhata.models.statement import MonthlyStatement
from gharkhata.services.backup import BackupService
from gharkhata.services.storage import (
    DEFAULT_PROFILE,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    StorageConnectionError,
)
from gharkhata.statements import (
    DashboardSummary,
    StatementService,
    export_statement_workbook,
    render_statement_html,
)
from gharkhata.statements.export import DEFAULT_TITLE
from gharkhata.validation import EntryValidator


logger = get_logger(__name__)


class Household:
    """
    One profile's ledgers and statements.

    Usage:
        household = Household(store, "default")
        household.helpers.save_helper("Sunita", "Maid", monthly_salary=3000)
        statement = household.statement("2024-05")
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        profile_id: str = DEFAULT_PROFILE,
        validator: Optional[EntryValidator] = None,
    ):
        self.store = store
        self.profile_id = profile_id or DEFAULT_PROFILE
        validator = validator or EntryValidator()

        self.helpers = HelperRegistry(store, self.profile_id, validator)
        self.attendance = AttendanceLedger(store, self.profile_id, validator)
        self.milk = MilkLedger(store, self.profile_id, validator, registry=self.helpers)
        self.payments = PaymentLedger(store, self.profile_id, validator)
        self.statements = StatementService(
            self.helpers, self.attendance, self.milk, self.payments
        )

    def statement(self, month: str) -> MonthlyStatement:
        return self.statements.compute_monthly_statement(month)

    def dashboard(self, month: str) -> DashboardSummary:
        return self.statements.dashboard(month)

    def statement_html(self, month: str, title: str = DEFAULT_TITLE) -> str:
        return render_statement_html(self.statement(month), title)

    def export_workbook(self, month: str, path: Union[str, Path]) -> Path:
        return export_statement_workbook(self.statement(month), path)


def create_store(settings: Optional[Settings] = None) -> KeyValueStoreInterface:
    """
    Build the configured store.

    Raises:
        StorageConnectionError: If the JSON data directory is unusable
    """
    storage = (settings or get_settings()).storage
    if storage.storage_backend == "memory":
        return InMemoryKeyValueStore(prefix=storage.storage_prefix)
    return JsonFileKeyValueStore(
        storage.storage_path,
        prefix=storage.storage_prefix,
        write_attempts=storage.write_retry_attempts,
    )


def create_app_components(
    settings: Optional[Settings] = None,
    use_storage: bool = True,
) -> tuple[KeyValueStoreInterface, BackupService]:
    """
    Factory function to create the application's shared components.

    Args:
        settings: Settings to use; defaults to get_settings()
        use_storage: Whether to open the configured store.
                    Set to False for an in-memory session.

    Returns:
        (store, backup_service)
    """
    settings = settings or get_settings()
    store = None

    if use_storage:
        try:
            store = create_store(settings)
        except StorageConnectionError as e:
            # Keep the app usable; nothing will outlive the session.
            logger.warning("storage_unavailable", error=str(e), fallback="memory")

    if store is None:
        store = InMemoryKeyValueStore(prefix=settings.storage.storage_prefix)

    return store, BackupService(store)
