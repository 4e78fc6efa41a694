"""
Tests for the Household facade and component factory

End-to-end through the public surface, on the in-memory store or a
JSON file in tmp_path.
"""

from decimal import Decimal

import pytest

from gharkhata.config import get_settings
from gharkhata.models import AttendanceStatus, SettlementStatus
from gharkhata.orchestrator import Household, create_app_components, create_store
from gharkhata.services import BackupService
from gharkhata.services.storage import InMemoryKeyValueStore, JsonFileKeyValueStore


@pytest.fixture
def settings(monkeypatch, tmp_path):
    monkeypatch.setenv("GHARKHATA_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("GHARKHATA_STORAGE_BACKEND", "json")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


class TestHousehold:
    """Tests for one profile's bookkeeping."""

    def test_month_end_flow(self):
        """Test helpers, attendance, milk and payments feeding one statement."""
        household = Household(InMemoryKeyValueStore(), "singhi")

        maid = household.helpers.save_helper("Sunita", "Maid", monthly_salary=3000)
        milkman = household.helpers.quick_add_milkman("Ramu")
        household.helpers.save_helper(
            "Ramu", "Milkman", default_price_per_liter=40, helper_id=milkman.id,
            start_date=milkman.start_date,
        )

        for day in range(1, 21):
            status = AttendanceStatus.PRESENT if day <= 18 else AttendanceStatus.ABSENT
            household.attendance.set_status(f"2024-05-{day:02d}", maid.id, status)
        household.milk.add_entry("2024-05-01", 10, helper_id=milkman.id)
        household.milk.add_entry("2024-05-15", 5, price_per_liter=50, helper_id=milkman.id)
        household.payments.record_payment("salary", "2024-05", 2700, helper_id=maid.id)

        statement = household.statement("2024-05")
        assert statement.salary_line(maid.id).status is SettlementStatus.PAID
        assert statement.milk_bucket(milkman.id).cost == Decimal("650")
        assert statement.milk_bucket(milkman.id).status is SettlementStatus.DUE

        dashboard = household.dashboard("2024-05")
        assert dashboard.active_helpers == 2
        assert dashboard.milk_outstanding == Decimal("650")

        assert "Sunita" in household.statement_html("2024-05")

    def test_profiles_do_not_mix(self):
        store = InMemoryKeyValueStore()
        Household(store, "alice").helpers.save_helper("A", "Maid")
        assert Household(store, "bob").helpers.list_helpers() == []

    def test_blank_profile_uses_default(self):
        assert Household(InMemoryKeyValueStore(), "").profile_id == "default"

    def test_export_workbook(self, tmp_path):
        household = Household(InMemoryKeyValueStore())
        path = household.export_workbook("2024-05", tmp_path / "s.xlsx")
        assert path.exists()


class TestAppSettings:
    """Tests for the application section of the settings."""

    def test_defaults(self, settings):
        assert settings.app.app_environment == "development"
        assert settings.app.debug_mode is False

    def test_debug_mode_from_environment(self, settings, monkeypatch):
        monkeypatch.setenv("GHARKHATA_DEBUG_MODE", "true")
        monkeypatch.setenv("GHARKHATA_APP_ENVIRONMENT", "production")
        assert settings.app.debug_mode is True
        assert settings.app.app_environment == "production"


class TestFactory:
    """Tests for building the shared components from settings."""

    def test_json_backend(self, settings, tmp_path):
        store, backup = create_app_components(settings)
        assert isinstance(store, JsonFileKeyValueStore)
        assert isinstance(backup, BackupService)
        assert store.path == tmp_path / "data" / "gharkhata.json"

    def test_memory_backend(self, settings, monkeypatch):
        monkeypatch.setenv("GHARKHATA_STORAGE_BACKEND", "memory")
        assert isinstance(create_store(settings), InMemoryKeyValueStore)

    def test_without_storage(self, settings):
        store, _ = create_app_components(settings, use_storage=False)
        assert isinstance(store, InMemoryKeyValueStore)

    def test_unusable_directory_falls_back_to_memory(self, settings, monkeypatch, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        monkeypatch.setenv("GHARKHATA_DATA_DIR", str(blocker))
        store, _ = create_app_components(settings)
        assert isinstance(store, InMemoryKeyValueStore)

    def test_data_persists_between_components(self, settings):
        store, _ = create_app_components(settings)
        Household(store).helpers.save_helper("Sunita", "Maid")
        again, _ = create_app_components(settings)
        assert [h.name for h in Household(again).helpers.list_helpers()] == ["Sunita"]
