"""Tests for the service container."""

from unittest.mock import MagicMock, patch

from api.dependencies import ServiceContainer, get_container, reset_container
from modules.profiles.reconciler import ProfileReconciler
from modules.usage.recorder import UsageRecorder


class TestServiceContainer:
    def test_get_container_is_singleton(self):
        assert get_container() is get_container()

    def test_reset_container(self):
        first = get_container()
        reset_container()
        assert get_container() is not first

    @patch("shared.database.get_supabase_client")
    def test_services_are_lazy_and_cached(self, mock_client):
        mock_client.return_value = MagicMock()
        container = ServiceContainer()

        reconciler = container.profile_reconciler

        assert isinstance(reconciler, ProfileReconciler)
        assert container.profile_reconciler is reconciler
        assert container.profiles is container.profiles

    @patch("shared.database.get_supabase_client")
    def test_usage_recorder_follows_settings(self, mock_client, monkeypatch):
        monkeypatch.setenv("ENABLE_USAGE_TRACKING", "false")
        container = ServiceContainer()

        recorder = container.usage_recorder

        assert isinstance(recorder, UsageRecorder)
        assert recorder._enabled is False

    @patch("shared.database.get_supabase_client")
    def test_reset_clears_services(self, mock_client):
        container = ServiceContainer()
        reconciler = container.profile_reconciler

        container.reset()

        assert container.profile_reconciler is not reconciler
