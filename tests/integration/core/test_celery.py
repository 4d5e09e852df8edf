"""Celery configuration loads through Django settings."""

import pytest

pytestmark = pytest.mark.integration


class TestCeleryConfig:
    def test_celery_app_is_importable(self):
        from config.celery import app

        assert app.main == "storefront"

    def test_celery_app_exported_from_init(self):
        from config import celery_app

        assert celery_app.main == "storefront"

    def test_outbox_task_is_registered(self):
        from config.celery import app
        from modules.core.tasks import publish_outbox_events  # noqa: F401

        assert "core.publish_outbox_events" in app.tasks

    def test_outbox_drain_is_scheduled(self, settings):
        schedule = settings.CELERY_BEAT_SCHEDULE["publish-outbox-events"]
        assert schedule["task"] == "core.publish_outbox_events"

    def test_celery_serializer_is_json(self, settings):
        assert settings.CELERY_TASK_SERIALIZER == "json"
        assert settings.CELERY_ACCEPT_CONTENT == ["json"]
