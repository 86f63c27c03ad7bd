"""Tests for the rendered service worker script."""
from __future__ import annotations

from app.config import Settings
from app.services.service_worker import render_service_worker


def test_render_inlines_configuration():
    config = Settings(
        SW_VERSION="relay-v9",
        SW_APP_SCOPE="/admin/",
        SW_DEFAULT_TITLE='School "Admin"',
        SW_PURGE_CACHES=False,
        SW_CACHE_BUST=True,
    )

    script = render_service_worker(config)

    assert 'const VERSION = "relay-v9";' in script
    assert 'const APP_SCOPE = "/admin/";' in script
    assert 'const DEFAULT_TITLE = "School \\"Admin\\"";' in script
    assert "const PURGE_CACHES = false;" in script
    assert "const CACHE_BUST = true;" in script
    assert "$" not in script


def test_script_handles_push_lifecycle():
    script = render_service_worker(Settings())

    for event in ("install", "activate", "fetch", "push", "notificationclick", "message"):
        assert f"addEventListener('{event}'" in script
    assert "skipWaiting" in script
    assert "action: 'dismiss'" in script
    assert "503" in script and "408" in script


def test_served_with_worker_headers(client):
    response = client.get("/sw.js")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/javascript")
    assert response.headers["service-worker-allowed"] == "/"
    assert response.headers["cache-control"] == "no-cache"
    assert "showNotification" in response.text


def test_background_sync_disabled_by_default():
    script = render_service_worker(Settings(SW_SYNC_URL=None))

    assert "const SYNC_URL = null;" in script
    assert "addEventListener('sync'" in script
    assert "'sync-notifications'" in script


def test_background_sync_url_is_inlined():
    script = render_service_worker(Settings(SW_SYNC_URL="/api/sync-notifications"))

    assert 'const SYNC_URL = "/api/sync-notifications";' in script
