from __future__ import annotations

from datetime import datetime

from fastapi.testclient import TestClient

from media_browser import main
from media_browser.config import Settings


def _client(root) -> TestClient:
    return TestClient(main.create_app(Settings(media_root=str(root))))


def test_health_reports_media_root(tmp_path):
    response = _client(tmp_path).get('/api/health')

    assert response.status_code == 200
    body = response.json()
    assert body['status'] == 'OK'
    assert body['mediaRoot'] == str(tmp_path)
    assert body['timestamp'].endswith('Z')
    datetime.fromisoformat(body['timestamp'].replace('Z', '+00:00'))


def test_security_headers_added_on_success_response(tmp_path):
    response = _client(tmp_path).get('/api/health')

    assert response.headers['x-content-type-options'] == 'nosniff'
    assert response.headers['referrer-policy'] == 'same-origin'


def test_security_headers_added_on_error_response(tmp_path):
    response = _client(tmp_path).get('/api/browse/missing')

    assert response.status_code == 404
    assert response.headers['x-content-type-options'] == 'nosniff'
