import pytest
from django.db import OperationalError


@pytest.mark.django_db
def test_health_ok(client):
    r = client.get("/health")

    assert r.status_code == 200
    assert r.json() == {"ok": True, "components": {"db": {"ok": True}}}


@pytest.mark.django_db
def test_health_reports_database_outage(client, monkeypatch):
    class DownConnection:
        def cursor(self):
            raise OperationalError("connection refused")

    monkeypatch.setattr("apps.monitoring.api.connection", DownConnection())

    r = client.get("/health")

    assert r.status_code == 503
    assert r.json() == {"ok": False, "components": {"db": {"ok": False}}}


def test_health_only_answers_get(client):
    assert client.post("/health").status_code == 405
