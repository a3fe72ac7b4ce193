from sqlalchemy.exc import OperationalError


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_detailed_health(client):
    response = client.get("/health/detailed")

    assert response.status_code == 200
    assert response.json()["checks"] == {"database": "ok"}


def test_detailed_health_database_down(client, database, monkeypatch):
    def unreachable():
        raise OperationalError("SELECT 1", {}, Exception("could not connect"))

    monkeypatch.setattr(database, "ping", unreachable)

    response = client.get("/health/detailed")

    assert response.status_code == 503
    assert response.json()["checks"] == {"database": "unavailable"}
