async def test_root(client):
    r = await client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "running"


async def test_health(client, monkeypatch):
    import app.main as main

    async def _up():
        return True

    async def _down():
        return False

    monkeypatch.setattr(main, "check_db_connection", _up)
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "healthy", "database": "connected"}

    monkeypatch.setattr(main, "check_db_connection", _down)
    r = await client.get("/health")
    assert r.status_code == 503
