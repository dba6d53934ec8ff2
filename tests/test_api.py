"""
Integration tests for the FastAPI application.
Uses httpx.AsyncClient with the ASGI transport (no running server needed).
Fixtures are provided by tests/conftest.py.
"""

from __future__ import annotations


def _desktop(event_type: str, **data) -> dict:
    return {"source": "desktop", "type": event_type, "data": data}


class TestHealth:
    async def test_health_ok(self, client):
        r = await client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
        assert r.json()["focus_source"] == "manual"


class TestTimerEndpoints:
    async def test_initial_state_is_idle(self, client):
        r = await client.get("/timer")
        assert r.status_code == 200
        body = r.json()
        assert body["state"] == "idle"
        assert body["remaining_seconds"] == body["total_seconds"] == 30 * 60
        assert body["time_string"] == "30:00"
        assert body["progress"] == 0.0

    async def test_start_pause_resume(self, client):
        r = await client.post("/timer/start")
        assert r.json()["state"] == "working"
        r = await client.post("/timer/pause")
        assert r.json()["state"] == "paused"
        assert r.json()["paused_reason"] == "user_requested"
        assert r.json()["phase"] == "working"
        r = await client.post("/timer/start")
        assert r.json()["state"] == "working"

    async def test_break_and_skip(self, client):
        r = await client.post("/timer/break")
        assert r.json()["state"] == "breaking"
        assert r.json()["remaining_seconds"] == 2 * 60
        r = await client.post("/timer/skip")
        assert r.json()["state"] == "working"
        assert r.json()["remaining_seconds"] == 30 * 60

    async def test_reset(self, client):
        await client.post("/timer/start")
        r = await client.post("/timer/reset")
        assert r.json()["state"] == "idle"

    async def test_stale_presses_are_harmless(self, client):
        r = await client.post("/timer/pause")
        assert r.status_code == 200
        assert r.json()["state"] == "idle"
        r = await client.post("/timer/skip")
        assert r.json()["state"] == "idle"


class TestFocusScenario:
    async def test_focus_mode_starts_and_pauses_timer(self, client):
        await client.put("/settings", json={
            "auto_start_mode": "focus_mode",
            "selected_focus_modes": ["work"],
        })
        r = await client.post("/signals/event", json=_desktop("FOCUS_CHANGED", mode="work"))
        assert r.status_code == 202
        assert (await client.get("/timer")).json()["state"] == "working"

        await client.post("/signals/event", json=_desktop("FOCUS_CLEARED"))
        body = (await client.get("/timer")).json()
        assert body["state"] == "paused"
        assert body["paused_reason"] == "policy_blocked"

    async def test_manual_focus_override(self, client):
        await client.put("/settings", json={
            "auto_start_mode": "focus_mode",
            "selected_focus_modes": ["Reading"],
        })
        r = await client.put("/signals/focus", json={"mode": "Reading"})
        assert r.status_code == 200
        assert r.json()["current_mode"] == "Reading"
        assert r.json()["manual_mode"] == "Reading"
        assert (await client.get("/timer")).json()["state"] == "working"

        r = await client.get("/signals/focus")
        assert r.json()["current_mode"] == "Reading"

    async def test_policy_endpoint_explains_decision(self, client):
        await client.put("/settings", json={
            "auto_start_mode": "time_window_and_focus_mode",
            "selected_focus_modes": ["Work"],
        })
        r = await client.get("/policy")
        assert r.status_code == 200
        body = r.json()
        assert body["mode"] == "time_window_and_focus_mode"
        assert body["satisfied"] is False
        assert body["reason"] == "no_focus_mode"
        assert body["should_auto_start"] is False

    async def test_manual_policy_asymmetry(self, client):
        body = (await client.get("/policy")).json()
        assert body["mode"] == "manual"
        assert body["should_auto_start"] is False
        assert body["is_allowed_to_run"] is True


class TestLockScenario:
    async def test_lock_and_unlock_round_trip(self, client, app):
        await client.post("/timer/start")
        app.state.timer.tick()
        before = (await client.get("/timer")).json()["remaining_seconds"]

        await client.post("/signals/event", json=_desktop("SCREEN_LOCK"))
        body = (await client.get("/timer")).json()
        assert body["state"] == "paused"
        assert body["paused_reason"] == "screen_locked"
        assert app.state.controller.was_running_before_lock is True

        await client.post("/signals/event", json=_desktop("SCREEN_UNLOCK"))
        body = (await client.get("/timer")).json()
        assert body["state"] == "working"
        assert body["remaining_seconds"] == before

    async def test_batch_applies_in_order(self, client):
        await client.post("/timer/start")
        r = await client.post("/signals/batch", json=[
            _desktop("SCREEN_LOCK"),
            {"source": "browser", "type": "SCREEN_UNLOCK", "data": {}},
            _desktop("BOGUS"),
        ])
        assert r.status_code == 202
        assert r.json() == {"accepted": 1, "total": 3}
        assert (await client.get("/timer")).json()["state"] == "paused"


class TestSignalValidation:
    async def test_unknown_source_returns_400(self, client):
        r = await client.post("/signals/event", json={"source": "toaster", "type": "SCREEN_LOCK"})
        assert r.status_code == 400

    async def test_unknown_type_returns_422(self, client):
        r = await client.post("/signals/event", json=_desktop("BOGUS"))
        assert r.status_code == 422


class TestModeList:
    async def test_default_modes_listed(self, client):
        r = await client.get("/signals/modes")
        assert r.status_code == 200
        assert "Work" in r.json()["modes"]
        assert r.json()["user_defined"] == []

    async def test_add_and_remove_user_mode(self, client):
        r = await client.post("/signals/modes", json={"name": "Writing"})
        assert r.status_code == 201
        assert "Writing" in r.json()["modes"]
        assert r.json()["user_defined"] == ["Writing"]

        r = await client.post("/signals/modes", json={"name": "Writing"})
        assert r.json()["user_defined"] == ["Writing"]

        r = await client.delete("/signals/modes/Writing")
        assert r.status_code == 200
        assert "Writing" not in r.json()["modes"]

    async def test_remove_unknown_mode_returns_404(self, client):
        r = await client.delete("/signals/modes/Nope")
        assert r.status_code == 404

    async def test_blank_mode_rejected(self, client):
        r = await client.post("/signals/modes", json={"name": "   "})
        assert r.status_code == 422
