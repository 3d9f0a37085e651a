"""Connection bootstrap and the app lifespan."""

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

import database
import main
from database import ping, wait_for_database
from main import create_app


class Sleeps(list):
    def __call__(self, seconds):
        self.append(seconds)


def _pings(monkeypatch, *results):
    answers = iter(results)
    monkeypatch.setattr(database, "ping", lambda engine: next(answers))


def test_ping_live_database(engine):
    assert ping(engine)


def test_ping_unreachable_database(tmp_path):
    broken = create_engine(f"sqlite:///{tmp_path}/missing-dir/zamanix.db")
    assert not ping(broken)


def test_connected_first_time_never_sleeps(engine):
    sleeps = Sleeps()
    wait_for_database(engine, retries=5, delay=5.0, sleep=sleeps)
    assert sleeps == []


def test_retries_with_exponential_backoff(engine, monkeypatch):
    _pings(monkeypatch, False, False, True)
    sleeps = Sleeps()

    wait_for_database(engine, retries=5, delay=5.0, backoff=1.5, sleep=sleeps)

    assert sleeps == [5.0, 7.5]


def test_gives_up_after_last_retry(engine, monkeypatch):
    _pings(monkeypatch, False, False, False, False)
    sleeps = Sleeps()

    with pytest.raises(RuntimeError, match="after 4 attempts"):
        wait_for_database(engine, retries=3, delay=5.0, backoff=1.5, sleep=sleeps)

    assert sleeps == [5.0, 7.5, 11.25]


def test_app_refuses_to_start_without_database(settings, tmp_path):
    broken = create_engine(f"sqlite:///{tmp_path}/missing-dir/zamanix.db")
    app = create_app(settings, broken)

    with pytest.raises(RuntimeError):
        with TestClient(app):
            pass


def test_lifespan_waits_for_database_off_the_event_loop(settings, engine, monkeypatch):
    calls = []

    def fake_wait(engine, **kwargs):
        try:
            asyncio.get_running_loop()
            calls.append("on loop")
        except RuntimeError:
            calls.append("worker thread")

    monkeypatch.setattr(main, "wait_for_database", fake_wait)

    with TestClient(create_app(settings, engine)) as client:
        assert client.get("/api/health").status_code == 200

    assert calls == ["worker thread"]
