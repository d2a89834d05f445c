
import pytest
from fastapi.testclient import TestClient
from api.main import app
import api.routes as routes
from facemood.errors import CameraUnavailableError, ModelLoadError
from facemood.models import LifecycleState, LiveStatus, LoopState


class FakeController:
    def __init__(self, error=None):
        self.error = error
        self.state = LifecycleState.MOUNTED_IDLE
        self.deactivated = 0

    async def activate(self):
        if self.error:
            raise self.error
        self.state = LifecycleState.LOOP_RUNNING

    def deactivate(self):
        self.deactivated += 1
        self.state = LifecycleState.UNMOUNTED

    def status(self):
        return LiveStatus(running=self.state is LifecycleState.LOOP_RUNNING, state=self.state,
                          loop=LoopState.RUNNING, emotion="happy", confidence=0.7)


@pytest.fixture
def created(monkeypatch):
    made = []
    monkeypatch.setitem(routes.live_session, "controller", None)

    def factory(settings):
        made.append(FakeController())
        return made[-1]
    monkeypatch.setattr(routes, "make_controller", factory)
    return made


def test_health():
    client = TestClient(app)
    assert client.get("/health").json() == {"status": "ok"}


def test_live_start(created):
    client = TestClient(app)
    r = client.post('/live/start')
    assert r.status_code == 200
    assert r.json()['status'] == 'started'
    r = client.post('/live/start')
    assert r.json()['status'] == 'already_running'
    assert len(created) == 1


def test_live_status(created):
    client = TestClient(app)
    body = client.get('/live/status').json()
    assert body['running'] is False and body['state'] == 'unmounted'
    client.post('/live/start')
    body = client.get('/live/status').json()
    assert body['running'] is True
    assert body['state'] == 'loop-running'
    assert body['emotion'] == 'happy'


def test_live_stop(created):
    client = TestClient(app)
    assert client.post('/live/stop').json()['status'] == 'not_running'
    client.post('/live/start')
    r = client.post('/live/stop')
    assert r.status_code == 200
    assert r.json()['status'] == 'stopped'
    assert created[0].deactivated == 1
    # stopped controllers are replaced, never restarted
    assert client.post('/live/start').json()['status'] == 'started'
    assert len(created) == 2


@pytest.mark.parametrize("error,code", [
    (CameraUnavailableError("denied"), 503),
    (ModelLoadError("no weights"), 500),
])
def test_live_start_failures(monkeypatch, error, code):
    ctl = FakeController(error=error)
    monkeypatch.setitem(routes.live_session, "controller", None)
    monkeypatch.setattr(routes, "make_controller", lambda s: ctl)
    client = TestClient(app)
    r = client.post('/live/start')
    assert r.status_code == code
    assert ctl.state is LifecycleState.UNMOUNTED
    assert client.post('/live/stop').json()['status'] == 'not_running'
