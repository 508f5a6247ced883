"""
Shared fixtures: a scripted HTTP server on httpx.MockTransport, a virtual-clock
scheduler for the search debounce, and a runner that holds work until told to
finish it.
"""
import json
from collections import defaultdict, deque

import httpx
import pytest

from fscloud.client import CloudClient
from fscloud.controller import NavigationController
from fscloud.session_store import TokenStore


class FakeServer:
    """Answers requests from per-route queues; the last response repeats."""

    def __init__(self):
        self.requests = []
        self._routes = defaultdict(deque)

    def add(self, method, path, *responses):
        for status, body in responses:
            self._routes[(method, path)].append((status, body))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": "Not found"})
        status, body = queue.popleft() if len(queue) > 1 else queue[0]
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def calls(self, method, path):
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request):
        return json.loads(request.content)


class _Task:
    def __init__(self, due, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    def __init__(self):
        self.now = 0
        self.tasks = []

    def schedule(self, delay_ms, callback):
        task = _Task(self.now + delay_ms, callback)
        self.tasks.append(task)
        return task

    @property
    def live(self):
        return [t for t in self.tasks if not t.cancelled]

    def advance(self, ms):
        target = self.now + ms
        while True:
            due = sorted((t for t in self.live if t.due <= target), key=lambda t: t.due)
            if not due:
                break
            task = due[0]
            self.tasks.remove(task)
            self.now = task.due
            task.callback()
        self.now = target


class DeferredRunner:
    def __init__(self):
        self.jobs = []

    def run(self, fn, on_result=None, on_error=None, on_finished=None):
        self.jobs.append((fn, on_result, on_error, on_finished))

    def complete(self, index=0):
        fn, on_result, on_error, on_finished = self.jobs.pop(index)
        try:
            result = fn()
        except Exception as exc:
            if on_error:
                on_error(exc)
        else:
            if on_result:
                on_result(result)
        finally:
            if on_finished:
                on_finished()


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def client(server):
    c = CloudClient(base_url="http://testserver", http_log_path=None, transport=httpx.MockTransport(server))
    yield c
    c.close()


@pytest.fixture
def store(tmp_path):
    s = TokenStore(str(tmp_path / "session.json"))
    s.store_session("access-1", "refresh-1")
    return s


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def runner():
    return DeferredRunner()


@pytest.fixture
def redirects():
    return []


@pytest.fixture
def controller(client, store, scheduler, redirects):
    ctrl = NavigationController(
        client,
        store,
        scheduler=scheduler,
        redirect_to_login=lambda: redirects.append("login"),
    )
    ctrl.load_session()
    return ctrl
