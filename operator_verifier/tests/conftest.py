"""Root conftest"""

from copy import deepcopy

import pytest

from operator_verifier.config import settings
from operator_verifier.exceptions import NotFound, AlreadyExists
from operator_verifier.kubernetes import resource_type
from operator_verifier.store import RemoteStore


def pytest_addoption(parser):
    """Add options to include various kinds of tests in testrun"""
    parser.addoption("--e2e", action="store_true", default=False, help="Runs tests against a live cluster")
    parser.addoption(
        "--enforce", action="store_true", default=False, help="Fails tests instead of skip, if capabilities are missing"
    )


def pytest_runtest_setup(item):
    """Skip end-to-end tests unless they were requested by --e2e option"""
    marks = [i.name for i in item.iter_markers()]
    if "e2e" in marks and not item.config.getoption("--e2e"):
        pytest.skip("End-to-end test, run with --e2e flag against a live cluster")


@pytest.fixture(scope="session")
def skip_or_fail(request):
    """Skips or fails tests depending on --enforce option"""
    return pytest.fail if request.config.getoption("--enforce") else pytest.skip


@pytest.fixture(scope="session")
def testconfig():
    """Operator verifier settings"""
    return settings


class FakeStore(RemoteStore):
    """In-memory RemoteStore recording all calls made to it"""

    def __init__(self):
        self.objects = {}
        self.calls = []
        self.get_error = None
        self.create_error = None

    def get(self, namespace, resource, name):
        self.calls.append(("get", namespace, resource, name))
        if self.get_error:
            raise self.get_error
        try:
            return deepcopy(self.objects[(namespace, resource, name)])
        except KeyError:
            raise NotFound("Object does not exist", namespace, resource, name) from None

    def create(self, namespace, obj):
        resource = resource_type(obj["kind"], obj["apiVersion"])
        name = obj["metadata"]["name"]
        self.calls.append(("create", namespace, resource, name))
        if self.create_error:
            raise self.create_error
        if (namespace, resource, name) in self.objects:
            raise AlreadyExists("Object already exists", namespace, resource, name)
        self.objects[(namespace, resource, name)] = deepcopy(obj)
        return deepcopy(obj)

    def delete(self, namespace, resource, name):
        self.calls.append(("delete", namespace, resource, name))
        return self.objects.pop((namespace, resource, name), None) is not None

    def put(self, obj):
        """Stores object directly, as if somebody else created it"""
        key = (obj["metadata"]["namespace"], resource_type(obj["kind"], obj["apiVersion"]), obj["metadata"]["name"])
        self.objects[key] = deepcopy(obj)

    def count(self, verb):
        """Returns how many times was `verb` called"""
        return len([call for call in self.calls if call[0] == verb])


class ManualClock:
    """Monotonic clock which moves only when told so"""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class ClockEvent:
    """Cancellation event whose wait() advances ManualClock instead of sleeping"""

    def __init__(self, clock: ManualClock, set_at: float = None):
        self.clock = clock
        self.set_at = set_at
        self.waits = []
        self._flag = False

    def is_set(self):
        return self._flag

    def set(self):
        self._flag = True

    def wait(self, timeout=None):
        self.waits.append(timeout)
        if self.set_at is not None and self.clock.now + timeout >= self.set_at:
            self.clock.now = max(self.clock.now, self.set_at)
            self._flag = True
        else:
            self.clock.now += timeout
        return self._flag


@pytest.fixture
def store():
    """Empty in-memory remote store"""
    return FakeStore()


@pytest.fixture
def clock():
    """Manually driven clock"""
    return ManualClock()


@pytest.fixture
def cancel(clock):
    """Cancellation event driving the manual clock"""
    return ClockEvent(clock)


@pytest.fixture
def cancel_at(clock):
    """Returns factory for cancellation events which get set once the manual clock reaches given time"""

    def _cancel_at(set_at):
        return ClockEvent(clock, set_at=set_at)

    return _cancel_at


@pytest.fixture
def observer(clock):
    """
    Returns factory for observers returning given values one by one, exceptions in values are raised.
    The last value is repeated once the values run out, times of all samples are stored in `observe.times`
    """

    def _observer(*values):
        remaining = list(values)

        def _observe():
            _observe.times.append(clock.now)
            value = remaining.pop(0) if len(remaining) > 1 else remaining[0]
            if isinstance(value, Exception):
                raise value
            return value

        _observe.times = []
        return _observe

    return _observer
