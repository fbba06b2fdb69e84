from datetime import timedelta

import oracledb
import pytest
from loguru import logger

from logminer_connect.connection_acquirer import (
    acquire_connection,
    open_oracle_connection,
)
from logminer_connect.exceptions import ConnectionUnavailable, ConnectivityFailure
from logminer_connect.models.connection_parameters import ConnectionParameters
from logminer_connect.models.retry_policy import RetryPolicy

PASSWORD = "s3cr3t-pw"


class FlakyConnect:
    """Fails a fixed number of times, then hands out a connection."""

    def __init__(self, failures, error=None):
        self.failures = failures
        self.error = error or oracledb.OperationalError("DPY-6005: cannot connect to database")
        self.calls = 0
        self.connection = object()

    def __call__(self, params):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return self.connection


class RecordingLog:
    def __init__(self):
        self.events = []

    def info(self, message):
        self.events.append(("info", message))

    def error(self, message):
        self.events.append(("error", message))

    def messages(self):
        return [message for _, message in self.events]


@pytest.fixture
def params():
    return ConnectionParameters(
        host="db.example.com", port=1521, sid="ORCL", username="miner", password=PASSWORD
    )


def test_succeeds_after_two_failures(params):
    connect = FlakyConnect(failures=2)
    sleeps = []
    log = RecordingLog()
    policy = RetryPolicy(max_attempts=3, backoff=timedelta(milliseconds=10))

    outcome = acquire_connection(params, policy, connect=connect, sleep=sleeps.append, log=log)

    assert outcome.available
    assert outcome.connection is connect.connection
    assert outcome.attempts == 3
    assert connect.calls == 3
    assert sleeps == [0.01, 0.01]
    assert log.messages()[-1] == "[CONNECT] Connected to database at db.example.com:1521:ORCL"


def test_exhaustion_returns_unavailable_outcome(params):
    connect = FlakyConnect(failures=10)
    sleeps = []
    policy = RetryPolicy(max_attempts=2, backoff=timedelta(seconds=5))

    outcome = acquire_connection(
        params, policy, connect=connect, sleep=sleeps.append, log=RecordingLog()
    )

    assert not outcome.available
    assert outcome.connection is None
    assert outcome.attempts == 2
    assert outcome.last_error is connect.error
    assert connect.calls == 2
    assert sleeps == [5.0]


def test_single_attempt_never_sleeps(params):
    connect = FlakyConnect(failures=1)
    sleeps = []
    policy = RetryPolicy(max_attempts=1, backoff=timedelta(minutes=1))

    outcome = acquire_connection(
        params, policy, connect=connect, sleep=sleeps.append, log=RecordingLog()
    )

    assert not outcome.available
    assert connect.calls == 1
    assert sleeps == []


def test_first_attempt_success_never_sleeps(params):
    sleeps = []

    outcome = acquire_connection(
        params, RetryPolicy(), connect=FlakyConnect(failures=0), sleep=sleeps.append, log=RecordingLog()
    )

    assert outcome.available
    assert outcome.attempts == 1
    assert sleeps == []


def test_zero_backoff_retries_immediately(params):
    sleeps = []
    policy = RetryPolicy(max_attempts=3, backoff=timedelta(0))

    outcome = acquire_connection(
        params, policy, connect=FlakyConnect(failures=2), sleep=sleeps.append, log=RecordingLog()
    )

    assert outcome.available
    assert sleeps == [0.0, 0.0]


def test_failures_are_logged_with_attempt_and_address(params):
    log = RecordingLog()
    policy = RetryPolicy(max_attempts=2, backoff=timedelta(milliseconds=250))

    acquire_connection(params, policy, connect=FlakyConnect(failures=5), sleep=lambda s: None, log=log)

    errors = [message for level, message in log.events if level == "error"]
    assert "Attempt 1/2" in errors[0]
    assert "Attempt 2/2" in errors[1]
    assert all("db.example.com:1521:ORCL" in message for message in errors)
    assert "[CONNECT] Waiting 250 ms before next attempt to acquire a connection" in log.messages()
    assert len(errors) == 3


def test_password_never_logged(params):
    log = RecordingLog()

    acquire_connection(
        params,
        RetryPolicy(max_attempts=3, backoff=timedelta(0)),
        connect=FlakyConnect(failures=2),
        sleep=lambda s: None,
        log=log,
    )

    assert log.events
    assert not any(PASSWORD in message for message in log.messages())


def test_authentication_errors_are_retried(params):
    connect = FlakyConnect(failures=1, error=oracledb.DatabaseError("ORA-01017: invalid username/password"))

    outcome = acquire_connection(
        params, RetryPolicy(max_attempts=2, backoff=timedelta(0)), connect=connect, sleep=lambda s: None, log=RecordingLog()
    )

    assert outcome.available
    assert connect.calls == 2


def test_connectivity_failure_is_retried(params):
    connect = FlakyConnect(failures=1, error=ConnectivityFailure("listener not ready"))

    outcome = acquire_connection(
        params, RetryPolicy(max_attempts=2, backoff=timedelta(0)), connect=connect, sleep=lambda s: None, log=RecordingLog()
    )

    assert outcome.available


def test_non_connectivity_errors_propagate(params):
    connect = FlakyConnect(failures=1, error=TypeError("bad argument"))
    sleeps = []

    with pytest.raises(TypeError):
        acquire_connection(params, RetryPolicy(), connect=connect, sleep=sleeps.append, log=RecordingLog())

    assert connect.calls == 1
    assert sleeps == []


def test_retry_on_can_be_narrowed(params):
    connect = FlakyConnect(failures=1)

    with pytest.raises(oracledb.OperationalError):
        acquire_connection(
            params,
            RetryPolicy(),
            connect=connect,
            sleep=lambda s: None,
            log=RecordingLog(),
            retry_on=(ConnectivityFailure,),
        )


def test_unwrap(params):
    available = acquire_connection(
        params, RetryPolicy(), connect=FlakyConnect(failures=0), sleep=lambda s: None, log=RecordingLog()
    )
    exhausted = acquire_connection(
        params, RetryPolicy(max_attempts=1), connect=FlakyConnect(failures=1), sleep=lambda s: None, log=RecordingLog()
    )

    assert available.unwrap() is available.connection
    with pytest.raises(ConnectionUnavailable, match="db.example.com:1521:ORCL"):
        exhausted.unwrap()


def test_default_log_goes_to_loguru(params):
    messages = []
    sink_id = logger.add(messages.append, format="{message}")
    try:
        acquire_connection(
            params,
            RetryPolicy(max_attempts=2, backoff=timedelta(0)),
            connect=FlakyConnect(failures=1),
            sleep=lambda s: None,
        )
    finally:
        logger.remove(sink_id)

    assert any("Attempt 1/2" in message for message in messages)
    assert any("Connected to database at" in message for message in messages)


def test_open_oracle_connection_uses_sid_descriptor(params, monkeypatch):
    calls = {}

    def fake_connect(**kwargs):
        calls.update(kwargs)
        return "connection"

    monkeypatch.setattr(oracledb, "connect", fake_connect)

    assert open_oracle_connection(params) == "connection"
    assert calls["user"] == "miner"
    assert calls["password"] == PASSWORD
    assert "(HOST=db.example.com)(PORT=1521)" in calls["dsn"]
    assert "(SID=ORCL)" in calls["dsn"]


def test_retry_policy_bounds():
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)
    with pytest.raises(ValueError):
        RetryPolicy(backoff=timedelta(milliseconds=-1))
