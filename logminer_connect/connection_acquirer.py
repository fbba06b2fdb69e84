"""Acquire a database connection under a bounded retry policy."""

import time
from typing import Any, Callable, Tuple, Type

import oracledb
from loguru import logger

from logminer_connect.exceptions import ConnectivityFailure
from logminer_connect.models.acquisition_outcome import AcquisitionOutcome
from logminer_connect.models.connection_parameters import ConnectionParameters
from logminer_connect.models.retry_policy import RetryPolicy

# Any driver-level failure is retried, authentication errors included.
CONNECTIVITY_ERRORS: Tuple[Type[BaseException], ...] = (
    oracledb.Error,
    ConnectivityFailure,
)


def open_oracle_connection(params: ConnectionParameters) -> oracledb.Connection:
    """Open a thin-mode connection to the database.

    Args:
        params: The connection parameters.

    Returns:
        oracledb.Connection: A new, caller-owned connection.
    """
    return oracledb.connect(
        user=params.username,
        password=params.password.get_secret_value(),
        dsn=params.dsn(),
    )


def acquire_connection(
    params: ConnectionParameters,
    policy: RetryPolicy,
    connect: Callable[[ConnectionParameters], Any] = open_oracle_connection,
    sleep: Callable[[float], None] = time.sleep,
    log: Any = logger,
    retry_on: Tuple[Type[BaseException], ...] = CONNECTIVITY_ERRORS,
) -> AcquisitionOutcome:
    """Try to connect up to ``policy.max_attempts`` times.

    The first attempt starts immediately; ``policy.backoff`` is slept before
    each further attempt. Failures matching ``retry_on`` are logged and
    absorbed, anything else propagates. When every attempt failed, the
    unavailable outcome is returned rather than raised so the caller decides
    how severe that is.

    Args:
        params: The connection parameters.
        policy: The retry policy.
        connect: Opens one connection; raises on failure.
        sleep: Blocks for the given number of seconds.
        log: Receives one event per failure, wait and success.
        retry_on: The exception types treated as connectivity failures.

    Returns:
        AcquisitionOutcome: The live connection or the unavailable result.
    """
    address = params.address
    last_error = None

    for attempt in range(1, policy.max_attempts + 1):
        if attempt > 1:
            log.info(
                f"[CONNECT] Waiting {int(policy.backoff_seconds * 1000)} ms before next attempt to acquire a connection"
            )
            sleep(policy.backoff_seconds)

        try:
            connection = connect(params)
        except retry_on as e:
            last_error = e
            log.error(
                f"[CONNECT] Couldn't connect to database at {address}. "
                f"Attempt {attempt}/{policy.max_attempts}: {e}"
            )
            continue

        log.info(f"[CONNECT] Connected to database at {address}")
        return AcquisitionOutcome(
            connection=connection, address=address, attempts=attempt
        )

    log.error(
        f"[CONNECT] Giving up on {address} after {policy.max_attempts} attempt(s)"
    )
    return AcquisitionOutcome(
        connection=None,
        address=address,
        attempts=policy.max_attempts,
        last_error=last_error,
    )
