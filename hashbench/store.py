"""Store sessions -- the pipelined hash-field interface the runner talks to.

The runner only depends on the :class:`Session` / :class:`Pipeline`
protocols, so tests can drive it with an in-memory stub.  The production
implementation wraps a redis-py connection pool and non-transactional
pipelines, which batch every queued command into a single round trip.
"""

from __future__ import annotations

from typing import Any, Protocol

import redis
from redis.exceptions import AuthenticationError, RedisError


class StoreError(Exception):
    """Error raised by the store session layer."""


class StoreConnectionError(StoreError):
    """A session could not be acquired (server unreachable, bad auth)."""


class PipelineExecutionError(StoreError):
    """A pipelined batch failed to enqueue or execute."""


# ======================================================================
# Capability interface
# ======================================================================

class Pipeline(Protocol):
    def hash_set(self, key: str, field: str, value: str) -> None: ...

    def hash_get(self, key: str, field: str) -> None: ...

    def flush(self) -> list[Any]: ...


class Session(Protocol):
    def pipeline(self) -> Pipeline: ...

    def close(self) -> None: ...


# ======================================================================
# Redis implementation
# ======================================================================

class RedisPipeline:
    """Deferred command batch.  Nothing reaches the network until flush()."""

    def __init__(self, pipe: redis.client.Pipeline) -> None:
        self._pipe = pipe

    def hash_set(self, key: str, field: str, value: str) -> None:
        try:
            self._pipe.hset(key, field, value)
        except RedisError as e:
            raise PipelineExecutionError(f"HSET {key!r} could not be queued: {e}") from e

    def hash_get(self, key: str, field: str) -> None:
        try:
            self._pipe.hget(key, field)
        except RedisError as e:
            raise PipelineExecutionError(f"HGET {key!r} could not be queued: {e}") from e

    def flush(self) -> list[Any]:
        """Send every queued command and block until all replies arrive.

        A partially failed batch is reported as a failure of the whole
        batch; redis-py raises the first command error it sees.
        """
        try:
            return self._pipe.execute()
        except RedisError as e:
            raise PipelineExecutionError(f"Pipeline execution failed: {e}") from e


class RedisSession:
    """A single client bound to its own connection pool."""

    def __init__(self, pool: redis.ConnectionPool) -> None:
        self._pool: redis.ConnectionPool | None = pool
        self._client: redis.Redis | None = redis.Redis(connection_pool=pool)

    @property
    def closed(self) -> bool:
        return self._client is None

    def pipeline(self) -> RedisPipeline:
        if self._client is None:
            raise StoreError("Session is closed")
        return RedisPipeline(self._client.pipeline(transaction=False))

    def ping(self) -> None:
        if self._client is None:
            raise StoreError("Session is closed")
        try:
            self._client.ping()
        except AuthenticationError as e:
            raise StoreConnectionError(f"Authentication failed: {e}") from e
        except RedisError as e:
            raise StoreConnectionError(f"Cannot reach store: {e}") from e

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self) -> None:
        if self._client is None:
            return
        pool = self._pool
        self._client = None
        self._pool = None
        pool.disconnect()


def acquire_session(
    host: str,
    port: int,
    *,
    db: int = 0,
    password: str | None = None,
    socket_timeout: float | None = None,
    max_connections: int | None = None,
) -> RedisSession:
    """Open a pool against ``host:port`` and verify it with a PING.

    Raises :class:`StoreConnectionError` if the server cannot be reached;
    the pool is released before the error propagates.
    """
    pool_kwargs: dict[str, Any] = {
        "host": host,
        "port": port,
        "db": db,
        "password": password,
        "socket_timeout": socket_timeout,
        "socket_connect_timeout": socket_timeout,
        "decode_responses": True,
    }
    if max_connections is not None:
        pool_kwargs["max_connections"] = max_connections
    pool = redis.ConnectionPool(**pool_kwargs)

    session = RedisSession(pool)
    try:
        session.ping()
    except StoreError:
        session.close()
        raise
    return session
