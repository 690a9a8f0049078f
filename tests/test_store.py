"""Tests for the redis-backed store session.

Unit tests mock redis-py.  Integration tests need a Redis-compatible server
on HASHBENCH_HOST:HASHBENCH_PORT (default localhost:6379) and are skipped
otherwise.
"""

from __future__ import annotations

import unittest
from unittest import mock

import redis
from redis.exceptions import AuthenticationError, ResponseError

from hashbench.benchmarks.hash_pipeline.config import DEFAULT_HOST, DEFAULT_PORT
from hashbench.benchmarks.hash_pipeline.runner import TrialConfig, run_benchmark
from hashbench.store import (
    PipelineExecutionError,
    RedisPipeline,
    RedisSession,
    StoreConnectionError,
    StoreError,
    acquire_session,
)


def _have_redis() -> bool:
    """Return True if a server answers PING on the default endpoint."""
    try:
        session = acquire_session(DEFAULT_HOST, DEFAULT_PORT, socket_timeout=1.0)
    except StoreError:
        return False
    session.close()
    return True


# ======================================================================
# Unit tests (redis-py mocked)
# ======================================================================

class TestAcquireSession(unittest.TestCase):
    def setUp(self):
        pool_patcher = mock.patch("hashbench.store.redis.ConnectionPool")
        client_patcher = mock.patch("hashbench.store.redis.Redis")
        self.pool_cls = pool_patcher.start()
        self.client_cls = client_patcher.start()
        self.addCleanup(pool_patcher.stop)
        self.addCleanup(client_patcher.stop)
        self.pool = self.pool_cls.return_value
        self.client = self.client_cls.return_value

    def test_pool_configuration(self):
        acquire_session("db.local", 6380, db=2, password="pw",
                        socket_timeout=3.0, max_connections=8)
        kwargs = self.pool_cls.call_args.kwargs
        self.assertEqual(kwargs["host"], "db.local")
        self.assertEqual(kwargs["port"], 6380)
        self.assertEqual(kwargs["db"], 2)
        self.assertEqual(kwargs["password"], "pw")
        self.assertEqual(kwargs["socket_timeout"], 3.0)
        self.assertEqual(kwargs["max_connections"], 8)
        self.client_cls.assert_called_once_with(connection_pool=self.pool)

    def test_max_connections_omitted_by_default(self):
        acquire_session("localhost", 6379)
        self.assertNotIn("max_connections", self.pool_cls.call_args.kwargs)

    def test_pings_on_acquire(self):
        session = acquire_session("localhost", 6379)
        self.client.ping.assert_called_once_with()
        self.assertFalse(session.closed)

    def test_unreachable_raises_connection_error(self):
        self.client.ping.side_effect = redis.ConnectionError("Connection refused")
        with self.assertRaises(StoreConnectionError) as ctx:
            acquire_session("localhost", 6379)
        self.assertIn("Connection refused", str(ctx.exception))
        self.pool.disconnect.assert_called_once_with()

    def test_bad_password_raises_connection_error(self):
        self.client.ping.side_effect = AuthenticationError("invalid password")
        with self.assertRaises(StoreConnectionError) as ctx:
            acquire_session("localhost", 6379, password="wrong")
        self.assertIn("Authentication failed", str(ctx.exception))


class TestRedisSession(unittest.TestCase):
    def setUp(self):
        client_patcher = mock.patch("hashbench.store.redis.Redis")
        self.client_cls = client_patcher.start()
        self.addCleanup(client_patcher.stop)
        self.client = self.client_cls.return_value
        self.pool = mock.Mock()
        self.session = RedisSession(self.pool)

    def test_pipeline_is_not_transactional(self):
        self.session.pipeline()
        self.client.pipeline.assert_called_once_with(transaction=False)

    def test_close_is_idempotent(self):
        self.session.close()
        self.session.close()
        self.pool.disconnect.assert_called_once_with()
        self.assertTrue(self.session.closed)

    def test_pipeline_after_close_raises(self):
        self.session.close()
        with self.assertRaises(StoreError):
            self.session.pipeline()

    def test_context_manager_closes(self):
        with self.session as s:
            self.assertIs(s, self.session)
        self.pool.disconnect.assert_called_once_with()


class TestRedisPipeline(unittest.TestCase):
    def setUp(self):
        self.raw = mock.Mock()
        self.pipe = RedisPipeline(self.raw)

    def test_hash_set_queues_hset(self):
        self.pipe.hash_set("AAA0", "field:0", "testValue:0")
        self.raw.hset.assert_called_once_with("AAA0", "field:0", "testValue:0")
        self.raw.execute.assert_not_called()

    def test_hash_get_queues_hget(self):
        self.pipe.hash_get("AAA0", "field:0")
        self.raw.hget.assert_called_once_with("AAA0", "field:0")

    def test_flush_returns_replies(self):
        self.raw.execute.return_value = [1, 1]
        self.assertEqual(self.pipe.flush(), [1, 1])

    def test_flush_failure_translated(self):
        self.raw.execute.side_effect = redis.ConnectionError("Connection reset")
        with self.assertRaises(PipelineExecutionError):
            self.pipe.flush()

    def test_server_error_translated(self):
        self.raw.execute.side_effect = ResponseError("WRONGTYPE")
        with self.assertRaises(PipelineExecutionError) as ctx:
            self.pipe.flush()
        self.assertIn("WRONGTYPE", str(ctx.exception))

    def test_enqueue_failure_translated(self):
        self.raw.hset.side_effect = redis.DataError("Invalid input")
        with self.assertRaises(PipelineExecutionError):
            self.pipe.hash_set("k", "f", "v")


# ======================================================================
# Integration tests (require a running server)
# ======================================================================

@unittest.skipUnless(_have_redis(), "redis server not reachable")
class TestRedisIntegration(unittest.TestCase):
    KEY = "hashbench:test:key"

    def setUp(self):
        self.session = acquire_session(DEFAULT_HOST, DEFAULT_PORT)

    def tearDown(self):
        self.session.close()
        raw = redis.Redis(host=DEFAULT_HOST, port=DEFAULT_PORT)
        raw.delete(self.KEY)
        raw.close()

    def test_pipelined_roundtrip(self):
        pipe = self.session.pipeline()
        pipe.hash_set(self.KEY, "f1", "v1")
        pipe.hash_set(self.KEY, "f2", "v2")
        pipe.flush()

        pipe = self.session.pipeline()
        pipe.hash_get(self.KEY, "f1")
        pipe.hash_get(self.KEY, "f2")
        pipe.hash_get(self.KEY, "missing")
        self.assertEqual(pipe.flush(), ["v1", "v2", None])

    def test_run_benchmark_small(self):
        lines: list[str] = []
        session = acquire_session(DEFAULT_HOST, DEFAULT_PORT)
        config = TrialConfig(batch_size=20, trials=3, key_size=1,
                             key_filler="hashbench:test:")
        try:
            report = run_benchmark(lambda: session, config, emit=lines.append)
        finally:
            raw = redis.Redis(host=DEFAULT_HOST, port=DEFAULT_PORT)
            raw.delete(*(f"hashbench:test:{i}" for i in range(20)))
            raw.close()
        self.assertTrue(session.closed)
        self.assertEqual(report.trials, 3)
        self.assertEqual(report.total_operations, 60)
        self.assertGreater(report.write_mean, 0)
        self.assertEqual(len(lines), 3 * 2 + 3)


if __name__ == "__main__":
    unittest.main()
