"""Pipelined HSET/HGET throughput benchmarks for Redis-compatible stores."""

__version__ = "0.1.0"
