"""Tests for the fixed hash-field workload."""

from __future__ import annotations

import unittest

from hashbench.benchmarks.hash_pipeline.workloads import (
    Operation,
    build_workload,
    generate_field,
    generate_key,
    generate_value,
)


class TestGenerateKey(unittest.TestCase):
    def test_padded_to_target_length(self):
        self.assertEqual(generate_key("A", 4, 0), "AAA0")
        self.assertEqual(generate_key("A", 16, 7), "AAAAAAAAAAAAAAA7")

    def test_exact_length_across_digit_counts(self):
        for index in (0, 9, 10, 99, 100, 12345):
            with self.subTest(index=index):
                self.assertEqual(len(generate_key("A", 16, index)), 16)

    def test_index_is_suffix(self):
        self.assertTrue(generate_key("A", 16, 4321).endswith("4321"))
        self.assertTrue(generate_key("A", 16, 4321).startswith("AAAA"))

    def test_target_equal_to_minimum(self):
        # filler + 2 digits == 3
        self.assertEqual(generate_key("A", 3, 42), "A42")

    def test_short_target_exceeds_length(self):
        """Too-short targets keep the filler and the full index."""
        self.assertEqual(generate_key("A", 2, 123), "A123")
        self.assertEqual(generate_key("A", 0, 5), "A5")
        self.assertEqual(len(generate_key("A", 1, 99)), 3)

    def test_custom_filler(self):
        self.assertEqual(generate_key("k", 6, 12), "kkkk12")

    def test_multi_character_filler_hits_target_length(self):
        self.assertEqual(generate_key("ab", 16, 0), "abbbbbbbbbbbbbb0")
        for index in (0, 7, 42, 999):
            with self.subTest(index=index):
                self.assertEqual(len(generate_key("ab", 16, index)), 16)

    def test_multi_character_filler_too_short(self):
        self.assertEqual(generate_key("user:", 4, 12), "user:12")


class TestFieldsAndValues(unittest.TestCase):
    def test_field(self):
        self.assertEqual(generate_field(0), "field:0")
        self.assertEqual(generate_field(499), "field:499")

    def test_value(self):
        self.assertEqual(generate_value(0), "testValue:0")
        self.assertEqual(generate_value(499), "testValue:499")


class TestBuildWorkload(unittest.TestCase):
    def test_scenario_batch(self):
        workload = build_workload(3, 4, "A")
        self.assertEqual(
            workload,
            (
                Operation("AAA0", "field:0", "testValue:0"),
                Operation("AAA1", "field:1", "testValue:1"),
                Operation("AAA2", "field:2", "testValue:2"),
            ),
        )

    def test_keys_unique(self):
        for batch_size, key_size in ((500, 16), (1000, 2), (150, 1), (20, 3)):
            with self.subTest(batch_size=batch_size, key_size=key_size):
                keys = [op.key for op in build_workload(batch_size, key_size)]
                self.assertEqual(len(set(keys)), batch_size)

    def test_multi_character_filler_workload(self):
        keys = [op.key for op in build_workload(3, 16, "ab")]
        self.assertEqual([len(k) for k in keys], [16, 16, 16])
        self.assertEqual(len(set(keys)), 3)

    def test_deterministic(self):
        self.assertEqual(build_workload(200, 16), build_workload(200, 16))

    def test_immutable(self):
        workload = build_workload(2, 8)
        self.assertIsInstance(workload, tuple)
        with self.assertRaises(AttributeError):
            workload[0].key = "other"

    def test_default_filler(self):
        self.assertEqual(build_workload(1, 16)[0].key, "AAAAAAAAAAAAAAA0")

    def test_rejects_empty_batch(self):
        with self.assertRaises(ValueError):
            build_workload(0, 16)

    def test_rejects_zero_key_size(self):
        with self.assertRaises(ValueError):
            build_workload(10, 0)

    def test_rejects_empty_filler(self):
        with self.assertRaises(ValueError):
            build_workload(10, 16, "")

    def test_rejects_digit_filler(self):
        with self.assertRaises(ValueError):
            build_workload(10, 16, "1")


if __name__ == "__main__":
    unittest.main()
