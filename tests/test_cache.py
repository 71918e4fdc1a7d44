import threading
import unittest

from knightpad.core.models import SubproblemKey
from knightpad.engine.cache import SubproblemCache


class SubproblemKeyTests(unittest.TestCase):
    def test_packing_is_unique_over_the_key_space(self) -> None:
        packed = set()
        for state in range(19):
            for length in range(20):
                for budget in range(3):
                    packed.add(SubproblemKey(state, length, budget).pack(19, 2))
        self.assertEqual(len(packed), 19 * 20 * 3)

    def test_equal_keys_pack_equally(self) -> None:
        self.assertEqual(SubproblemKey(3, 7, 1), SubproblemKey(3, 7, 1))
        self.assertNotEqual(SubproblemKey(3, 7, 1), SubproblemKey(3, 7, 2))


class SubproblemCacheTests(unittest.TestCase):
    def test_get_put_and_stats(self) -> None:
        cache = SubproblemCache(expected_entries=10, concurrency_level=4)
        self.assertIsNone(cache.get(5))
        self.assertEqual(cache.put(5, 42), 42)
        self.assertEqual(cache.get(5), 42)
        self.assertIn(5, cache)
        self.assertNotIn(6, cache)

        stats = cache.stats()
        self.assertEqual(stats.entries, 1)
        self.assertEqual(stats.hits, 1)
        self.assertEqual(stats.misses, 1)
        self.assertEqual(stats.writes, 1)
        self.assertEqual(stats.stripes, 4)
        self.assertEqual(stats.expected_entries, 10)
        self.assertAlmostEqual(stats.hit_ratio, 0.5)

    def test_overwrite_keeps_single_entry(self) -> None:
        cache = SubproblemCache(concurrency_level=2)
        cache.put(9, 100)
        cache.put(9, 100)
        self.assertEqual(len(cache), 1)
        self.assertEqual(cache.stats().writes, 2)

    def test_rejects_zero_stripes(self) -> None:
        with self.assertRaises(ValueError):
            SubproblemCache(concurrency_level=0)

    def test_concurrent_writers_do_not_lose_entries(self) -> None:
        cache = SubproblemCache(expected_entries=8000, concurrency_level=8)
        barrier = threading.Barrier(8)

        def writer(offset: int) -> None:
            barrier.wait()
            for key in range(1000):
                # Every thread writes the same value for shared keys.
                cache.put(key, key * 3)
                cache.put(10_000 + offset * 1000 + key, offset)

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(cache), 1000 + 8 * 1000)
        for key in range(1000):
            self.assertEqual(cache.get(key), key * 3)
        self.assertEqual(cache.get(10_000 + 7 * 1000 + 999), 7)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
