import queue
from collections import Counter
from itertools import permutations

from wikidata_filter.aggregate import collect_results, merge_counts, write_counts
from wikidata_filter.worker import WorkerResult

from conftest import read_bz2_lines


def results():
    return [
        WorkerResult("1", Counter({"Q1": 2, "Q2": 1})),
        WorkerResult("2", Counter({"Q2": 3, "Q10": 1})),
        WorkerResult("3", Counter()),
        WorkerResult("4", None),
    ]


class TestAggregate:
    def test_merge_sums_counts(self):
        assert merge_counts(results()) == Counter({"Q1": 2, "Q2": 4, "Q10": 1})

    def test_merge_is_order_independent(self):
        merged = {tuple(sorted(merge_counts(order).items())) for order in permutations(results())}
        assert len(merged) == 1

    def test_collect_waits_for_every_worker(self):
        q = queue.Queue()
        for result in results():
            q.put(result)
        collected = collect_results(q, 4)
        assert sorted(r.worker for r in collected) == ["1", "2", "3", "4"]
        assert q.empty()

    def test_write_counts(self, tmp_path):
        path = tmp_path / "statement_counts.bz2"
        assert write_counts(merge_counts(results()), path) == 3
        assert read_bz2_lines(path) == ["Q1 2\n", "Q10 1\n", "Q2 4\n"]

    def test_write_empty_counts(self, tmp_path):
        path = tmp_path / "statement_counts.bz2"
        assert write_counts(Counter(), path) == 0
        assert read_bz2_lines(path) == []
