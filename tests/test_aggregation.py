"""
Tests for per-receiver output aggregation
"""

from cip68_offchain.aggregation import OutputAggregator
from cip68_offchain.instructions import PayToAddress


class TestOutputAggregator:
    def setup_method(self):
        self.aggregator = OutputAggregator(default_receiver="addr_caller")

    def test_one_output_per_receiver(self):
        self.aggregator.add("addr_r1", "unit_a", 1)
        self.aggregator.add("addr_r2", "unit_b", 2)
        self.aggregator.add("addr_r1", "unit_c", 3)

        assert self.aggregator.to_instructions() == [
            PayToAddress(address="addr_r1", amounts=(("unit_a", 1), ("unit_c", 3))),
            PayToAddress(address="addr_r2", amounts=(("unit_b", 2),)),
        ]

    def test_missing_receiver_uses_default(self):
        self.aggregator.add(None, "unit_a", 1)
        self.aggregator.add("", "unit_b", 1)
        assert self.aggregator.items() == [("addr_caller", [("unit_a", 1), ("unit_b", 1)])]

    def test_entry_count(self):
        self.aggregator.add("addr_r1", "unit_a", 1)
        self.aggregator.add(None, "unit_b", 1)
        self.aggregator.add("addr_r1", "unit_c", 1)
        assert len(self.aggregator) == 3
        assert len(self.aggregator.to_instructions()) == 2

    def test_merge_keeps_order(self):
        other = OutputAggregator(default_receiver="addr_other")
        other.add("addr_r1", "unit_b", 1)
        self.aggregator.add("addr_r1", "unit_a", 1)
        self.aggregator.merge(other)
        assert self.aggregator.items() == [("addr_r1", [("unit_a", 1), ("unit_b", 1)])]

    def test_empty(self):
        assert self.aggregator.to_instructions() == []
        assert len(self.aggregator) == 0
