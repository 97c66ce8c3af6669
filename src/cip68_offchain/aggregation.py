"""
Output Aggregation

Merges per-asset user token outputs so that each receiver gets exactly one
transaction output, whatever the number of assets sent to it.
"""

from typing import Dict, List, Optional, Tuple

from .instructions import PayToAddress


class OutputAggregator:
    """Collects (receiver, unit, quantity) triples into one output per receiver"""

    def __init__(self, default_receiver: str):
        """
        Args:
            default_receiver: Address used when a request names no receiver
        """
        self.default_receiver = default_receiver
        self._outputs: Dict[str, List[Tuple[str, int]]] = {}

    def add(self, receiver: Optional[str], unit: str, quantity: int) -> None:
        """Append a unit to the receiver's output, creating it on first use"""
        receiver_key = receiver if receiver else self.default_receiver
        self._outputs.setdefault(receiver_key, []).append((unit, quantity))

    def merge(self, other: "OutputAggregator") -> None:
        """Append every entry of another aggregator, keeping its per-receiver order"""
        for receiver, amounts in other.items():
            for unit, quantity in amounts:
                self.add(receiver, unit, quantity)

    def items(self) -> List[Tuple[str, List[Tuple[str, int]]]]:
        return [(receiver, list(amounts)) for receiver, amounts in self._outputs.items()]

    def to_instructions(self) -> List[PayToAddress]:
        return [
            PayToAddress(address=receiver, amounts=tuple(amounts))
            for receiver, amounts in self._outputs.items()
        ]

    def __len__(self) -> int:
        return sum(len(amounts) for amounts in self._outputs.values())
