# rte_ted/distance/scoring.py
from dataclasses import dataclass
from typing import Optional

from rte_ted.alignment.lookup import AlignmentLookup
from rte_ted.core.interfaces import EditScore


@dataclass(frozen=True)
class EditWeights:
    match: float = 0.0
    delete: float = 1.0
    insert: float = 1.0
    substitute: float = 1.0

    @classmethod
    def from_config(cls, config) -> "EditWeights":
        return cls(
            match=config.match_weight,
            delete=config.delete_weight,
            insert=config.insert_weight,
            substitute=config.substitute_weight,
        )


class FixedWeightScore(EditScore):
    """
    Фиксированные веса операций.

    alignment_affects_cost=True: замена, которую lookup считает LOCAL-ENTAILMENT, стоит match.
    alignment_affects_cost=False: match только при совпадении лемм (без учета регистра).
    """

    def __init__(
            self,
            tree1,
            tree2,
            lookup: Optional[AlignmentLookup] = None,
            weights: Optional[EditWeights] = None,
            alignment_affects_cost: bool = True
    ):
        self.tree1 = tree1
        self.tree2 = tree2
        self.lookup = lookup if lookup is not None else AlignmentLookup()
        self.weights = weights or EditWeights()
        self.alignment_affects_cost = alignment_affects_cost

    def replace(self, node1: int, node2: int) -> float:
        token_t = self.tree1.get_token(self.tree1.get_label(node1))
        token_h = self.tree2.get_token(self.tree2.get_label(node2))

        if self.alignment_affects_cost:
            matched = self.lookup.judge(token_t, token_h).is_entailment
        else:
            matched = token_t.lemma.lower() == token_h.lemma.lower()

        return self.weights.match if matched else self.weights.substitute

    def insert(self, node2: int) -> float:
        return self.weights.insert

    def delete(self, node1: int) -> float:
        return self.weights.delete
