# rte_ted/distance/fixed_weight.py
"""
Компонент расстояния: Fragment T и H -> LabeledTree -> tree edit distance ->
трансформации -> нормализованное расстояние.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple, Union

from rte_ted.alignment.lookup import AlignmentLookup, load_user_alignments
from rte_ted.config import DistanceConfig, load_config
from rte_ted.core.data_structures import AlignmentEntry, Fragment
from rte_ted.distance.labeled_tree import LabeledTree
from rte_ted.distance.scoring import EditWeights, FixedWeightScore
from rte_ted.distance.transformations import Transformation, extract_transformations
from rte_ted.distance.tree_edit_distance import Mapping, Operation, TreeEditDistance
from rte_ted.exceptions import MalformedTreeError, TreeSizeLimitError
from rte_ted.ingestion.loader import fragment_from_conllx
from rte_ted.ingestion.preprocessing import remove_punctuation
from rte_ted.ingestion.validators import validate_fragment

logger = logging.getLogger(__name__)

Alignments = Union[AlignmentLookup, Dict[str, AlignmentEntry], None]


def normalize(raw: float, n_t: int, n_h: int,
              delete_weight: float = 1.0, insert_weight: float = 1.0) -> float:
    """
    Нормировка на стоимость удаления всего T и вставки всего H.
    При нулевом знаменателе (оба дерева пустые или нулевые веса) - 0.0.
    """
    norm = n_t * delete_weight + n_h * insert_weight
    if norm == 0:
        return 0.0
    return raw / norm


@dataclass(frozen=True)
class DistanceResult:
    raw_distance: float
    normalized_distance: float
    transformations: Tuple[Transformation, ...]
    operations: Tuple[Operation, ...]

    @property
    def distance(self) -> float:
        return self.normalized_distance

    def __len__(self):
        return len(self.transformations)


class FixedWeightTreeEditDistance:
    """
    Расстояние редактирования деревьев зависимостей с фиксированными весами.
    Компонент не хранит состояние между вызовами: деревья, Mapping и score создаются заново.
    """

    def __init__(self, config: Optional[DistanceConfig] = None,
                 user_alignments: Optional[Iterable[str]] = None):
        self.config = config or DistanceConfig()
        self.weights = EditWeights.from_config(self.config)

        if user_alignments is None:
            user_alignments = load_user_alignments(self.config.alignments_file)
        self.user_alignments = frozenset(user_alignments)

        logger.info(
            f"{self.config.component} created: weights={self.weights}, "
            f"alignment_affects_cost={self.config.alignment_affects_cost}, "
            f"punctuation_removal={self.config.punctuation_removal}, "
            f"user_alignments={len(self.user_alignments)}"
        )

    @classmethod
    def from_config(cls, path: Union[str, Path, None] = None) -> "FixedWeightTreeEditDistance":
        return cls(load_config(path))

    def _lookup(self, alignments: Alignments) -> AlignmentLookup:
        if isinstance(alignments, AlignmentLookup):
            lookup = alignments
        else:
            lookup = AlignmentLookup(alignments)
        if self.user_alignments:
            lookup = lookup.with_user_alignments(self.user_alignments)
        return lookup

    def _prepare(self, fragment: Fragment, side: str) -> Fragment:
        res = validate_fragment(fragment)
        if not res.is_valid:
            logger.warning(f"{side} fragment rejected: {res.errors}")
            raise MalformedTreeError(f"{side} fragment: " + "; ".join(res.errors))

        if self.config.punctuation_removal:
            fragment = remove_punctuation(fragment)

        limit = self.config.max_tree_size
        if limit is not None and len(fragment) > limit:
            raise TreeSizeLimitError(f"{side} tree has {len(fragment)} nodes, limit is {limit}")
        return fragment

    def calculate(self, t_fragment: Fragment, h_fragment: Fragment,
                  alignments: Alignments = None) -> DistanceResult:
        t_fragment = self._prepare(t_fragment, "T")
        h_fragment = self._prepare(h_fragment, "H")
        logger.debug(f"T fragment:{t_fragment}")
        logger.debug(f"H fragment:{h_fragment}")

        t_tree = LabeledTree.from_fragment(t_fragment)
        h_tree = LabeledTree.from_fragment(h_fragment)
        lookup = self._lookup(alignments)

        score = FixedWeightScore(
            t_tree, h_tree, lookup,
            weights=self.weights,
            alignment_affects_cost=self.config.alignment_affects_cost,
        )
        mapping = Mapping(t_tree, h_tree)
        raw = TreeEditDistance(score).calc(t_tree, h_tree, mapping)

        transformations = extract_transformations(t_tree, h_tree, lookup, mapping)
        normalized = normalize(
            raw, t_tree.size(), h_tree.size(), self.weights.delete, self.weights.insert
        )
        logger.debug(f"raw={raw}, normalized={normalized}, operations={len(mapping)}")

        return DistanceResult(
            raw_distance=raw,
            normalized_distance=normalized,
            transformations=tuple(transformations),
            operations=tuple(mapping.operations),
        )

    def calculate_conllx(self, t_text: str, h_text: str,
                         alignments: Alignments = None) -> DistanceResult:
        """То же, что calculate, но на входе CoNLL-X текст (предложения склеиваются)."""
        return self.calculate(fragment_from_conllx(t_text), fragment_from_conllx(h_text), alignments)
