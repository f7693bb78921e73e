# rte_ted/pipeline.py
import logging
from collections import Counter
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

import pandas as pd
from pydantic import BaseModel
from tqdm import tqdm

from rte_ted.alignment.lookup import AlignmentLookup
from rte_ted.components import create_component
from rte_ted.config import DistanceConfig
from rte_ted.distance.fixed_weight import DistanceResult
from rte_ted.distance.transformations import DELETION, INSERTION, MATCH, REPLACE
from rte_ted.exceptions import MalformedInputError, MalformedTreeError
from rte_ted.features import FeatureIndex, TransformationCategories, extract_features

logger = logging.getLogger(__name__)


class EntailmentPair(BaseModel):
    """Пара T/H в CoNLL-X с необязательными выравниваниями и золотой меткой."""
    pair_id: str
    text_conllx: str
    hypothesis_conllx: str
    # (form_T, form_H, link_info, strength, direction)
    links: List[Tuple[str, str, str, float, str]] = []
    gold_label: Optional[str] = None


@dataclass
class PairResult:
    pair_id: str
    result: DistanceResult
    features: Set[str] = field(default_factory=set)
    gold_label: Optional[str] = None

    @property
    def type_counts(self) -> Counter:
        return Counter(t.type for t in self.result.transformations)


class RTEPipeline:
    """
    Главный класс-оркестратор.
    Пара T/H -> расстояние и трансформации -> строковые признаки для классификатора.
    """

    def __init__(self, config: Optional[DistanceConfig] = None,
                 lookup: Optional[AlignmentLookup] = None,
                 user_alignments: Optional[Iterable[str]] = None):
        self.config = config or DistanceConfig()
        self.lookup = lookup or AlignmentLookup()
        self.categories = TransformationCategories.parse(self.config.transformations)
        self.component = create_component(self.config, user_alignments=user_alignments)

        logger.info(f"Initializing RTE pipeline, feature categories: '{self.categories}'")

    def _lookup_for(self, pair: EntailmentPair) -> AlignmentLookup:
        if pair.links:
            return AlignmentLookup.from_links(pair.links, self.lookup.user_alignments)
        return self.lookup

    def process_pair(self, pair: EntailmentPair) -> PairResult:
        logger.debug(f"processing pair: {pair.pair_id}")
        result = self.component.calculate_conllx(
            pair.text_conllx, pair.hypothesis_conllx, self._lookup_for(pair)
        )
        return PairResult(
            pair_id=pair.pair_id,
            result=result,
            features=extract_features(result, self.categories),
            gold_label=pair.gold_label,
        )

    def _process_or_skip(self, pair: EntailmentPair) -> Optional[PairResult]:
        try:
            return self.process_pair(pair)
        except (MalformedInputError, MalformedTreeError) as e:
            logger.warning(f"Skipping pair {pair.pair_id}: {e}")
            return None

    def process_pairs(self, pairs: Iterable[EntailmentPair], workers: int = 1) -> List[PairResult]:
        """Обработка набора пар; некорректные пары пропускаются с предупреждением."""
        pairs = list(pairs)
        logger.info(f"Processing {len(pairs)} pairs (workers={workers})...")

        if workers > 1:
            with ProcessPoolExecutor(max_workers=workers) as executor:
                processed = list(tqdm(
                    executor.map(self._process_or_skip, pairs),
                    total=len(pairs), desc="Processing pairs"
                ))
        else:
            processed = [self._process_or_skip(pair) for pair in tqdm(pairs, desc="Processing pairs")]

        results = [r for r in processed if r is not None]
        skipped = len(pairs) - len(results)
        if skipped:
            logger.warning(f"Skipped {skipped} malformed pairs")
        return results

    @staticmethod
    def build_feature_index(results: List[PairResult]) -> Tuple[FeatureIndex, List[List[int]]]:
        index = FeatureIndex()
        vectors = index.fit_transform(r.features for r in results)
        return index, vectors

    @staticmethod
    def to_dataframe(results: List[PairResult]) -> pd.DataFrame:
        columns = [
            "pair_id", "gold_label", "raw_distance", "normalized_distance",
            MATCH, REPLACE, INSERTION, DELETION, "n_features",
        ]
        records = []
        for r in results:
            counts = r.type_counts
            records.append({
                "pair_id": r.pair_id,
                "gold_label": r.gold_label,
                "raw_distance": r.result.raw_distance,
                "normalized_distance": r.result.normalized_distance,
                MATCH: counts.get(MATCH, 0),
                REPLACE: counts.get(REPLACE, 0),
                INSERTION: counts.get(INSERTION, 0),
                DELETION: counts.get(DELETION, 0),
                "n_features": len(r.features),
            })
        return pd.DataFrame(records, columns=columns)
