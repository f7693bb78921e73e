# rte_ted/features.py
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Set

from rte_ted.distance.fixed_weight import DistanceResult
from rte_ted.distance.transformations import DELETION, INSERTION, MATCH, REPLACE

logger = logging.getLogger(__name__)

# Индекс 0 зарезервирован для примеров без единого известного признака
FAKE_ATTRIBUTE = "fake_attribute"


@dataclass(frozen=True)
class TransformationCategories:
    """Какие типы трансформаций превращаются в признаки."""
    replace: bool = True
    match: bool = True
    deletion: bool = True
    insertion: bool = True

    @classmethod
    def parse(cls, enabled: str) -> "TransformationCategories":
        # Проверка подстрокой: "match,ins,del,rep", "rep" и т.п.
        enabled = enabled or ""
        return cls(
            replace=REPLACE in enabled,
            match=MATCH in enabled,
            deletion=DELETION in enabled,
            insertion=INSERTION in enabled,
        )

    def __str__(self):
        enabled = [name for name, on in (
            (MATCH, self.match), (INSERTION, self.insertion),
            (DELETION, self.deletion), (REPLACE, self.replace),
        ) if on]
        return ",".join(enabled)


def extract_features(result: DistanceResult, categories: TransformationCategories = None) -> Set[str]:
    """Набор строковых признаков пары; отключенные категории пропускаются."""
    categories = categories or TransformationCategories()
    features = set()

    for trans in result.transformations:
        name = trans.render(categories.replace, categories.match, categories.deletion, categories.insertion)
        if name is None:
            continue
        features.add(name)

    return features


class FeatureIndex:
    """Словарь признак -> индекс в порядке первого появления."""

    def __init__(self):
        self._index: Dict[str, int] = {FAKE_ATTRIBUTE: 0}

    def fit(self, examples: Iterable[Iterable[str]]) -> "FeatureIndex":
        for features in examples:
            # порядок обхода множества не фиксирован
            for name in sorted(features):
                if name not in self._index:
                    self._index[name] = len(self._index)
        logger.info(f"number of features: {len(self._index) - 1}")
        return self

    def transform(self, features: Iterable[str]) -> List[int]:
        """Индексы известных признаков по возрастанию; пустой пример -> [0]."""
        indices = sorted({self._index[name] for name in features if name in self._index})
        return indices or [self._index[FAKE_ATTRIBUTE]]

    def fit_transform(self, examples: Iterable[Iterable[str]]) -> List[List[int]]:
        examples = [set(e) for e in examples]
        self.fit(examples)
        return [self.transform(e) for e in examples]

    @property
    def features(self) -> List[str]:
        return [name for name, _ in sorted(self._index.items(), key=lambda item: item[1])]

    def __contains__(self, name: str):
        return name in self._index

    def __getitem__(self, name: str) -> int:
        return self._index[name]

    def __len__(self):
        return len(self._index)
