# rte_ted/ingestion/validators.py
import logging
from typing import Any, Dict, List

import networkx as nx

from rte_ted.core.data_structures import Fragment

logger = logging.getLogger(__name__)


class ValidationResult:
    """DTO для результатов валидации."""

    def __init__(self, is_valid: bool, errors: List[str]):
        self.is_valid = is_valid
        self.errors = errors

    def __bool__(self):
        return self.is_valid

    def __repr__(self):
        return f"ValidationResult(is_valid={self.is_valid}, errors={self.errors})"


class FragmentValidator:
    """
    Проверка структуры фрагмента до построения дерева:
    плотные 0-based id, существующие head, наличие корня, отсутствие циклов.
    """

    @staticmethod
    def validate_fragment(fragment: Fragment) -> ValidationResult:
        errors = []
        size = len(fragment)

        # 1. id должны идти подряд с нуля (порядок строк CoNLL-X)
        for position, token in enumerate(fragment):
            if token.id != position:
                errors.append(f"Token '{token.form}': id {token.id} at position {position}")

        # 2. Проверка HEAD
        roots = 0
        g = nx.DiGraph()
        for token in fragment:
            g.add_node(token.id)
            if token.head == -1:
                roots += 1
            elif token.head == token.id:
                errors.append(f"Token {token.id}: HEAD ссылается на сам токен")
            elif token.head >= size:
                errors.append(f"Token {token.id}: HEAD {token.head} ссылается на несуществующий ID")
            else:
                g.add_edge(token.head, token.id)

        # 3. Структурная проверка
        if size and roots == 0:
            errors.append("ERROR: Не найдено ни одного корня")

        try:
            cycle = nx.find_cycle(g)
            errors.append(f"ERROR: Цикл в дереве: {cycle}")
        except nx.NetworkXNoCycle:
            pass

        return ValidationResult(len(errors) == 0, errors)

    @staticmethod
    def validate_batch(fragments: List[Fragment]) -> Dict[str, Any]:
        """Агрегированная статистика валидации набора фрагментов."""
        stats = {
            "total": len(fragments),
            "valid": 0,
            "invalid": 0,
            "errors": []
        }

        for i, fragment in enumerate(fragments):
            res = FragmentValidator.validate_fragment(fragment)
            if res.is_valid:
                stats["valid"] += 1
            else:
                stats["invalid"] += 1
                stats["errors"].append({"index": i, "issues": res.errors})

        return stats


def validate_fragment(fragment: Fragment) -> ValidationResult:
    return FragmentValidator.validate_fragment(fragment)
