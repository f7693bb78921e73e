# rte_ted/distance/labeled_tree.py
import logging
from typing import List, Sequence

from rte_ted.core.data_structures import Fragment, Token
from rte_ted.exceptions import MalformedTreeError

logger = logging.getLogger(__name__)

DEPREL_SEPARATOR = "#"


class LabeledTree:
    """
    Упорядоченное дерево (или лес) поверх массива родителей.
    Узел i: parents[i] - индекс родителя (-1 у корня), labels[i] - id токена,
    tokens[i] - токен с уже вычисленным deprel_path.
    """

    def __init__(self, parents: Sequence[int], labels: Sequence[int], tokens: Sequence[Token]):
        if not (len(parents) == len(labels) == len(tokens)):
            raise MalformedTreeError(
                f"Inconsistent tree arrays: parents={len(parents)}, "
                f"labels={len(labels)}, tokens={len(tokens)}"
            )

        size = len(parents)
        for node, parent in enumerate(parents):
            if parent != -1 and not 0 <= parent < size:
                raise MalformedTreeError(f"Node {node}: parent {parent} out of range 0..{size - 1}")
            if parent == node:
                raise MalformedTreeError(f"Node {node} is its own parent")

        self._parents = list(parents)
        self._labels = list(labels)

        self._children: List[List[int]] = [[] for _ in range(size)]
        for node, parent in enumerate(self._parents):
            if parent != -1:
                self._children[parent].append(node)

        # deprel_path считается ровно один раз, когда известны все родители
        raw_tokens = list(tokens)
        self._tokens = [
            token.with_deprel_path(self._deprel_path(node, raw_tokens))
            for node, token in enumerate(raw_tokens)
        ]

    @classmethod
    def from_fragment(cls, fragment: Fragment) -> "LabeledTree":
        parents = []
        labels = []
        tokens = []
        for position, token in enumerate(fragment):
            # head хранит id родителя, поэтому id обязаны совпадать с позицией узла
            if token.id != position:
                raise MalformedTreeError(f"Token '{token.form}' has id {token.id} at position {position}")
            parents.append(token.head)
            labels.append(token.id)
            tokens.append(token)
        return cls(parents, labels, tokens)

    def _deprel_path(self, node: int, tokens: List[Token]) -> str:
        """
        Метки deprel от узла до корня включительно: "pobj#prep#root".
        Обход ограничен size() шагами, иначе в дереве цикл.
        """
        relations = []
        current = node
        steps = 0
        while current != -1:
            if steps >= self.size():
                raise MalformedTreeError(f"Cycle detected while walking from node {node} to the root")
            relations.append(tokens[current].deprel)
            current = self._parents[current]
            steps += 1
        return DEPREL_SEPARATOR.join(relations)

    def size(self) -> int:
        return len(self._parents)

    def __len__(self):
        return len(self._parents)

    def get_parent(self, node: int) -> int:
        return self._parents[node]

    def get_label(self, node: int) -> int:
        return self._labels[node]

    def get_token(self, node: int) -> Token:
        return self._tokens[node]

    @property
    def tokens(self) -> List[Token]:
        return list(self._tokens)

    @property
    def parents(self) -> List[int]:
        return list(self._parents)

    @property
    def labels(self) -> List[int]:
        return list(self._labels)

    def children(self, node: int) -> List[int]:
        return list(self._children[node])

    def roots(self) -> List[int]:
        return [node for node, parent in enumerate(self._parents) if parent == -1]

    def __repr__(self):
        return f"LabeledTree(size={self.size()}, roots={self.roots()})"
