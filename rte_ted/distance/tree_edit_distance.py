# rte_ted/distance/tree_edit_distance.py
"""
Tree edit distance (Zhang & Shasha, 1989) с восстановлением последовательности операций.

Деревья нумеруются в postorder, для каждого узла хранится самый левый лист (lmd),
расстояния считаются по парам keyroots через таблицы forest distance.
Лес (несколько корней) обрабатывается через виртуальный корень, который
всегда сопоставляется виртуальному корню другого дерева и никогда не удаляется.
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from rte_ted.core.interfaces import EditScore
from rte_ted.exceptions import MalformedTreeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Replace:
    node1: int
    node2: int

    def __str__(self):
        return f"rep:{self.node1},{self.node2}"


@dataclass(frozen=True)
class Insert:
    node2: int

    def __str__(self):
        return f"ins:{self.node2}"


@dataclass(frozen=True)
class Delete:
    node1: int

    def __str__(self):
        return f"del:{self.node1}"


Operation = Union[Replace, Insert, Delete]


class Mapping:
    """Последовательность операций, превращающая tree1 в tree2."""

    def __init__(self, tree1, tree2):
        self.tree1 = tree1
        self.tree2 = tree2
        self.operations: List[Operation] = []

    def get_sequence(self) -> List[str]:
        # Формат: rep:2,3 ins:2 del:4
        return [str(op) for op in self.operations]

    def all_replacements(self) -> List[Tuple[int, int]]:
        return [(op.node1, op.node2) for op in self.operations if isinstance(op, Replace)]

    def all_insertions(self) -> List[int]:
        return [op.node2 for op in self.operations if isinstance(op, Insert)]

    def all_deletions(self) -> List[int]:
        return [op.node1 for op in self.operations if isinstance(op, Delete)]

    def tree1_operation(self, node1: int) -> int:
        """Узел tree2, с которым сопоставлен node1, или -1 (удален)."""
        for op in self.operations:
            if isinstance(op, Replace) and op.node1 == node1:
                return op.node2
        return -1

    def tree2_operation(self, node2: int) -> int:
        """Узел tree1, с которым сопоставлен node2, или -1 (вставлен)."""
        for op in self.operations:
            if isinstance(op, Replace) and op.node2 == node2:
                return op.node1
        return -1

    def __len__(self):
        return len(self.operations)

    def __repr__(self):
        return f"Mapping({' '.join(self.get_sequence())})"


class _AnnotatedTree:
    """
    Postorder-нумерация дерева с виртуальным корнем.
    nodes[k] - исходный индекс узла (virtual == size), lmd[k] - самый левый лист.
    """

    def __init__(self, tree):
        size = tree.size()
        self.virtual = size

        children: List[List[int]] = [[] for _ in range(size + 1)]
        for node in range(size):
            parent = tree.get_parent(node)
            children[size if parent == -1 else parent].append(node)

        self.nodes: List[int] = []
        self.lmd: List[int] = []
        post_index = {}

        # Итеративный postorder, дети в порядке индексов (порядок слов)
        stack = [(self.virtual, 0)]
        while stack:
            node, k = stack.pop()
            if k < len(children[node]):
                stack.append((node, k + 1))
                stack.append((children[node][k], 0))
                continue
            idx = len(self.nodes)
            post_index[node] = idx
            self.nodes.append(node)
            if children[node]:
                self.lmd.append(self.lmd[post_index[children[node][0]]])
            else:
                self.lmd.append(idx)

        if len(self.nodes) != size + 1:
            # Узлы на цикле недостижимы из корней
            raise MalformedTreeError(
                f"Tree is not a forest: {size + 1 - len(self.nodes)} nodes unreachable from roots"
            )

        # keyroots = {k | не существует k' > k с lmd(k') == lmd(k)}
        last = {}
        for k, leftmost in enumerate(self.lmd):
            last[leftmost] = k
        self.keyroots = sorted(last.values())

    def __len__(self):
        return len(self.nodes)


class TreeEditDistance:
    """
    Расстояние редактирования упорядоченных деревьев с произвольной моделью стоимости.
    Если передан Mapping, в него записывается оптимальная последовательность операций.
    """

    def __init__(self, score: EditScore):
        self.score = score

    def calc(self, tree1, tree2, mapping: Optional[Mapping] = None) -> float:
        a = _AnnotatedTree(tree1)
        b = _AnnotatedTree(tree2)

        costs = self._costs(a, b)
        td = [[0.0] * len(b) for _ in range(len(a))]

        for i in a.keyroots:
            for j in b.keyroots:
                self._forest_distance(a, b, i, j, td, costs)

        distance = td[len(a) - 1][len(b) - 1]

        if mapping is not None:
            mapping.operations = self._reconstruct(a, b, td, costs)
            logger.debug(f"Operations: {' '.join(mapping.get_sequence())}")

        return distance

    def _costs(self, a: _AnnotatedTree, b: _AnnotatedTree):
        """Кеш стоимостей в postorder-индексах; операции над виртуальным корнем запрещены."""
        inf = math.inf

        delete = [inf if n == a.virtual else self.score.delete(n) for n in a.nodes]
        insert = [inf if n == b.virtual else self.score.insert(n) for n in b.nodes]

        replace = []
        for n1 in a.nodes:
            row = []
            for n2 in b.nodes:
                if n1 == a.virtual and n2 == b.virtual:
                    row.append(0.0)
                elif n1 == a.virtual or n2 == b.virtual:
                    row.append(inf)
                else:
                    row.append(self.score.replace(n1, n2))
            replace.append(row)

        return delete, insert, replace

    @staticmethod
    def _forest_distance(a, b, i, j, td, costs) -> List[List[float]]:
        delete, insert, replace = costs
        al, bl = a.lmd, b.lmd
        li, lj = al[i], bl[j]
        ioff, joff = li - 1, lj - 1
        m, n = i - li + 2, j - lj + 2

        fd = [[0.0] * n for _ in range(m)]
        for x in range(1, m):
            fd[x][0] = fd[x - 1][0] + delete[x + ioff]
        for y in range(1, n):
            fd[0][y] = fd[0][y - 1] + insert[y + joff]

        for x in range(1, m):
            xi = x + ioff
            for y in range(1, n):
                yj = y + joff
                if al[xi] == li and bl[yj] == lj:
                    # Оба узла на левых путях: обычная замена
                    fd[x][y] = min(
                        fd[x - 1][y] + delete[xi],
                        fd[x][y - 1] + insert[yj],
                        fd[x - 1][y - 1] + replace[xi][yj],
                    )
                    td[xi][yj] = fd[x][y]
                else:
                    # Используем уже посчитанное расстояние поддеревьев
                    p, q = al[xi] - 1 - ioff, bl[yj] - 1 - joff
                    fd[x][y] = min(
                        fd[x - 1][y] + delete[xi],
                        fd[x][y - 1] + insert[yj],
                        fd[p][q] + td[xi][yj],
                    )
        return fd

    def _reconstruct(self, a, b, td, costs) -> List[Operation]:
        """
        Обратный проход по таблицам forest distance.
        При равенстве вариантов порядок предпочтения: замена, удаление, вставка.
        """
        delete, insert, replace = costs
        al, bl = a.lmd, b.lmd
        collected: List[Operation] = []

        stack = [(len(a) - 1, len(b) - 1)]
        while stack:
            i, j = stack.pop()
            fd = self._forest_distance(a, b, i, j, td, costs)
            li, lj = al[i], bl[j]
            ioff, joff = li - 1, lj - 1
            x, y = i - li + 1, j - lj + 1

            while x > 0 or y > 0:
                xi, yj = x + ioff, y + joff

                if y == 0:
                    collected.append(Delete(a.nodes[xi]))
                    x -= 1
                    continue
                if x == 0:
                    collected.append(Insert(b.nodes[yj]))
                    y -= 1
                    continue

                current = fd[x][y]
                if al[xi] == li and bl[yj] == lj:
                    if current == fd[x - 1][y - 1] + replace[xi][yj]:
                        if a.nodes[xi] != a.virtual:
                            collected.append(Replace(a.nodes[xi], b.nodes[yj]))
                        x, y = x - 1, y - 1
                        continue
                else:
                    p, q = al[xi] - 1 - ioff, bl[yj] - 1 - joff
                    if current == fd[p][q] + td[xi][yj]:
                        stack.append((xi, yj))
                        x, y = p, q
                        continue

                if current == fd[x - 1][y] + delete[xi]:
                    collected.append(Delete(a.nodes[xi]))
                    x -= 1
                else:
                    collected.append(Insert(b.nodes[yj]))
                    y -= 1

        # Сбор идет справа налево; разворачиваем в порядок снизу вверх
        collected.reverse()
        return collected


def tree_edit_distance(tree1, tree2, score: EditScore) -> Tuple[float, Mapping]:
    mapping = Mapping(tree1, tree2)
    distance = TreeEditDistance(score).calc(tree1, tree2, mapping)
    return distance, mapping
