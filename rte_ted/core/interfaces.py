# rte_ted/core/interfaces.py
from abc import ABC, abstractmethod


class EditScore(ABC):
    """
    Модель стоимости операций редактирования дерева.
    Узлы передаются как 0-based индексы в соответствующих деревьях.
    """

    @abstractmethod
    def replace(self, node1: int, node2: int) -> float:
        pass

    @abstractmethod
    def insert(self, node2: int) -> float:
        pass

    @abstractmethod
    def delete(self, node1: int) -> float:
        pass
