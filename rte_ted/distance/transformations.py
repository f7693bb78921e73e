# rte_ted/distance/transformations.py
"""
Трансформации: операции редактирования, переинтерпретированные через выравнивания.

Замена с LOCAL-ENTAILMENT становится Match, любая другая замена - Replace,
вставка и удаление - Insertion и Deletion.
"""
import logging
from dataclasses import dataclass
from typing import ClassVar, List, Optional, Union

from rte_ted.alignment.lookup import AlignmentLookup, Judgment
from rte_ted.core.data_structures import Token
from rte_ted.distance import tree_edit_distance as ted
from rte_ted.distance.labeled_tree import LabeledTree

logger = logging.getLogger(__name__)

REPLACE = "rep"
MATCH = "match"
INSERTION = "ins"
DELETION = "del"

NULL_INFO = "null"


def _info(info: Optional[str]) -> str:
    return NULL_INFO if info is None else info


@dataclass(frozen=True)
class Match:
    info: Optional[str]
    token_t: Token
    token_h: Token
    judgment: Optional[Judgment] = Judgment.LOCAL_ENTAILMENT

    type: ClassVar[str] = MATCH

    def render(self, replace: bool = True, match: bool = True,
               deletion: bool = True, insertion: bool = True) -> Optional[str]:
        if not match:
            return None
        return (f"Type:{self.type}#Info:{_info(self.info)}"
                f"#T_DPrelR:{self.token_t.deprel_path}#H_DPrelR:{self.token_h.deprel_path}")

    def __str__(self):
        return f"Type: {self.type} Info: {_info(self.info)} token_T: {self.token_t} token_H: {self.token_h}"


@dataclass(frozen=True)
class Replace:
    info: Optional[str]
    token_t: Token
    token_h: Token
    # None - выравнивания нет; иначе LOCAL-CONTRADICTION или UNKNOWN
    judgment: Optional[Judgment] = None

    type: ClassVar[str] = REPLACE

    def render(self, replace: bool = True, match: bool = True,
               deletion: bool = True, insertion: bool = True) -> Optional[str]:
        if not replace:
            return None
        return (f"Type:{self.type}#Info:{_info(self.info)}"
                f"#T_DPrelR:{self.token_t.deprel_path}#H_DPrelR:{self.token_h.deprel_path}")

    def __str__(self):
        return f"Type: {self.type} Info: {_info(self.info)} token_T: {self.token_t} token_H: {self.token_h}"


@dataclass(frozen=True)
class Insertion:
    token_h: Token

    type: ClassVar[str] = INSERTION
    info: ClassVar[Optional[str]] = None
    token_t: ClassVar[Optional[Token]] = None

    def render(self, replace: bool = True, match: bool = True,
               deletion: bool = True, insertion: bool = True) -> Optional[str]:
        if not insertion:
            return None
        return f"Type:{self.type}#H_DPrelR:{self.token_h.deprel_path}"

    def __str__(self):
        return f"Type: {self.type} token_H: {self.token_h}"


@dataclass(frozen=True)
class Deletion:
    token_t: Token

    type: ClassVar[str] = DELETION
    info: ClassVar[Optional[str]] = None
    token_h: ClassVar[Optional[Token]] = None

    def render(self, replace: bool = True, match: bool = True,
               deletion: bool = True, insertion: bool = True) -> Optional[str]:
        if not deletion:
            return None
        return f"Type:{self.type}#T_DPrelR:{self.token_t.deprel_path}"

    def __str__(self):
        return f"Type: {self.type} token_T: {self.token_t}"


Transformation = Union[Match, Replace, Insertion, Deletion]


def extract_transformations(
        tree_t: LabeledTree,
        tree_h: LabeledTree,
        lookup: AlignmentLookup,
        mapping: ted.Mapping
) -> List[Transformation]:
    """По одной трансформации на операцию, в порядке mapping.operations."""
    transformations: List[Transformation] = []

    for op in mapping.operations:
        if isinstance(op, ted.Replace):
            token_t = tree_t.get_token(op.node1)
            token_h = tree_h.get_token(op.node2)
            judgment = lookup.judge(token_t, token_h)
            if judgment.is_entailment:
                trans = Match(judgment.info, token_t, token_h)
            else:
                trans = Replace(judgment.info, token_t, token_h, judgment.label)
        elif isinstance(op, ted.Insert):
            trans = Insertion(tree_h.get_token(op.node2))
        else:
            trans = Deletion(tree_t.get_token(op.node1))

        transformations.append(trans)
        logger.debug(f"transformation: {trans}")

    return transformations
