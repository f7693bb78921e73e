# rte_ted/alignment/lookup.py
import logging
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, NamedTuple, Optional, Set, Tuple, Union

from rte_ted.core.data_structures import AlignmentEntry, Direction, Token
from rte_ted.exceptions import MalformedInputError

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "__"
CONTRADICTION_MARKER = "ANTONYM"


class Judgment(str, Enum):
    LOCAL_ENTAILMENT = "LOCAL-ENTAILMENT"
    LOCAL_CONTRADICTION = "LOCAL-CONTRADICTION"
    UNKNOWN = "UNKNOWN"

    def __str__(self):
        return self.value


class SubstitutionJudgment(NamedTuple):
    """Результат классификации замены: метка (или None) и инфо ресурса."""
    label: Optional[Judgment] = None
    info: Optional[str] = None

    @property
    def is_entailment(self) -> bool:
        return self.label == Judgment.LOCAL_ENTAILMENT


NO_JUDGMENT = SubstitutionJudgment()

# (form_T, form_H, link_info, strength, direction)
Link = Tuple[str, str, str, float, Union[Direction, str]]


def alignment_key(left: str, right: str) -> str:
    return f"{left}{KEY_SEPARATOR}{right}"


def user_alignment_key(token_t: Token, token_h: Token) -> str:
    # Формат строки файла ручных выравниваний: "animal_NN\tdog_NN"
    return f"{token_t.form}_{token_t.pos}\t{token_h.form}_{token_h.pos}"


class AlignmentLookup:
    """
    Неизменяемый словарь выравниваний "T__H" -> AlignmentEntry плюс набор ручных выравниваний.
    Отсутствие выравнивания - нормальная ситуация, а не ошибка.
    """

    def __init__(
            self,
            entries: Optional[Dict[str, AlignmentEntry]] = None,
            user_alignments: Optional[Iterable[str]] = None
    ):
        self._entries: Dict[str, AlignmentEntry] = dict(entries or {})
        self._user_alignments: FrozenSet[str] = frozenset(user_alignments or ())

    @classmethod
    def from_links(
            cls,
            links: Iterable[Link],
            user_alignments: Optional[Iterable[str]] = None
    ) -> "AlignmentLookup":
        """
        Строит словарь из ссылок aligner-а.
        Если пара встречается несколько раз, остается первая запись.
        """
        entries: Dict[str, AlignmentEntry] = {}
        duplicates = 0

        for form_t, form_h, link_info, strength, direction in links:
            key = alignment_key(form_t, form_h)
            if key in entries:
                duplicates += 1
                continue
            entries[key] = AlignmentEntry(
                link_info=link_info,
                strength=float(strength),
                direction=Direction(str(direction)),
            )

        if duplicates:
            logger.debug(f"Ignored {duplicates} duplicate alignment links")
        return cls(entries, user_alignments)

    def with_user_alignments(self, user_alignments: Iterable[str]) -> "AlignmentLookup":
        return AlignmentLookup(self._entries, self._user_alignments | frozenset(user_alignments))

    def get(self, key: str) -> Optional[AlignmentEntry]:
        return self._entries.get(key)

    def find(self, token_t: Token, token_h: Token) -> Optional[AlignmentEntry]:
        """Поиск по формам, затем по леммам."""
        entry = self._entries.get(alignment_key(token_t.form, token_h.form))
        if entry is None:
            entry = self._entries.get(alignment_key(token_t.lemma, token_h.lemma))
        return entry

    @property
    def user_alignments(self) -> FrozenSet[str]:
        return self._user_alignments

    def judge(self, token_t: Token, token_h: Token) -> SubstitutionJudgment:
        """
        Классифицирует замену token_t -> token_h.

        Выравнивание учитывается только при совпадении deprel.
        Совпадение лемм (без учета регистра) или ручное выравнивание дают
        LOCAL-ENTAILMENT без инфо; иначе решает запись aligner-а:
        HtoT -> UNKNOWN, антоним -> LOCAL-CONTRADICTION, остальное -> LOCAL-ENTAILMENT.
        """
        if token_t.deprel != token_h.deprel:
            return NO_JUDGMENT

        if token_t.lemma.lower() == token_h.lemma.lower() \
                or user_alignment_key(token_t, token_h) in self._user_alignments:
            return SubstitutionJudgment(Judgment.LOCAL_ENTAILMENT, None)

        entry = self.find(token_t, token_h)
        if entry is None:
            return NO_JUDGMENT

        if entry.direction == Direction.H_TO_T:
            return SubstitutionJudgment(Judgment.UNKNOWN, entry.info)
        if CONTRADICTION_MARKER in entry.link_info:
            return SubstitutionJudgment(Judgment.LOCAL_CONTRADICTION, entry.info)
        return SubstitutionJudgment(Judgment.LOCAL_ENTAILMENT, entry.info)

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key: str):
        return key in self._entries

    def __repr__(self):
        return f"AlignmentLookup(entries={len(self._entries)}, user_alignments={len(self._user_alignments)})"


def read_links(path: Union[str, Path]) -> List[Link]:
    """
    TSV с выходом aligner-а: T, H, link_info, strength, direction.
    strength и direction можно опустить (1.0 и TtoH).
    """
    links: List[Link] = []
    with open(path, 'r', encoding='utf-8') as f:
        for line_no, line in enumerate(f, 1):
            line = line.rstrip("\r\n")
            if not line.strip() or line.startswith("#"):
                continue

            fields = line.split("\t")
            if not 3 <= len(fields) <= 5:
                raise MalformedInputError(
                    f"expected 3-5 tab-separated fields, got {len(fields)}", line_no=line_no, line=line
                )
            form_t, form_h, link_info = fields[:3]
            try:
                strength = float(fields[3]) if len(fields) > 3 else 1.0
                direction = Direction(fields[4]) if len(fields) > 4 else Direction.T_TO_H
            except ValueError as e:
                raise MalformedInputError(str(e), line_no=line_no, line=line) from e
            links.append((form_t, form_h, link_info, strength, direction))

    logger.info(f"Loaded {len(links)} alignment links from {path}")
    return links


def load_user_alignments(path: Union[str, Path, None]) -> Set[str]:
    """
    Читает файл ручных выравниваний (строка "animal_NN\tdog_NN").
    Пустой путь - пустой набор; пустые строки пропускаются.
    """
    if not path:
        return set()

    result = set()
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.rstrip("\r\n")
            if line.strip():
                result.add(line)

    logger.info(f"Loaded {len(result)} user alignments from {path}")
    return result
