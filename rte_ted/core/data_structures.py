# rte_ted/core/data_structures.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class Token(BaseModel):
    """
    Узел дерева зависимостей (одна строка CoNLL-X).
    id и head - 0-based, у корня head == -1.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    form: str
    lemma: str
    pos: str
    head: int
    deprel: str

    # Путь deprel-меток от узла до корня ("pobj#prep#root").
    # Заполняется один раз в LabeledTree, когда известны все родители.
    deprel_path: Optional[str] = None

    @model_validator(mode='before')
    @classmethod
    def normalize_negation(cls, data):
        # Историческая нормализация: лемма "no" всегда считается отрицанием
        if isinstance(data, dict) and data.get("lemma") == "no":
            data = {**data, "deprel": "neg"}
        return data

    @model_validator(mode='after')
    def check_head(self):
        if self.id < 0:
            raise ValueError(f"Invalid id for token '{self.form}': {self.id}")
        if self.head < -1:
            raise ValueError(f"Invalid head for token '{self.form}': {self.head}")
        return self

    @property
    def is_root(self) -> bool:
        return self.head == -1

    def with_deprel_path(self, path: str) -> "Token":
        return self.model_copy(update={"deprel_path": path})

    def __str__(self):
        return "__".join(str(v) for v in (
            self.id, self.form, self.lemma, self.pos, self.head, self.deprel, self.deprel_path
        ))


@dataclass
class Fragment:
    """
    Упорядоченный набор токенов одного предложения (или склеенного текста).
    Внешняя индексация - с 1, как в CoNLL-X; внутренние id - с 0.
    """
    tokens: List[Token] = field(default_factory=list)

    def get_token(self, token_id: int) -> Token:
        if token_id < 1 or token_id > len(self.tokens):
            raise IndexError(f"Token {token_id} out of range 1..{len(self.tokens)}")
        return self.tokens[token_id - 1]

    def add_token(self, token: Token):
        self.tokens.append(token)

    def size(self) -> int:
        return len(self.tokens)

    def __len__(self):
        return len(self.tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    def __str__(self):
        return "".join(f"\n{t}" for t in self.tokens)


class Direction(str, Enum):
    T_TO_H = "TtoH"
    H_TO_T = "HtoT"

    def __str__(self):
        return self.value


class AlignmentEntry(BaseModel):
    """
    Выравнивание пары слов, полученное от внешнего aligner-а.
    link_info - ресурс и отношение, например WORDNET__3.0__SYNONYM.
    """
    model_config = ConfigDict(frozen=True)

    link_info: str
    strength: float = 1.0
    direction: Direction = Direction.T_TO_H

    @property
    def info(self) -> str:
        return f"{self.link_info}:{self.direction}"
