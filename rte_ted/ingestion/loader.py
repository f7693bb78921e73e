# rte_ted/ingestion/loader.py
import logging
from typing import List, Tuple

from conllu import parse
from conllu.exceptions import ParseException
from conllu.models import TokenList
from pydantic import ValidationError

from rte_ted.core.data_structures import Fragment, Token
from rte_ted.exceptions import MalformedInputError
from rte_ted.ingestion.preprocessing import merge_fragments

logger = logging.getLogger(__name__)

# CoNLL-X: id form lemma pos _ _ head deprel _ _
# Неиспользуемые колонки названы так, чтобы conllu не применял к ним свои парсеры
CONLLX_FIELDS = (
    "id", "form", "lemma", "pos", "unused_5", "unused_6", "head", "deprel", "unused_9", "unused_10"
)
N_FIELDS = len(CONLLX_FIELDS)


def _split_blocks(text: str) -> List[Tuple[int, str]]:
    """
    Делит текст на предложения по пустым строкам.
    Заодно проверяет число полей и приводит разделители к табуляции
    (conllu не понимает одиночные пробелы между колонками).

    Returns:
        Список (номер первой строки блока, нормализованный блок).
    """
    blocks = []
    buf = []
    start = None

    for line_no, line in enumerate(text.splitlines(), 1):
        stripped = line.strip()
        if not stripped:
            if buf:
                blocks.append((start, "\n".join(buf) + "\n"))
                buf = []
            continue

        if start is None or not buf:
            start = line_no

        if stripped.startswith("#"):
            buf.append(stripped)
            continue

        fields = stripped.split()
        if len(fields) != N_FIELDS:
            raise MalformedInputError(
                f"expected {N_FIELDS} fields, got {len(fields)}", line_no=line_no, line=line
            )
        buf.append("\t".join(fields))

    if buf:
        blocks.append((start, "\n".join(buf) + "\n"))

    return blocks


def fragment_from_tokenlist(token_list: TokenList, line_no: int = None) -> Fragment:
    """
    Строит Fragment из предложения conllu.
    Идентификаторы переводятся в 0-based, корень (head "_" или 0) получает head = -1.
    """
    fragment = Fragment()

    for token in token_list:
        token_id = token["id"]

        # Пропуск мульти-словных токенов (1-2) и пустых узлов (1.1)
        if isinstance(token_id, tuple):
            logger.debug(f"Skipping non-word token {token_id}")
            continue
        if not isinstance(token_id, int) or token_id < 1:
            raise MalformedInputError(f"invalid token id {token_id!r} for '{token['form']}'", line_no=line_no)

        head = token["head"]
        if head is not None and (not isinstance(head, int) or head < 0):
            raise MalformedInputError(f"invalid head {head!r} for '{token['form']}'", line_no=line_no)
        if head is None or head == 0:
            head = -1
        else:
            head = head - 1

        try:
            token_obj = Token(
                id=token_id - 1,
                form=token["form"],
                lemma=token["lemma"],
                pos=token["pos"],
                head=head,
                deprel=token["deprel"],
            )
        except ValidationError as e:
            raise MalformedInputError(str(e), line_no=line_no) from e
        fragment.add_token(token_obj)

    return fragment


def parse_conllx(text: str) -> List[Fragment]:
    """
    Разбирает CoNLL-X текст (одно или несколько предложений).
    Возвращает по фрагменту на предложение.
    """
    fragments = []

    for start, block in _split_blocks(text):
        try:
            sentences = parse(block, fields=CONLLX_FIELDS)
        except ParseException as e:
            raise MalformedInputError(str(e), line_no=start) from e

        for sentence in sentences:
            fragments.append(fragment_from_tokenlist(sentence, line_no=start))

    logger.debug(f"Parsed {len(fragments)} sentences")
    return fragments


def fragment_from_conllx(text: str) -> Fragment:
    """
    Как parse_conllx, но все предложения склеиваются в один фрагмент
    (несколько корней, т.е. лес).
    """
    fragments = parse_conllx(text)
    if len(fragments) == 1:
        return fragments[0]
    return merge_fragments(fragments)
