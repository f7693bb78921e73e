# rte_ted/ingestion/preprocessing.py
import logging
from typing import Dict, Iterable

from rte_ted.core.data_structures import Fragment, Token
from rte_ted.exceptions import MalformedTreeError

logger = logging.getLogger(__name__)

PUNCT_DEPREL = "punct"


def _reindex(token: Token, id_map: Dict[int, int]) -> Token:
    if token.head != -1 and token.head not in id_map:
        raise MalformedTreeError(f"Token {token.id} ('{token.form}'): head {token.head} does not exist")
    head = -1 if token.head == -1 else id_map[token.head]
    return token.model_copy(update={"id": id_map[token.id], "head": head})


def remove_punctuation(fragment: Fragment) -> Fragment:
    """
    Удаляет знаки препинания (deprel == "punct"), у которых нет зависимых.
    Оставшиеся id перенумеровываются подряд, head пересчитываются через ту же карту.
    Пунктуация-корень не удаляется.
    """
    has_children = {t.head for t in fragment if t.head != -1}

    kept = [
        t for t in fragment
        if not (t.deprel == PUNCT_DEPREL and t.id not in has_children and not t.is_root)
    ]

    # old id -> new id
    id_map = {t.id: new_id for new_id, t in enumerate(kept)}
    cleaned = Fragment([_reindex(t, id_map) for t in kept])

    removed = len(fragment) - len(cleaned)
    if removed:
        logger.debug(f"Removed {removed} punctuation tokens")
    return cleaned


def merge_fragments(fragments: Iterable[Fragment]) -> Fragment:
    """
    Склеивает несколько предложений в один фрагмент.
    id и head каждого предложения сдвигаются на число уже добавленных токенов,
    корни предложений остаются корнями (получается лес).
    """
    merged = Fragment()
    offset = 0

    for fragment in fragments:
        id_map = {t.id: t.id + offset for t in fragment}
        for token in fragment:
            merged.add_token(_reindex(token, id_map))
        offset += len(fragment)

    return merged
