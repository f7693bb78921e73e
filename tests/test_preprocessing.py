import unittest

from rte_ted.core.data_structures import Fragment, Token
from rte_ted.exceptions import MalformedTreeError
from rte_ted.ingestion.loader import parse_conllx
from rte_ted.ingestion.preprocessing import merge_fragments, remove_punctuation
from rte_ted.ingestion.validators import FragmentValidator, validate_fragment

HELLO = """1	Hello	hello	UH	_	_	3	discourse	_	_
2	,	,	,	_	_	3	punct	_	_
3	world	world	NN	_	_	0	root	_	_
4	!	!	.	_	_	3	punct	_	_
"""


def make_fragment(heads):
    return Fragment([
        Token(id=i, form=f"w{i}", lemma=f"w{i}", pos="NN", head=h, deprel="dep")
        for i, h in enumerate(heads)
    ])


class TestPunctuationRemoval(unittest.TestCase):
    def test_removes_leaf_punctuation(self):
        fragment = parse_conllx(HELLO)[0]
        cleaned = remove_punctuation(fragment)

        self.assertEqual([t.form for t in cleaned], ["Hello", "world"])
        self.assertEqual([t.id for t in cleaned], [0, 1])
        # Hello -> world (старый id 2, новый 1)
        self.assertEqual([t.head for t in cleaned], [1, -1])

    def test_keeps_punctuation_with_dependents(self):
        fragment = Fragment([
            Token(id=0, form="-", lemma="-", pos=":", head=-1, deprel="root"),
            Token(id=1, form="(", lemma="(", pos="(", head=2, deprel="punct"),
            Token(id=2, form="x", lemma="x", pos="NN", head=0, deprel="punct"),
        ])
        cleaned = remove_punctuation(fragment)
        # "(" - лист, удаляется; "x" имеет зависимого "(" в исходном дереве, остается
        self.assertEqual([t.form for t in cleaned], ["-", "x"])
        self.assertEqual([t.head for t in cleaned], [-1, 0])

    def test_no_punctuation_is_identity(self):
        fragment = make_fragment([1, -1])
        self.assertEqual(remove_punctuation(fragment).tokens, fragment.tokens)

    def test_dangling_head(self):
        fragment = Fragment([Token(id=0, form="a", lemma="a", pos="NN", head=5, deprel="dep")])
        with self.assertRaises(MalformedTreeError):
            remove_punctuation(fragment)


class TestMerge(unittest.TestCase):
    def test_offsets(self):
        merged = merge_fragments([make_fragment([1, -1]), make_fragment([-1, 0, 0])])
        self.assertEqual([t.id for t in merged], [0, 1, 2, 3, 4])
        self.assertEqual([t.head for t in merged], [1, -1, -1, 2, 2])

    def test_empty(self):
        self.assertEqual(len(merge_fragments([])), 0)


class TestFragmentValidator(unittest.TestCase):
    def test_valid(self):
        res = validate_fragment(parse_conllx(HELLO)[0])
        self.assertTrue(res)
        self.assertEqual(res.errors, [])

    def test_cycle(self):
        res = validate_fragment(make_fragment([1, 0, -1]))
        self.assertFalse(res.is_valid)
        self.assertTrue(any("Цикл" in e for e in res.errors))

    def test_out_of_range_head(self):
        res = validate_fragment(make_fragment([-1, 7]))
        self.assertFalse(res.is_valid)

    def test_self_head_and_no_root(self):
        res = validate_fragment(make_fragment([0]))
        self.assertFalse(res.is_valid)
        self.assertEqual(len(res.errors), 2)

    def test_batch(self):
        stats = FragmentValidator.validate_batch([make_fragment([-1]), make_fragment([1, 0])])
        self.assertEqual(stats["total"], 2)
        self.assertEqual(stats["valid"], 1)
        self.assertEqual(stats["errors"][0]["index"], 1)


if __name__ == '__main__':
    unittest.main()
