import unittest

from rte_ted.core.data_structures import Fragment, Token
from rte_ted.distance.labeled_tree import LabeledTree
from rte_ted.exceptions import MalformedTreeError
from rte_ted.ingestion.loader import fragment_from_conllx

SAT = """1	The	the	DT	_	_	2	det	_	_
2	cat	cat	NN	_	_	3	nsubj	_	_
3	sat	sit	VBD	_	_	0	root	_	_
4	on	on	IN	_	_	3	prep	_	_
5	mat	mat	NN	_	_	4	pobj	_	_
"""


def token(i, head, deprel="dep"):
    return Token(id=i, form=f"w{i}", lemma=f"w{i}", pos="NN", head=head, deprel=deprel)


class TestLabeledTree(unittest.TestCase):
    def test_deprel_paths(self):
        tree = LabeledTree.from_fragment(fragment_from_conllx(SAT))

        self.assertEqual(tree.size(), 5)
        self.assertEqual(tree.get_token(4).deprel_path, "pobj#prep#root")
        self.assertEqual(tree.get_token(0).deprel_path, "det#nsubj#root")
        self.assertEqual(tree.get_token(2).deprel_path, "root")

    def test_structure(self):
        tree = LabeledTree.from_fragment(fragment_from_conllx(SAT))

        self.assertEqual(tree.parents, [1, 2, -1, 2, 3])
        self.assertEqual(tree.labels, [0, 1, 2, 3, 4])
        self.assertEqual(tree.roots(), [2])
        self.assertEqual(tree.children(2), [1, 3])
        self.assertEqual(tree.get_parent(4), 3)
        self.assertEqual(tree.get_label(4), 4)

    def test_forest(self):
        tree = LabeledTree.from_fragment(Fragment([token(0, -1, "root"), token(1, -1, "root")]))
        self.assertEqual(tree.roots(), [0, 1])
        self.assertEqual(tree.get_token(1).deprel_path, "root")

    def test_cycle(self):
        fragment = Fragment([token(0, 1), token(1, 0), token(2, -1)])
        with self.assertRaises(MalformedTreeError):
            LabeledTree.from_fragment(fragment)

    def test_out_of_range_parent(self):
        with self.assertRaises(MalformedTreeError):
            LabeledTree.from_fragment(Fragment([token(0, 3)]))

    def test_length_mismatch(self):
        with self.assertRaises(MalformedTreeError):
            LabeledTree([-1, 0], [0], [token(0, -1), token(1, 0)])

    def test_sparse_ids(self):
        with self.assertRaises(MalformedTreeError):
            LabeledTree.from_fragment(Fragment([token(0, -1), token(2, 0)]))

    def test_empty(self):
        tree = LabeledTree.from_fragment(Fragment())
        self.assertEqual(tree.size(), 0)
        self.assertEqual(tree.roots(), [])


if __name__ == '__main__':
    unittest.main()
