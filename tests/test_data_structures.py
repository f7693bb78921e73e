import unittest

from pydantic import ValidationError

from rte_ted.core.data_structures import AlignmentEntry, Direction, Fragment, Token


class TestToken(unittest.TestCase):
    def test_negation_normalization(self):
        # Лемма "no" всегда получает deprel "neg"
        token = Token(id=0, form="No", lemma="no", pos="DT", head=1, deprel="det")
        self.assertEqual(token.deprel, "neg")

    def test_other_lemma_keeps_deprel(self):
        token = Token(id=0, form="Not", lemma="not", pos="RB", head=1, deprel="advmod")
        self.assertEqual(token.deprel, "advmod")

    def test_frozen(self):
        token = Token(id=0, form="cat", lemma="cat", pos="NN", head=-1, deprel="root")
        with self.assertRaises(ValidationError):
            token.form = "dog"

    def test_invalid_head(self):
        with self.assertRaises(ValidationError):
            Token(id=0, form="cat", lemma="cat", pos="NN", head=-2, deprel="root")

    def test_str_layout(self):
        token = Token(id=1, form="cats", lemma="cat", pos="NNS", head=-1, deprel="root")
        self.assertEqual(str(token), "1__cats__cat__NNS__-1__root__None")
        self.assertEqual(str(token.with_deprel_path("root")), "1__cats__cat__NNS__-1__root__root")

    def test_with_deprel_path_is_copy(self):
        token = Token(id=0, form="cat", lemma="cat", pos="NN", head=-1, deprel="root")
        copy = token.with_deprel_path("root")
        self.assertIsNone(token.deprel_path)
        self.assertEqual(copy.deprel_path, "root")
        self.assertTrue(copy.is_root)


class TestFragment(unittest.TestCase):
    def setUp(self):
        self.fragment = Fragment()
        self.fragment.add_token(Token(id=0, form="Cats", lemma="cat", pos="NNS", head=1, deprel="nsubj"))
        self.fragment.add_token(Token(id=1, form="sleep", lemma="sleep", pos="VBP", head=-1, deprel="root"))

    def test_one_based_access(self):
        self.assertEqual(self.fragment.get_token(1).form, "Cats")
        self.assertEqual(self.fragment.get_token(2).form, "sleep")

    def test_out_of_range(self):
        with self.assertRaises(IndexError):
            self.fragment.get_token(0)
        with self.assertRaises(IndexError):
            self.fragment.get_token(3)

    def test_size_and_iteration(self):
        self.assertEqual(self.fragment.size(), 2)
        self.assertEqual(len(self.fragment), 2)
        self.assertEqual([t.form for t in self.fragment], ["Cats", "sleep"])


class TestAlignmentEntry(unittest.TestCase):
    def test_info(self):
        entry = AlignmentEntry(link_info="WORDNET__3.0__SYNONYM", direction="TtoH")
        self.assertEqual(entry.direction, Direction.T_TO_H)
        self.assertEqual(entry.info, "WORDNET__3.0__SYNONYM:TtoH")
        self.assertEqual(entry.strength, 1.0)

    def test_invalid_direction(self):
        with self.assertRaises(ValidationError):
            AlignmentEntry(link_info="X", direction="sideways")


if __name__ == '__main__':
    unittest.main()
