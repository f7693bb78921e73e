import os
import tempfile
import unittest

from rte_ted.config import DistanceConfig
from rte_ted.main import main
from rte_ted.pipeline import EntailmentPair, RTEPipeline

T_TEXT = """1	The	the	DT	_	_	2	det	_	_
2	assassin	assassin	NN	_	_	4	nsubjpass	_	_
3	was	be	VBD	_	_	4	auxpass	_	_
4	convicted	convict	VBN	_	_	0	root	_	_
5	.	.	.	_	_	4	punct	_	_
"""

H_TEXT = T_TEXT.replace("assassin", "killer")

SYNONYM = [("assassin", "killer", "WORDNET__3.0__SYNONYM", 1.0, "TtoH")]


class TestRTEPipeline(unittest.TestCase):
    def setUp(self):
        self.pipeline = RTEPipeline(DistanceConfig())
        self.pairs = [
            EntailmentPair(pair_id="1", text_conllx=T_TEXT, hypothesis_conllx=H_TEXT,
                           links=SYNONYM, gold_label="ENTAILMENT"),
            EntailmentPair(pair_id="2", text_conllx=T_TEXT, hypothesis_conllx=H_TEXT,
                           gold_label="NONENTAILMENT"),
            # Некорректная строка: 3 поля
            EntailmentPair(pair_id="3", text_conllx="1 broken line\n", hypothesis_conllx=H_TEXT),
        ]

    def test_process_pair(self):
        res = self.pipeline.process_pair(self.pairs[0])
        self.assertEqual(res.pair_id, "1")
        self.assertEqual(res.result.raw_distance, 0.0)
        self.assertEqual(res.type_counts["match"], 5)
        self.assertEqual(res.gold_label, "ENTAILMENT")
        self.assertIn(
            "Type:match#Info:WORDNET__3.0__SYNONYM:TtoH#T_DPrelR:nsubjpass#root#H_DPrelR:nsubjpass#root",
            res.features
        )

    def test_malformed_pairs_are_skipped(self):
        results = self.pipeline.process_pairs(self.pairs)
        self.assertEqual([r.pair_id for r in results], ["1", "2"])
        self.assertEqual(results[1].result.raw_distance, 1.0)

    def test_bad_ids_do_not_stop_batch(self):
        pairs = [
            EntailmentPair(pair_id="zero-id", text_conllx="0	x	x	NN	_	_	_	root	_	_\n",
                           hypothesis_conllx=H_TEXT),
            EntailmentPair(pair_id="negative-head", text_conllx=T_TEXT,
                           hypothesis_conllx="1	x	x	NN	_	_	-3	root	_	_\n"),
            EntailmentPair(pair_id="ok", text_conllx=T_TEXT, hypothesis_conllx=H_TEXT),
        ]
        results = self.pipeline.process_pairs(pairs)
        self.assertEqual([r.pair_id for r in results], ["ok"])

    def test_cyclic_tree_is_skipped(self):
        cyclic = "1	a	a	NN	_	_	2	dep	_	_\n2	b	b	NN	_	_	1	dep	_	_\n"
        pairs = [
            EntailmentPair(pair_id="cycle", text_conllx=cyclic, hypothesis_conllx=H_TEXT),
            EntailmentPair(pair_id="ok", text_conllx=T_TEXT, hypothesis_conllx=H_TEXT),
        ]
        self.assertEqual([r.pair_id for r in self.pipeline.process_pairs(pairs)], ["ok"])

    def test_feature_categories_from_config(self):
        pipeline = RTEPipeline(DistanceConfig(transformations="rep"))
        res = pipeline.process_pair(self.pairs[1])
        self.assertEqual(res.features, {"Type:rep#Info:null#T_DPrelR:nsubjpass#root#H_DPrelR:nsubjpass#root"})

    def test_user_alignments(self):
        pipeline = RTEPipeline(user_alignments={"assassin_NN\tkiller_NN"})
        self.assertEqual(pipeline.process_pair(self.pairs[1]).result.raw_distance, 0.0)

    def test_to_dataframe(self):
        results = self.pipeline.process_pairs(self.pairs[:2])
        df = RTEPipeline.to_dataframe(results)

        self.assertEqual(len(df), 2)
        self.assertEqual(list(df["pair_id"]), ["1", "2"])
        self.assertEqual(list(df["match"]), [5, 4])
        self.assertEqual(list(df["rep"]), [0, 1])
        self.assertEqual(df["normalized_distance"].iloc[1], 0.1)

    def test_empty_dataframe(self):
        df = RTEPipeline.to_dataframe([])
        self.assertEqual(len(df), 0)
        self.assertIn("raw_distance", df.columns)

    def test_feature_index(self):
        results = self.pipeline.process_pairs(self.pairs[:2])
        index, vectors = RTEPipeline.build_feature_index(results)
        self.assertEqual(len(vectors), 2)
        # 4 совпадающих match-признака + match(syn) + rep + fake_attribute
        self.assertEqual(len(index), 7)


class TestCli(unittest.TestCase):
    def _write(self, content, suffix):
        fd, path = tempfile.mkstemp(suffix=suffix)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        self.addCleanup(os.remove, path)
        return path

    def test_main(self):
        t = self._write(T_TEXT, ".conll")
        h = self._write(H_TEXT, ".conll")
        links = self._write("assassin\tkiller\tWORDNET__3.0__SYNONYM\t1.0\tTtoH\n", ".tsv")
        self.assertEqual(main(["--text", t, "--hypothesis", h, "--alignments", links, "--features"]), 0)

    def test_main_malformed(self):
        t = self._write("1 broken line\n", ".conll")
        h = self._write(H_TEXT, ".conll")
        self.assertEqual(main(["--text", t, "--hypothesis", h]), 1)

    def test_main_bad_config(self):
        t = self._write(T_TEXT, ".conll")
        self.assertEqual(main(["--text", t, "--hypothesis", t, "--config", "/nonexistent.yaml"]), 2)


if __name__ == '__main__':
    unittest.main()
