import dataclasses
import unittest
from importlib.metadata import version

from svgroup.core_logic.constants import VERSION
from svgroup.core_logic.record import InvalidPositionError, VcfRecord
from svgroup.core_logic.settings import GraphSettings
from svgroup.core_logic.variants import Variant, variant_from_record
from svgroup.inputs.summary import FRAME_COLS, group_sizes, grouping_to_frame


class TestVariant(unittest.TestCase):
    def test_from_record(self):
        record = VcfRecord.from_line(
            "chr3\t1000\tdel7\tN\t<DEL>\t.\tPASS\tSVTYPE=DEL;SVLEN=-250"
        )
        variant = variant_from_record(record, 4, GraphSettings(use_type=True))
        self.assertEqual(variant, Variant(4, "del7", 1000, 750, "chr3_DEL"))
        self.assertEqual(variant.length, -250)

    def test_frozen(self):
        variant = Variant(0, "a", 1, 5, "chr1")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            variant.start = 2

    def test_bad_position(self):
        record = VcfRecord.from_line("chr3\t1e3\tx\tA\tAT\t.\tPASS\t.")
        with self.assertRaises(InvalidPositionError):
            variant_from_record(record, 0, GraphSettings())


class TestGraphSettings(unittest.TestCase):
    def test_defaults(self):
        settings = GraphSettings()
        self.assertFalse(settings.use_type)
        self.assertFalse(settings.use_strand)
        self.assertEqual(settings.label(), "chrom")

    def test_label(self):
        self.assertEqual(
            GraphSettings(use_type=True, use_strand=True).label(), "chrom+type+strand"
        )


class TestVersion(unittest.TestCase):
    def test_distribution_version_comes_from_constants(self):
        self.assertEqual(version("svgroup"), VERSION)


class TestSummary(unittest.TestCase):
    def setUp(self):
        self.grouping = {
            "chr1_DEL": [
                Variant(0, "a1", 100, 50, "chr1_DEL"),
                Variant(1, "b1", 110, 62, "chr1_DEL"),
            ],
            "chr2_INS": [Variant(1, "b2", 500, 530, "chr2_INS")],
        }

    def test_frame(self):
        df = grouping_to_frame(self.grouping)
        self.assertEqual(list(df.columns), FRAME_COLS)
        self.assertEqual(df.shape, (3, 6))
        self.assertEqual(list(df["id"]), ["a1", "b1", "b2"])
        self.assertEqual(list(df["length"]), [-50, -48, 30])
        self.assertEqual(list(df["sample"]), [0, 1, 1])

    def test_empty_frame(self):
        df = grouping_to_frame({})
        self.assertEqual(list(df.columns), FRAME_COLS)
        self.assertTrue(df.empty)

    def test_group_sizes(self):
        sizes = group_sizes(self.grouping)
        self.assertEqual(sizes.name, "n_variants")
        self.assertEqual(sizes.to_dict(), {"chr1_DEL": 2, "chr2_INS": 1})


if __name__ == "__main__":
    unittest.main()
