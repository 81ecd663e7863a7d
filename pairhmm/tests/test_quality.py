import numpy as np
import numpy.testing as npt
import unittest
from pairhmm.constants import MAX_CACHED_QUAL
from pairhmm.errors import QualityRangeError, InvalidInputError
from pairhmm.quality import (
    qual_to_error_prob, qual_to_prob, qual_to_error_prob_log10,
    qual_to_prob_log10, QUAL_TO_ERROR_PROB
)


class TestQualityTable(unittest.TestCase):

    def test_error_prob(self):
        self.assertAlmostEqual(qual_to_error_prob(10), 0.1)
        self.assertAlmostEqual(qual_to_error_prob(30), 0.001)
        self.assertEqual(qual_to_error_prob(0), 1.0)

    def test_prob(self):
        self.assertAlmostEqual(qual_to_prob(20), 0.99)
        self.assertEqual(qual_to_prob(0), 0.0)

    def test_log10(self):
        self.assertAlmostEqual(qual_to_error_prob_log10(45), -4.5)
        self.assertAlmostEqual(qual_to_prob_log10(10), np.log10(0.9))
        self.assertEqual(qual_to_prob_log10(0), -np.inf)

    def test_array(self):
        res = qual_to_error_prob(np.array([10, 20, 30]))
        npt.assert_allclose(res, [0.1, 0.01, 0.001])

    def test_complement(self):
        q = np.arange(MAX_CACHED_QUAL + 1)
        npt.assert_allclose(qual_to_prob(q) + qual_to_error_prob(q), 1.0)

    def test_out_of_range(self):
        with self.assertRaises(QualityRangeError):
            qual_to_error_prob(MAX_CACHED_QUAL + 1)
        with self.assertRaises(InvalidInputError):
            qual_to_prob(-1)

    def test_table_is_frozen(self):
        with self.assertRaises(ValueError):
            QUAL_TO_ERROR_PROB[0] = 0.5


if __name__ == '__main__':
    unittest.main()
