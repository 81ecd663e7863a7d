import numpy as np
import numpy.testing as npt
import unittest
from pairhmm.alphabet import DNA, as_bases, as_quals
from pairhmm.errors import QualityRangeError


class TestAlphabet(unittest.TestCase):

    def test_encode(self):
        res = as_bases('ACGTN')
        npt.assert_array_equal(res, [0, 1, 2, 3, 4])

    def test_case_and_unknown(self):
        npt.assert_array_equal(as_bases(b'acgtRY-'), [0, 1, 2, 3, 4, 4, 4])

    def test_array_input(self):
        x = np.frombuffer(b'GATTACA', dtype=np.uint8)
        npt.assert_array_equal(as_bases(x), as_bases('GATTACA'))

    def test_decode(self):
        self.assertEqual(DNA.decode(as_bases('ACGTN')), b'ACGTN')
        self.assertEqual(len(DNA), 5)

    def test_quals(self):
        npt.assert_array_equal(as_quals(bytes([0, 10, 40])), [0, 10, 40])
        q = as_quals([30, 31], max_qual=127)
        self.assertEqual(q.dtype, np.uint8)

    def test_quals_out_of_range(self):
        with self.assertRaises(QualityRangeError):
            as_quals([10, 128], max_qual=127)
        with self.assertRaises(QualityRangeError):
            as_quals([-1], max_qual=127)


if __name__ == '__main__':
    unittest.main()
