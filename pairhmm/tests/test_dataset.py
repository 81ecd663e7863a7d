import io
import os
import shutil
import tempfile
import numpy as np
import numpy.testing as npt
import unittest
from pairhmm.config import PairHMMConfig
from pairhmm.dataset import (
    Testcase as Record, read_testcases, decode_quals, encode_quals,
    max_lengths, write_results
)
from pairhmm.hmm import PairHMM, compute_likelihoods
from pairhmm.tiered import TieredPairHMM


def make_testcase(hap, read, base=30, gop=45, gcp=10):
    n = len(read)
    return Record(hap, read,
                  np.full(n, base, dtype=np.uint8),
                  np.full(n, gop, dtype=np.uint8),
                  np.full(n, gop, dtype=np.uint8),
                  np.full(n, gcp, dtype=np.uint8))


class TestQualityEncoding(unittest.TestCase):

    def test_decode(self):
        npt.assert_array_equal(decode_quals('!+?I'), [0, 10, 30, 40])

    def test_encode(self):
        self.assertEqual(encode_quals([0, 10, 30, 40]), '!+?I')

    def test_bad_encoding(self):
        with self.assertRaises(ValueError):
            decode_quals('AB C')


class TestReadTestcases(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def write(self, lines):
        path = os.path.join(self.tmpdir, 'cases.txt')
        with open(path, 'w') as f:
            f.write('\n'.join(lines) + '\n')
        return path

    def test_read(self):
        # '#' and '"' are phred 2 and 1
        path = self.write([
            'ACGTACGT CGTA ?#"? ++++ ++++ ++++',
            'ACGTTCGT CGTA IIII ++++ ++++ ++++',
        ])
        testcases, expected = read_testcases(path)
        self.assertEqual(len(testcases), 2)
        tc = testcases[0]
        self.assertEqual(tc.haplotype, 'ACGTACGT')
        self.assertEqual(tc.read, 'CGTA')
        npt.assert_array_equal(tc.read_quals, [30, 2, 1, 30])
        npt.assert_array_equal(tc.overall_gcp, [10] * 4)
        self.assertTrue(np.all(np.isnan(expected)))

    def test_expected_column(self):
        path = self.write([
            'ACGTACGT CGTA ???? ++++ ++++ ++++ -1.5',
            'ACGTTCGT CGTA IIII ++++ ++++ ++++ -2.25',
        ])
        _, expected = read_testcases(path)
        npt.assert_allclose(expected, [-1.5, -2.25])

    def test_bad_columns(self):
        path = self.write(['ACGT ACGT ????'])
        with self.assertRaises(ValueError):
            read_testcases(path)

    def test_max_lengths(self):
        testcases = [make_testcase('ACGTACGT', 'ACG'),
                     make_testcase('ACG', 'ACGTA')]
        self.assertEqual(max_lengths(testcases), (8, 5))

    def test_write_results(self):
        handle = io.StringIO()
        write_results([-1.5, -0.25], handle)
        self.assertEqual(handle.getvalue(), '-1.5\n-0.25\n')


class TestComputeLikelihoods(unittest.TestCase):

    def setUp(self):
        rng = np.random.RandomState(0)
        backbone = ''.join(rng.choice(list('ACGT'), size=40))
        read = backbone[5:30]
        haps = [backbone]
        for pos in (30, 12, 38):
            alt = 'A' if backbone[pos] != 'A' else 'C'
            haps.append(backbone[:pos] + alt + backbone[pos + 1:])
        haps.append(backbone + 'GG')
        self.testcases = [make_testcase(h, read) for h in haps]
        self.testcases.append(make_testcase(backbone, read[:20]))

    def expected(self, dtype=np.float64):
        res = []
        for tc in self.testcases:
            hmm = PairHMM('logless', dtype=dtype)
            hmm.initialize(50, 30)
            res.append(hmm.compute_log10_likelihood(*tc))
        return np.array(res)

    def test_in_order(self):
        hmm = PairHMM('logless')
        hmm.initialize(50, 30)
        res = compute_likelihoods(hmm, self.testcases)
        self.assertEqual(len(res), len(self.testcases))
        npt.assert_allclose(res, self.expected(), atol=1e-12)

    def test_method(self):
        hmm = PairHMM('exact')
        hmm.initialize(50, 30)
        npt.assert_allclose(hmm.compute_likelihoods(self.testcases),
                            self.expected(), atol=1e-8)

    def test_tiered(self):
        hmm = TieredPairHMM('logless')
        hmm.initialize(50, 30)
        res = hmm.compute_likelihoods(self.testcases)
        npt.assert_allclose(res, self.expected(), atol=1e-3)
        self.assertEqual(hmm.escalations, 0)


class TestConfig(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_json_round_trip(self):
        path = os.path.join(self.tmpdir, 'config.json')
        config = PairHMMConfig(implementation='exact', tiered=False,
                               max_haplotype_length=200)
        config.to_json(path)
        res = PairHMMConfig.from_json(path)
        self.assertEqual(res, config)

    def test_build_tiered(self):
        hmm = PairHMMConfig().build(100, 50)
        self.assertIsInstance(hmm, TieredPairHMM)
        self.assertTrue(hmm.initialized)
        self.assertEqual(hmm.narrow.max_read_length, 50)

    def test_build_single(self):
        config = PairHMMConfig(tiered=False, dtype='float32',
                               max_haplotype_length=30,
                               max_read_length=20)
        hmm = config.build(100, 50)
        self.assertIsInstance(hmm, PairHMM)
        self.assertEqual(hmm.dtype, np.float32)
        self.assertEqual(hmm.max_haplotype_length, 30)

    def test_build_needs_lengths(self):
        with self.assertRaises(ValueError):
            PairHMMConfig().build()


if __name__ == '__main__':
    unittest.main()
