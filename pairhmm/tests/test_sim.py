import os
import shutil
import tempfile
import numpy as np
import unittest
from pairhmm.constants import DEFAULT_GOP, DEFAULT_GCP
from pairhmm.dataset import read_testcases
from pairhmm.hmm import PairHMM
from pairhmm.sim import (
    simulate_testcases, variant_haplotypes, sample_read
)


class TestSimulation(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_variants(self):
        rng = np.random.RandomState(0)
        haps = variant_haplotypes('ACGTACGTAC', 5, rng)
        self.assertEqual(len(haps), 5)
        self.assertEqual(haps[0], 'ACGTACGTAC')
        for hap in haps[1:]:
            diff = sum(a != b for a, b in zip(hap, haps[0]))
            self.assertEqual(diff, 1)

    def test_error_free_read(self):
        rng = np.random.RandomState(0)
        hap = 'GATTACAGATTACA'
        read = sample_read(hap, 6, 100, rng)
        self.assertIn(read, hap)

    def test_layout(self):
        df = simulate_testcases(n_reads=3, n_haplotypes=4,
                                haplotype_length=40, read_length=20)
        self.assertEqual(df.shape, (12, 6))
        self.assertEqual(df['read'].str.len().unique().tolist(), [20])
        # reads are grouped
        self.assertEqual(df['read'].iloc[:4].nunique(), 1)

    def test_default_penalties(self):
        df = simulate_testcases(n_reads=1, n_haplotypes=1,
                                haplotype_length=20, read_length=10)
        self.assertEqual(df['insertion_gop'].iloc[0],
                         chr(33 + DEFAULT_GOP) * 10)
        self.assertEqual(df['overall_gcp'].iloc[0],
                         chr(33 + DEFAULT_GCP) * 10)

    def test_reproducible(self):
        a = simulate_testcases(seed=1, haplotype_length=30, read_length=10)
        b = simulate_testcases(seed=1, haplotype_length=30, read_length=10)
        self.assertTrue(a.equals(b))

    def test_round_trip(self):
        df = simulate_testcases(n_reads=2, n_haplotypes=3,
                                haplotype_length=40, read_length=20)
        path = os.path.join(self.tmpdir, 'sim.txt')
        df.to_csv(path, sep=' ', index=None, header=None)
        testcases, _ = read_testcases(path)
        self.assertEqual(len(testcases), 6)
        hmm = PairHMM()
        hmm.initialize(40, 20)
        res = hmm.compute_likelihoods(testcases)
        self.assertTrue(np.all(np.array(res) <= 0))

    def test_read_too_long(self):
        with self.assertRaises(ValueError):
            simulate_testcases(haplotype_length=10, read_length=20)


if __name__ == '__main__':
    unittest.main()
