import os
import numpy as np
from pairhmm.sim import simulate_testcases
from pairhmm.dataset import read_testcases, max_lengths
from pairhmm.tiered import TieredPairHMM


# create simulation dataset
df = simulate_testcases(n_reads=20, n_haplotypes=8, haplotype_length=300,
                        read_length=150, seed=0)

# save the file to disk.
if not os.path.exists('data'):
    os.mkdir('data')
df.to_csv('data/testcases.txt', sep=' ', index=None, header=None)

# compute the likelihoods, single precision first
testcases, _ = read_testcases('data/testcases.txt')
hmm = TieredPairHMM('logless')
hmm.initialize(*max_lengths(testcases))
results = np.array(hmm.compute_likelihoods(testcases))

# one row per read, one column per haplotype
likelihoods = results.reshape(20, 8)
print(likelihoods.argmax(axis=1))
print(f'{hmm.escalations} computations escalated to double precision')
