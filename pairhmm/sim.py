import numpy as np
import pandas as pd
from pairhmm.constants import DEFAULT_GOP, DEFAULT_GCP
from pairhmm.dataset import columns, encode_quals

BASES = np.array(list('ACGT'))


def substitute(seq, pos, rng):
    """ Replace the base at ``pos`` with a different random base. """
    alt = [b for b in 'ACGT' if b != seq[pos]]
    return seq[:pos] + alt[rng.randint(0, 3)] + seq[pos + 1:]


def variant_haplotypes(backbone, n_haplotypes, rng):
    """ The backbone followed by single substitution variants of it. """
    haps = [backbone]
    for pos in rng.randint(0, len(backbone), size=n_haplotypes - 1):
        haps.append(substitute(backbone, pos, rng))
    return haps


def sample_read(hap, read_length, base_qual, rng):
    """ Sample a read from a haplotype with substitution errors.

    Each base is replaced with probability ``10^(-base_qual / 10)``.
    """
    start = rng.randint(0, len(hap) - read_length + 1)
    read = hap[start:start + read_length]
    p = 10 ** (-base_qual / 10)
    for pos in np.flatnonzero(rng.rand(read_length) < p):
        read = substitute(read, pos, rng)
    return read


def simulate_testcases(n_reads=10, n_haplotypes=4, haplotype_length=100,
                       read_length=50, base_qual=30, gop=DEFAULT_GOP,
                       gcp=DEFAULT_GCP, seed=0):
    """ Simulate reads against a set of closely related haplotypes.

    Every read is paired with every haplotype, with the pairs of one read
    kept consecutive so they can share cached read constants.

    Parameters
    ----------
    n_reads : int
        Number of reads.
    n_haplotypes : int
        Number of haplotypes, the first is the backbone.
    haplotype_length : int
        Length of the haplotypes.
    read_length : int
        Length of the reads, at most ``haplotype_length``.
    base_qual, gop, gcp : int
        Phred scaled base quality, gap open and gap continuation
        penalties given to every read base.
    seed : int
        Random seed.

    Returns
    -------
    pd.DataFrame
        Table in the layout read by ``pairhmm.dataset.read_table``.
    """
    if read_length > haplotype_length:
        raise ValueError('read_length cannot exceed haplotype_length')
    rng = np.random.RandomState(seed)
    backbone = ''.join(rng.choice(BASES, size=haplotype_length))
    haps = variant_haplotypes(backbone, n_haplotypes, rng)
    rows = []
    for _ in range(n_reads):
        source = haps[rng.randint(0, len(haps))]
        read = sample_read(source, read_length, base_qual, rng)
        quals = [encode_quals([q] * read_length)
                 for q in (base_qual, gop, gop, gcp)]
        for hap in haps:
            rows.append([hap, read] + quals)
    return pd.DataFrame(rows, columns=columns)
