import logging
import numpy as np
from pairhmm.errors import NumericalFaultError
from pairhmm.hmm import PairHMM, compute_likelihoods

logger = logging.getLogger(__name__)


class TieredPairHMM:
    """ Single precision pair HMM with a double precision fallback.

    The single precision engine is tried first. If its likelihood is not
    finite, fails validation, or sits below the single precision
    acceptance floor (underflow rather than a genuinely tiny probability),
    the test case is recomputed from scratch by the double precision
    engine and that result is returned instead.

    Parameters
    ----------
    implementation : str
        One of ``exact``, ``original`` or ``logless``.
    backend : str
        ``numba`` or ``torch``.
    narrow : np.dtype
        Representation tried first.
    wide : np.dtype
        Representation used on escalation.

    Attributes
    ----------
    escalations : int
        Number of computations that fell back to the wide engine.
    """

    def __init__(self, implementation='logless', backend='numba',
                 narrow=np.float32, wide=np.float64):
        self.narrow = PairHMM(implementation, dtype=narrow, backend=backend)
        self.wide = PairHMM(implementation, dtype=wide, backend=backend)
        self.implementation = implementation
        self.escalations = 0

    def __repr__(self):
        return (f'TieredPairHMM({self.implementation!r}, '
                f'narrow={self.narrow.dtype.name}, '
                f'wide={self.wide.dtype.name})')

    @property
    def initialized(self):
        return self.narrow.initialized and self.wide.initialized

    def initialize(self, max_haplotype_length, max_read_length):
        self.narrow.initialize(max_haplotype_length, max_read_length)
        self.wide.initialize(max_haplotype_length, max_read_length)

    def compute_log10_likelihood(self, haplotype_bases, read_bases,
                                 read_quals, insertion_gop, deletion_gop,
                                 overall_gcp, hap_start_index=0,
                                 recache=True):
        """ Same contract as ``PairHMM.compute_log10_likelihood``.

        Invalid input errors from the narrow engine propagate unchanged;
        only numerical faults trigger the wide recomputation, which is
        always a full, non incremental one.
        """
        args = (haplotype_bases, read_bases, read_quals, insertion_gop,
                deletion_gop, overall_gcp)
        floor = self.narrow.strategy.min_accepted_log10(self.narrow.dtype)
        try:
            result = self.narrow.compute_log10_likelihood(
                *args, hap_start_index=hap_start_index, recache=recache)
        except NumericalFaultError as e:
            logger.debug('%s precision fault (%s), escalating',
                         self.narrow.dtype.name, e)
        else:
            if result >= floor:
                return result
            logger.debug('%s precision result %g below %g, escalating',
                         self.narrow.dtype.name, result, floor)
        self.escalations += 1
        return self.wide.compute_log10_likelihood(
            *args, hap_start_index=0, recache=True)

    def compute_likelihoods(self, testcases):
        """ Likelihoods of a sequence of test cases, in input order. """
        return compute_likelihoods(self, testcases)
