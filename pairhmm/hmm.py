"""Pair HMM for local alignment of a read against a haplotype.

Computes the total probability of a read arising from a haplotype under
a base substitution, insertion and deletion error model, summing over all
alignments of the read (figure 4.3 in Durbin et al. 1998). The read may
start and end anywhere along the haplotype.
"""
import logging
import numpy as np
from pairhmm.alphabet import as_bases, as_quals
from pairhmm.constants import MAX_CACHED_QUAL, LOG10_CLAMP_TOLERANCE
from pairhmm.errors import (
    NotInitializedError, MissingInputError, EmptySequenceError,
    CapacityError, LengthMismatchError, StartIndexError, NumericalFaultError
)
from pairhmm.log10_hmm import Exact, Original
from pairhmm.logless import LoglessCaching
from pairhmm.mathutils import good_log10_probability
from pairhmm.matrices import Matrices
from pairhmm.transitions import build_read_constants

logger = logging.getLogger(__name__)


implementations = {
    'exact': Exact,
    'original': Original,
    'logless': LoglessCaching,
}


def first_position_where_haplotypes_differ(a, b):
    """ First index where two haplotypes differ.

    Returns the length of the shorter one when it is a prefix of the
    other.
    """
    a, b = np.asarray(as_bases(a)), np.asarray(as_bases(b))
    n = min(len(a), len(b))
    diff = np.flatnonzero(a[:n] != b[:n])
    return int(diff[0]) if len(diff) else n


def _validate(haplotype_bases, read_bases, quals, max_haplotype_length,
              max_read_length):
    if haplotype_bases is None:
        raise MissingInputError('haplotype_bases')
    if read_bases is None:
        raise MissingInputError('read_bases')
    for name, q in quals.items():
        if q is None:
            raise MissingInputError(name)
    hap = as_bases(haplotype_bases)
    read = as_bases(read_bases)
    if len(hap) == 0:
        raise EmptySequenceError('haplotype_bases')
    if len(read) == 0:
        raise EmptySequenceError('read_bases')
    if len(hap) > max_haplotype_length:
        raise CapacityError(
            'haplotype_bases is too long',
            context=f'got {len(hap)} but max is {max_haplotype_length}')
    if len(read) > max_read_length:
        raise CapacityError(
            'read_bases is too long',
            context=f'got {len(read)} but max is {max_read_length}')
    arrays = {}
    for name, q in quals.items():
        q = as_quals(q, name=name, max_qual=MAX_CACHED_QUAL)
        if len(q) != len(read):
            raise LengthMismatchError(name, len(read), len(q))
        arrays[name] = q
    return hap, read, arrays


class PairHMM:
    """ Pair HMM engine owning its dynamic programming scratch space.

    One instance runs one computation at a time; use one instance per
    worker for parallel evaluation.

    Parameters
    ----------
    implementation : str
        One of ``exact``, ``original`` or ``logless``.
    dtype : np.dtype
        Numeric representation of the matrices (float32 or float64).
    backend : str
        ``numba`` or ``torch`` (``logless`` only).

    Examples
    --------
    >>> hmm = PairHMM()
    >>> hmm.initialize(max_haplotype_length=100, max_read_length=50)
    >>> q = [30] * 4
    >>> hmm.compute_log10_likelihood('ACGTACGT', 'GTAC', q, q, q, q) < 0
    True
    """

    def __init__(self, implementation='logless', dtype=np.float64,
                 backend='numba'):
        if implementation not in implementations:
            raise ValueError(
                f'`{implementation}` implementation is not implemented.')
        self.strategy = implementations[implementation]
        if backend not in self.strategy.backends:
            raise NotImplementedError(
                f'`{implementation}` does not support the '
                f'`{backend}` backend')
        self.implementation = implementation
        self.dtype = np.dtype(dtype)
        if self.dtype.name not in ('float32', 'float64'):
            raise TypeError('PairHMM only supports float32 and float64')
        self.backend = backend
        self.matrices = None
        self.max_haplotype_length = 0
        self.max_read_length = 0
        self._constants = None
        self._previous = None

    def __repr__(self):
        return (f'PairHMM({self.implementation!r}, '
                f'dtype={self.dtype.name}, backend={self.backend!r})')

    @property
    def initialized(self):
        return self.matrices is not None

    def initialize(self, max_haplotype_length, max_read_length):
        """ Allocate the matrices for the given maximum lengths.

        Parameters
        ----------
        max_haplotype_length : int
            Longest haplotype this engine will evaluate.
        max_read_length : int
            Longest read this engine will evaluate.
        """
        for name, value in (('max_haplotype_length', max_haplotype_length),
                            ('max_read_length', max_read_length)):
            if isinstance(value, bool) or not isinstance(
                    value, (int, np.integer)):
                raise CapacityError(
                    f'{name} must be an integer', context=f'got {value!r}')
        self.matrices = Matrices(
            int(max_haplotype_length), int(max_read_length),
            dtype=self.dtype, fill=self.strategy.fill)
        self.max_haplotype_length = int(max_haplotype_length)
        self.max_read_length = int(max_read_length)
        self._constants = None
        self._previous = None

    def compute_log10_likelihood(self, haplotype_bases, read_bases,
                                 read_quals, insertion_gop, deletion_gop,
                                 overall_gcp, hap_start_index=0,
                                 recache=True):
        """ Log10 probability of the read arising from the haplotype.

        Parameters
        ----------
        haplotype_bases : str or bytes
            Haplotype bases.
        read_bases : str or bytes
            Read bases, usually no longer than the haplotype.
        read_quals : bytes or array_like of int
            Phred scaled base substitution qualities of the read.
        insertion_gop : bytes or array_like of int
            Phred scaled insertion open penalties of the read.
        deletion_gop : bytes or array_like of int
            Phred scaled deletion open penalties of the read.
        overall_gcp : bytes or array_like of int
            Phred scaled gap continuation penalties of the read.
        hap_start_index : int
            Resume the computation at this haplotype offset, reusing the
            columns of the previous call. Only valid when the previous
            call used the same read and the haplotypes agree before it.
        recache : bool
            Rebuild the read constants. When False the constants of the
            previous call are reused.

        Returns
        -------
        float
            Log10 likelihood, always <= 0.

        Notes
        -----
        The incremental start is only honoured when the previous call had
        the same read and haplotype lengths; otherwise a full computation
        is done, giving the same result.
        """
        if not self.initialized:
            raise NotInitializedError(
                'Must call initialize before calling '
                'compute_log10_likelihood')
        quals = {'read_quals': read_quals,
                 'insertion_gop': insertion_gop,
                 'deletion_gop': deletion_gop,
                 'overall_gcp': overall_gcp}
        hap, read, quals = _validate(
            haplotype_bases, read_bases, quals,
            self.max_haplotype_length, self.max_read_length)
        H, R = len(hap), len(read)
        if not 0 <= hap_start_index <= H:
            raise StartIndexError(hap_start_index, H)

        if (recache or self._constants is None or
                len(self._constants) != R):
            constants = build_read_constants(
                quals['read_quals'], quals['insertion_gop'],
                quals['deletion_gop'], quals['overall_gcp'])
            self._constants = self.strategy.prepare(constants, self.dtype)

        hap_start = int(hap_start_index)
        if hap_start > 0 and self._previous != (R, H):
            logger.debug('No cached columns for a %d x %d computation, '
                         'recomputing from the first column', R, H)
            hap_start = 0
        if hap_start == 0:
            # free deletions at the start, the read may begin anywhere
            self.matrices.deletion[0, :H + 1] = \
                self.strategy.initial_deletion(H, self.dtype)

        result = self.strategy.forward(
            self.matrices, hap, read, self._constants, hap_start,
            self.backend)
        self._previous = (R, H)
        return self._check(result)

    def _check(self, result):
        if result > 0.0:
            if result > LOG10_CLAMP_TOLERANCE:
                raise NumericalFaultError(
                    'Log probability cannot be greater than zero', result)
            logger.debug('Clamping log10 likelihood %g to zero', result)
            result = 0.0
        if not good_log10_probability(result):
            raise NumericalFaultError('Bad likelihood detected', result)
        return result

    def compute_likelihoods(self, testcases):
        """ Likelihoods of a sequence of test cases, in input order. """
        return compute_likelihoods(self, testcases)

    def dump_matrices(self):
        """ Text rendering of the region used by the previous call. """
        if not self.initialized:
            raise NotInitializedError('Must call initialize first')
        if self._previous is None:
            return self.matrices.dump()
        R, H = self._previous
        return self.matrices.dump(R, H)


def _same_read(a, b):
    if not np.array_equal(as_bases(a.read), as_bases(b.read)):
        return False
    fields = ('read_quals', 'insertion_gop', 'deletion_gop', 'overall_gcp')
    return all(np.array_equal(as_quals(getattr(a, f)),
                              as_quals(getattr(b, f))) for f in fields)


def compute_likelihoods(hmm, testcases):
    """ Likelihoods of a sequence of test cases, in input order.

    Consecutive test cases sharing a read and its qualities reuse the
    read constants and the columns of the previous haplotype.

    Parameters
    ----------
    hmm : PairHMM or TieredPairHMM
        Initialized engine.
    testcases : iterable of Testcase
        Records with haplotype, read and four quality arrays.

    Returns
    -------
    list of float
    """
    results = []
    previous = None
    for tc in testcases:
        hap_start, recache = 0, True
        if previous is not None and _same_read(previous, tc):
            recache = False
            if len(previous.haplotype) == len(tc.haplotype):
                hap_start = first_position_where_haplotypes_differ(
                    previous.haplotype, tc.haplotype)
        results.append(hmm.compute_log10_likelihood(
            tc.haplotype, tc.read, tc.read_quals, tc.insertion_gop,
            tc.deletion_gop, tc.overall_gcp,
            hap_start_index=hap_start, recache=recache))
        previous = tc
    return results
