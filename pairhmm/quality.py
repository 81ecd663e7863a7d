"""Phred quality to probability conversions.

Every quality in ``[0, MAX_CACHED_QUAL]`` is tabulated once at import time
and the tables are frozen, so they can be shared between threads.
"""
import numpy as np
from pairhmm.constants import MAX_CACHED_QUAL
from pairhmm.errors import QualityRangeError


def _frozen(arr):
    arr = np.ascontiguousarray(arr, dtype=np.float64)
    arr.flags.writeable = False
    return arr


_QUALS = np.arange(MAX_CACHED_QUAL + 1, dtype=np.float64)
QUAL_TO_ERROR_PROB = _frozen(10.0 ** (_QUALS / -10.0))
QUAL_TO_PROB = _frozen(1.0 - QUAL_TO_ERROR_PROB)
QUAL_TO_ERROR_PROB_LOG10 = _frozen(_QUALS / -10.0)
with np.errstate(divide='ignore'):
    QUAL_TO_PROB_LOG10 = _frozen(np.log10(QUAL_TO_PROB))


def _check(qual):
    q = np.asarray(qual)
    if q.size and (q.min() < 0 or q.max() > MAX_CACHED_QUAL):
        raise QualityRangeError(
            f'Quality must lie in [0, {MAX_CACHED_QUAL}]',
            context=f'got {qual}')
    return q.astype(np.intp)


def _lookup(table, qual):
    res = table[_check(qual)]
    return float(res) if np.ndim(res) == 0 else res


def qual_to_error_prob(qual):
    """ Probability ``10^(-q/10)`` that a base with quality ``q`` is wrong.

    Parameters
    ----------
    qual : int or array_like of int
        Phred quality or qualities.

    Returns
    -------
    float or np.ndarray
    """
    return _lookup(QUAL_TO_ERROR_PROB, qual)


def qual_to_prob(qual):
    """ Complement of ``qual_to_error_prob``. """
    return _lookup(QUAL_TO_PROB, qual)


def qual_to_error_prob_log10(qual):
    return _lookup(QUAL_TO_ERROR_PROB_LOG10, qual)


def qual_to_prob_log10(qual):
    return _lookup(QUAL_TO_PROB_LOG10, qual)
