import math
import numba
import numpy as np
from pairhmm.constants import (
    N, MATCH_TO_MATCH, INDEL_TO_MATCH, MATCH_TO_INSERTION,
    INSERTION_TO_INSERTION, MATCH_TO_DELETION, DELETION_TO_DELETION,
    MATCH_EMISSION, MISMATCH_EMISSION
)
from pairhmm.mathutils import (
    JACOBIAN_LOG_TABLE, log10_sum_log10_pair, log10_sum_log10_triple,
    approximate_log10_sum_log10
)


@numba.njit
def _sum2(a, b, approximate, table):
    if approximate:
        return approximate_log10_sum_log10(a, b, table)
    return log10_sum_log10_pair(a, b)


@numba.njit
def _sum3(a, b, c, approximate, table):
    if approximate:
        return approximate_log10_sum_log10(
            a, approximate_log10_sum_log10(b, c, table), table)
    return log10_sum_log10_triple(a, b, c)


@numba.njit
def _forward_pass_numba(M, X, Y, hap, read, T, E, hap_start,
                        approximate, table):
    R, H = len(read), len(hap)
    for i in range(1, R + 1):
        r = read[i - 1]
        for j in range(hap_start + 1, H + 1):
            h = hap[j - 1]
            if r == h or r == N or h == N:
                prior = E[i - 1, MATCH_EMISSION]
            else:
                prior = E[i - 1, MISMATCH_EMISSION]
            M[i, j] = prior + _sum3(
                M[i - 1, j - 1] + T[i - 1, MATCH_TO_MATCH],
                X[i - 1, j - 1] + T[i - 1, INDEL_TO_MATCH],
                Y[i - 1, j - 1] + T[i - 1, INDEL_TO_MATCH],
                approximate, table)
            X[i, j] = _sum2(
                M[i - 1, j] + T[i - 1, MATCH_TO_INSERTION],
                X[i - 1, j] + T[i - 1, INSERTION_TO_INSERTION],
                approximate, table)
            Y[i, j] = _sum2(
                M[i, j - 1] + T[i - 1, MATCH_TO_DELETION],
                Y[i, j - 1] + T[i - 1, DELETION_TO_DELETION],
                approximate, table)
    total = _sum2(M[R, 1], X[R, 1], approximate, table)
    for j in range(2, H + 1):
        total = _sum3(total, M[R, j], X[R, j], approximate, table)
    return total


class Log10PairHMM:
    """ Pair HMM computed entirely in log10 space.

    No scaling is needed since log10 values never underflow, at the cost
    of a log10 sum for every transition into a state.
    """
    backends = ('numba',)
    fill = -np.inf
    approximate = False

    @staticmethod
    def prepare(constants, dtype):
        return constants.log10().astype(dtype)

    @staticmethod
    def initial_deletion(hap_length, dtype):
        return math.log10(1.0 / hap_length)

    @staticmethod
    def min_accepted_log10(dtype):
        return -np.inf

    @classmethod
    def forward(cls, matrices, hap, read, constants, hap_start,
                backend='numba'):
        if backend != 'numba':
            raise NotImplementedError(
                f'{cls.__name__} only supports the numba backend')
        return float(_forward_pass_numba(
            matrices.match, matrices.insertion, matrices.deletion,
            hap, read, constants.transitions, constants.emissions,
            hap_start, cls.approximate, JACOBIAN_LOG_TABLE))


class Exact(Log10PairHMM):
    """ Slow reference using exact log10 sums. """
    name = 'exact'
    approximate = False


class Original(Log10PairHMM):
    """ Log10 sums approximated by a Jacobian logarithm table lookup.

    Accurate to roughly 1e-4 per sum.
    """
    name = 'original'
    approximate = True
