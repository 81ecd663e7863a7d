import math
import numba
import numpy as np
from pairhmm.constants import (
    MAX_JACOBIAN_TOLERANCE, JACOBIAN_LOG_TABLE_STEP,
    JACOBIAN_LOG_TABLE_INV_STEP
)


def _jacobian_log_table():
    size = int(MAX_JACOBIAN_TOLERANCE / JACOBIAN_LOG_TABLE_STEP) + 1
    k = np.arange(size) * JACOBIAN_LOG_TABLE_STEP
    table = np.log10(1.0 + 10.0 ** -k)
    table.flags.writeable = False
    return table


# log10(1 + 10^-d) for d = 0, 1e-4, 2e-4, ..., 8.0
JACOBIAN_LOG_TABLE = _jacobian_log_table()


@numba.njit
def log10_sum_log10_pair(a, b):
    """ Exact log10(10^a + 10^b). """
    big = a if a > b else b
    if big == -np.inf:
        return big
    return big + math.log10(10.0 ** (a - big) + 10.0 ** (b - big))


@numba.njit
def log10_sum_log10_triple(a, b, c):
    big = a if a > b else b
    big = c if c > big else big
    if big == -np.inf:
        return big
    return big + math.log10(
        10.0 ** (a - big) + 10.0 ** (b - big) + 10.0 ** (c - big))


@numba.njit
def approximate_log10_sum_log10(a, b, table):
    """ Jacobian logarithm approximation of log10(10^a + 10^b).

    Differences beyond ``MAX_JACOBIAN_TOLERANCE`` return the larger term,
    smaller differences are corrected with a table lookup.
    """
    if a > b:
        big, small = a, b
    else:
        big, small = b, a
    if small == -np.inf:
        return big
    diff = big - small
    if diff >= MAX_JACOBIAN_TOLERANCE:
        return big
    ind = int(diff * JACOBIAN_LOG_TABLE_INV_STEP + 0.5)
    return big + table[ind]


def good_log10_probability(result):
    """ True if ``result`` is a finite log10 probability, i.e. <= 0. """
    return bool(np.isfinite(result) and result <= 0.0)
