import math
import numba
import numpy as np
import torch
from pairhmm.constants import (
    N, MATCH_TO_MATCH, INDEL_TO_MATCH, MATCH_TO_INSERTION,
    INSERTION_TO_INSERTION, MATCH_TO_DELETION, DELETION_TO_DELETION,
    MATCH_EMISSION, MISMATCH_EMISSION,
    INITIAL_CONDITION, INITIAL_CONDITION_LOG10, MIN_ACCEPTED
)

LOG10_2 = math.log10(2.0)


@numba.njit
def _exponent(big):
    """ Power of two bringing ``big`` into [1, 2). Zero leaves it as is. """
    if big > 0.0 and big < np.inf:
        return -int(math.floor(math.log2(big)))
    return 0


@numba.njit
def _row_exponent(M, X, Y, i, H):
    big = 0.0
    for j in range(H + 1):
        if M[i, j] > big:
            big = M[i, j]
        if X[i, j] > big:
            big = X[i, j]
        if Y[i, j] > big:
            big = Y[i, j]
    return _exponent(big)


@numba.njit
def _forward_pass_numba(M, X, Y, hap, read, T, E, hap_start, scales):
    R, H = len(read), len(hap)
    shift = 0
    for i in range(1, R + 1):
        # rows are rescaled by a power of two chosen from the row above,
        # resumed computations keep the exponents of the previous call
        if hap_start == 0:
            scales[i] = _row_exponent(M, X, Y, i - 1, H)
        shift += scales[i]
        factor = 2.0 ** scales[i]
        r = read[i - 1]
        mm = T[i - 1, MATCH_TO_MATCH]
        im = T[i - 1, INDEL_TO_MATCH]
        mx = T[i - 1, MATCH_TO_INSERTION]
        xx = T[i - 1, INSERTION_TO_INSERTION]
        my = T[i - 1, MATCH_TO_DELETION]
        yy = T[i - 1, DELETION_TO_DELETION]
        match_p = E[i - 1, MATCH_EMISSION]
        mismatch_p = E[i - 1, MISMATCH_EMISSION]
        for j in range(hap_start + 1, H + 1):
            h = hap[j - 1]
            same = (r == h) | (r == N) | (h == N)
            prior = match_p if same else mismatch_p
            M[i, j] = prior * (M[i - 1, j - 1] * mm +
                               X[i - 1, j - 1] * im +
                               Y[i - 1, j - 1] * im) * factor
            X[i, j] = (M[i - 1, j] * mx + X[i - 1, j] * xx) * factor
            Y[i, j] = M[i, j - 1] * my + Y[i, j - 1] * yy
    # alignments may end at any haplotype position, but not in a deletion
    total = 0.0
    for j in range(1, H + 1):
        total += M[R, j] + X[R, j]
    return total, shift


def _deletion_scan(b, a):
    """ ``y[j] = a * y[j - 1] + b[j]`` over a whole row by recursive doubling.

    After the step with offset ``s`` each ``y[j]`` holds the terms
    ``b[k]`` with ``j - 2s < k <= j``; weights that underflow are dropped.
    """
    y = b.clone()
    offset, weight = 1, a
    while offset < len(y):
        y[offset:] = y[offset:] + weight * y[:-offset]
        offset *= 2
        weight = weight * weight
    return y


def _forward_pass_torch(M, X, Y, hap, read, T, E, hap_start, scales):
    """ Row sweep of the recurrence, vectorised along the haplotype.

    Match and insertion cells of a row only depend on the row above, so
    they are filled with one vector update. Deletions chain along the row
    and are filled with a scan. The tensors are views of the scratch
    matrices, writes land in place.
    """
    M, X, Y = (torch.from_numpy(mat) for mat in (M, X, Y))
    T, E = torch.from_numpy(T), torch.from_numpy(E)
    hap = torch.from_numpy(hap).long()
    read = torch.from_numpy(read).long()
    R, H = len(read), len(hap)
    cols, prev = slice(hap_start + 1, H + 1), slice(hap_start, H)
    h = hap[prev]
    shift = 0
    for i in range(1, R + 1):
        if hap_start == 0:
            scales[i] = _exponent(max(
                M[i - 1, :H + 1].max().item(),
                X[i - 1, :H + 1].max().item(),
                Y[i - 1, :H + 1].max().item()))
        shift += int(scales[i])
        if hap_start == H:
            continue
        factor = 2.0 ** int(scales[i])
        t = T[i - 1]
        r = read[i - 1]
        same = (h == r) | (h == N) | (r == N)
        prior = torch.where(same, E[i - 1, MATCH_EMISSION],
                            E[i - 1, MISMATCH_EMISSION])
        M[i, cols] = prior * (M[i - 1, prev] * t[MATCH_TO_MATCH] +
                              X[i - 1, prev] * t[INDEL_TO_MATCH] +
                              Y[i - 1, prev] * t[INDEL_TO_MATCH]) * factor
        X[i, cols] = (M[i - 1, cols] * t[MATCH_TO_INSERTION] +
                      X[i - 1, cols] * t[INSERTION_TO_INSERTION]) * factor
        b = M[i, prev] * t[MATCH_TO_DELETION]
        b[0] = b[0] + Y[i, hap_start] * t[DELETION_TO_DELETION]
        Y[i, cols] = _deletion_scan(
            b, float(t[DELETION_TO_DELETION]))
    total = M[R, 1:H + 1].double().sum() + X[R, 1:H + 1].double().sum()
    return total.item(), shift


def _forward_pass(matrices, hap, read, constants, hap_start,
                  backend='numba'):
    """ Forward pass in real space.

    Parameters
    ----------
    matrices : Matrices
        Scratch space, overwritten for columns > hap_start.
    hap : np.ndarray
        Encoded haplotype bases of length H.
    read : np.ndarray
        Encoded read bases of length R.
    constants : ReadConstants
        Transition and emission tables in the matrices' dtype.
    hap_start : int
        Columns up to and including this one are reused as is.
    backend : str
        ``numba`` or ``torch``.

    Returns
    -------
    total : float
        Scaled probability summed over the terminal row.
    shift : int
        Power of two the rescaling multiplied ``total`` by.
    """
    args = (matrices.match, matrices.insertion, matrices.deletion,
            hap, read, constants.transitions, constants.emissions,
            hap_start, matrices.scales)
    if backend == 'numba':
        return _forward_pass_numba(*args)
    elif backend == 'torch':
        return _forward_pass_torch(*args)
    raise ValueError(f'`{backend}` backend is not implemented.')


class LoglessCaching:
    """ Real space pair HMM with per read caching.

    Avoids the costly log10 sums by working with probabilities directly.
    The free deletion start is multiplied by a large constant, and every
    row is rescaled by a power of two so long reads stay within the
    exponent range of the dtype. The scales are divided out of the final
    log10 result.
    """
    name = 'logless'
    backends = ('numba', 'torch')
    fill = 0.0

    @staticmethod
    def prepare(constants, dtype):
        return constants.astype(dtype)

    @staticmethod
    def initial_deletion(hap_length, dtype):
        return INITIAL_CONDITION[np.dtype(dtype).name] / hap_length

    @staticmethod
    def min_accepted_log10(dtype):
        """ Log10 results below this are treated as underflow. """
        name = np.dtype(dtype).name
        if name == 'float32':
            return math.log10(MIN_ACCEPTED) - INITIAL_CONDITION_LOG10[name]
        return -np.inf

    @staticmethod
    def forward(matrices, hap, read, constants, hap_start,
                backend='numba'):
        total, shift = _forward_pass(
            matrices, hap, read, constants, hap_start, backend)
        mantissa, exponent = math.frexp(total)
        with np.errstate(divide='ignore', invalid='ignore'):
            log10 = float(np.log10(mantissa))
        return (log10 + (exponent - int(shift)) * LOG10_2 -
                INITIAL_CONDITION_LOG10[matrices.dtype.name])
