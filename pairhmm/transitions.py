import numpy as np
from pairhmm.constants import (
    MATCH_TO_MATCH, INDEL_TO_MATCH, MATCH_TO_INSERTION,
    INSERTION_TO_INSERTION, MATCH_TO_DELETION, DELETION_TO_DELETION,
    N_TRANSITIONS, MATCH_EMISSION, MISMATCH_EMISSION, TRISTATE_CORRECTION
)
from pairhmm.quality import QUAL_TO_ERROR_PROB, QUAL_TO_PROB


class ReadConstants:
    """ Per read position probabilities, derived once per read.

    Attributes
    ----------
    transitions : np.ndarray
        Transition probabilities of dimension R x 6, columns indexed by
        the ``*_TO_*`` constants.
    emissions : np.ndarray
        Emission probabilities of dimension R x 2 holding the match and
        mismatch probability of each read base.
    """
    __slots__ = ('transitions', 'emissions')

    def __init__(self, transitions, emissions):
        self.transitions = transitions
        self.emissions = emissions

    def __len__(self):
        return self.transitions.shape[0]

    def __repr__(self):
        return f'ReadConstants(length={len(self)})'

    def astype(self, dtype):
        return ReadConstants(
            np.ascontiguousarray(self.transitions, dtype=dtype),
            np.ascontiguousarray(self.emissions, dtype=dtype))

    def log10(self):
        """ Log10 space copy, zero probabilities map to -inf. """
        with np.errstate(divide='ignore'):
            return ReadConstants(np.log10(self.transitions),
                                 np.log10(self.emissions))


def transition_probabilities(insertion_gop, deletion_gop, overall_gcp):
    """ Transition probabilities for each read position.

    Parameters
    ----------
    insertion_gop : np.ndarray
        Phred scaled insertion open penalties (uint8) of length R.
    deletion_gop : np.ndarray
        Phred scaled deletion open penalties (uint8) of length R.
    overall_gcp : np.ndarray
        Phred scaled gap continuation penalties (uint8) of length R.

    Returns
    -------
    np.ndarray
        Array of dimension R x 6.

    Notes
    -----
    The insertion and deletion open probabilities come from independent
    penalty streams. Where they add up to more than one they are rescaled
    so that the exits of the match state always sum to one.
    """
    p_ins = QUAL_TO_ERROR_PROB[insertion_gop]
    p_del = QUAL_TO_ERROR_PROB[deletion_gop]
    p_gap = QUAL_TO_ERROR_PROB[overall_gcp]
    opened = p_ins + p_del
    scale = np.where(opened > 1.0, 1.0 / np.maximum(opened, 1.0), 1.0)
    p_ins = p_ins * scale
    p_del = p_del * scale

    R = len(insertion_gop)
    T = np.empty((R, N_TRANSITIONS))
    T[:, MATCH_TO_MATCH] = np.clip(1.0 - (p_ins + p_del), 0.0, 1.0)
    T[:, INDEL_TO_MATCH] = QUAL_TO_PROB[overall_gcp]
    T[:, MATCH_TO_INSERTION] = p_ins
    T[:, INSERTION_TO_INSERTION] = p_gap
    T[:, MATCH_TO_DELETION] = p_del
    T[:, DELETION_TO_DELETION] = p_gap
    return T


def emission_probabilities(read_quals):
    """ Match and mismatch probability of each read base. """
    E = np.empty((len(read_quals), 2))
    E[:, MATCH_EMISSION] = QUAL_TO_PROB[read_quals]
    E[:, MISMATCH_EMISSION] = (
        QUAL_TO_ERROR_PROB[read_quals] / TRISTATE_CORRECTION)
    return E


def build_read_constants(read_quals, insertion_gop, deletion_gop,
                         overall_gcp):
    """ Derive the transition and emission tables of one read.

    All four arrays are validated uint8 phred values of identical length,
    see ``pairhmm.alphabet.as_quals``.
    """
    return ReadConstants(
        transition_probabilities(insertion_gop, deletion_gop, overall_gcp),
        emission_probabilities(read_quals))
