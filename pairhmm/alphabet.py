import numpy as np
from pairhmm.constants import A, C, G, T, N
from pairhmm.errors import QualityRangeError


class Alphabet:
    def __init__(self, chars, encoding=None, missing=255):
        self.chars = np.frombuffer(chars, dtype=np.uint8)
        self.encoding = np.zeros(256, dtype=np.uint8) + missing
        if encoding is None:
            self.encoding[self.chars] = np.arange(len(self.chars))
            self.size = len(self.chars)
        else:
            self.encoding[self.chars] = encoding
            self.size = encoding.max() + 1

    def __len__(self):
        return self.size

    def __getitem__(self, i):
        return chr(self.chars[i])

    def encode(self, x):
        """ encode ASCII bytes into alphabet indices """
        x = np.frombuffer(x, dtype=np.uint8)
        return self.encoding[x]

    def decode(self, x):
        """ decode index array, x, to byte string of this alphabet """
        string = self.chars[x]
        return string.tobytes()


class Nucleotides(Alphabet):
    def __init__(self):
        chars = b'ACGTNacgtn'
        encoding = np.array([A, C, G, T, N, A, C, G, T, N])
        super(Nucleotides, self).__init__(
            chars, encoding=encoding, missing=N)


DNA = Nucleotides()


def as_bases(x, alphabet=DNA):
    """ Encode a base sequence.

    Parameters
    ----------
    x : str, bytes or array_like of uint8
        ASCII bases. Symbols outside ``ACGT`` become ``N``.
    alphabet : Alphabet
        Alphabet used for the encoding.

    Returns
    -------
    np.ndarray
        Contiguous uint8 array of base indices.
    """
    if isinstance(x, str):
        x = x.encode('ascii')
    elif not isinstance(x, (bytes, bytearray)):
        x = np.ascontiguousarray(x, dtype=np.uint8).tobytes()
    return np.ascontiguousarray(alphabet.encode(bytes(x)))


def as_quals(x, name='quals', max_qual=None):
    """ Coerce raw phred qualities to a uint8 array.

    Parameters
    ----------
    x : bytes or array_like of int
        Raw phred values (not ASCII offset encoded).
    name : str
        Name reported when a value is out of range.
    max_qual : int, optional
        Largest accepted quality. Unchecked when None.
    """
    if isinstance(x, (bytes, bytearray)):
        q = np.frombuffer(bytes(x), dtype=np.uint8).astype(np.int64)
    else:
        q = np.asarray(x, dtype=np.int64).ravel()
    if len(q) > 0:
        lo, hi = int(q.min()), int(q.max())
        if lo < 0 or (max_qual is not None and hi > max_qual):
            raise QualityRangeError(
                f'{name} must lie in [0, {max_qual}]',
                context=f'found values in [{lo}, {hi}]')
    return np.ascontiguousarray(q, dtype=np.uint8)
