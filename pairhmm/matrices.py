import numpy as np
from pairhmm.errors import CapacityError


class Matrices:
    """ Match, insertion and deletion scratch space of one engine.

    The three matrices are allocated once with one extra row and column
    for the empty prefix boundary and one more for the final base of a
    non-global alignment. They are overwritten by every computation and
    never reallocated.

    Parameters
    ----------
    max_haplotype_length : int
        Longest haplotype that will be evaluated.
    max_read_length : int
        Longest read that will be evaluated.
    dtype : np.dtype
        Numeric representation of the cells.
    fill : float
        Value representing zero probability mass (0 or -inf).
    """

    def __init__(self, max_haplotype_length, max_read_length,
                 dtype=np.float64, fill=0.0):
        if max_read_length <= 0:
            raise CapacityError(
                'max_read_length must be > 0',
                context=f'got {max_read_length}')
        if max_haplotype_length <= 0:
            raise CapacityError(
                'max_haplotype_length must be > 0',
                context=f'got {max_haplotype_length}')
        self.max_haplotype_length = max_haplotype_length
        self.max_read_length = max_read_length
        self.dtype = np.dtype(dtype)
        self.fill = fill
        shape = (max_read_length + 2, max_haplotype_length + 2)
        self.match = np.full(shape, fill, dtype=self.dtype)
        self.insertion = np.full(shape, fill, dtype=self.dtype)
        self.deletion = np.full(shape, fill, dtype=self.dtype)
        # power of two rescaling exponent of each row
        self.scales = np.zeros(max_read_length + 2, dtype=np.int64)

    @property
    def shape(self):
        return self.match.shape

    def dump(self, read_length=None, hap_length=None):
        """ Human readable rendering of the matrices, for debugging.

        Only the active ``(read_length + 1) x (hap_length + 1)`` region is
        printed; by default the whole padded matrices.
        """
        n = self.shape[0] if read_length is None else read_length + 1
        k = self.shape[1] if hap_length is None else hap_length + 1
        lines = []
        for name, mat in (('matchMatrix', self.match),
                          ('insertionMatrix', self.insertion),
                          ('deletionMatrix', self.deletion)):
            lines.append(name)
            for i in range(n):
                row = ' '.join(
                    f'{v:>15f}' if np.isinf(v) else f'{v: 15.5e}'
                    for v in mat[i, :k])
                lines.append(f'\t{name}[{i}] {row}')
        return '\n'.join(lines)
