import json
from dataclasses import dataclass, asdict
from typing import Optional

from pairhmm.hmm import PairHMM
from pairhmm.tiered import TieredPairHMM

__all__ = ["PairHMMConfig"]


@dataclass
class PairHMMConfig:
    implementation: str = 'logless'
    backend: str = 'numba'
    tiered: bool = True
    dtype: str = 'float64'
    max_haplotype_length: Optional[int] = None
    max_read_length: Optional[int] = None

    def build(self, max_haplotype_length=None, max_read_length=None):
        """ Construct and initialize the configured engine.

        Lengths passed here are used when the config leaves them unset.
        A tiered engine ignores ``dtype``.
        """
        if self.tiered:
            hmm = TieredPairHMM(self.implementation, backend=self.backend)
        else:
            hmm = PairHMM(self.implementation, dtype=self.dtype,
                          backend=self.backend)
        hap = self.max_haplotype_length or max_haplotype_length
        read = self.max_read_length or max_read_length
        if hap is None or read is None:
            raise ValueError('Maximum haplotype and read lengths are needed '
                             'to initialize the engine')
        hmm.initialize(hap, read)
        return hmm

    def to_json(self, filename):
        config = json.dumps(asdict(self), indent=2)
        with open(filename, 'w') as f:
            f.write(config)

    @classmethod
    def from_json(cls, filename):
        with open(filename, 'r') as f:
            js = json.loads(f.read())
        config = cls(**js)
        return config
