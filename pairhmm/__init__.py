from pairhmm.errors import (
    PairHMMError, InvalidInputError, NumericalFaultError
)
from pairhmm.hmm import (
    PairHMM, implementations, compute_likelihoods,
    first_position_where_haplotypes_differ
)
from pairhmm.tiered import TieredPairHMM
from pairhmm.transitions import ReadConstants, build_read_constants
from pairhmm.dataset import Testcase, read_testcases
from pairhmm.config import PairHMMConfig
from pairhmm.sim import simulate_testcases

__version__ = '0.1.0'
