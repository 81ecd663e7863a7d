import math

# phred qualities
MAX_CACHED_QUAL = 127
DEFAULT_GOP = 45
DEFAULT_GCP = 10

# base encodings, anything outside ACGT is unknown
A, C, G, T, N = 0, 1, 2, 3, 4

# columns of the per read position transition table
MATCH_TO_MATCH = 0
INDEL_TO_MATCH = 1
MATCH_TO_INSERTION = 2
INSERTION_TO_INSERTION = 3
MATCH_TO_DELETION = 4
DELETION_TO_DELETION = 5
N_TRANSITIONS = 6

# columns of the per read position emission table
MATCH_EMISSION = 0
MISMATCH_EMISSION = 1

# substitution errors are split across the three alternative bases
TRISTATE_CORRECTION = 3.0

# jacobian logarithm table used by the approximate log10 sums
MAX_JACOBIAN_TOLERANCE = 8.0
JACOBIAN_LOG_TABLE_STEP = 0.0001
JACOBIAN_LOG_TABLE_INV_STEP = 1.0 / JACOBIAN_LOG_TABLE_STEP

# real space scaling of the free deletion start, per precision
INITIAL_CONDITION = {
    'float32': math.ldexp(1.0, 120),
    'float64': math.ldexp(1.0, 1020),
}
INITIAL_CONDITION_LOG10 = {
    k: math.log10(v) for k, v in INITIAL_CONDITION.items()}

# scaled sums below this in single precision are treated as underflow
MIN_ACCEPTED = 1e-28

# positive log10 results up to this are rounding noise and clamped to zero
LOG10_CLAMP_TOLERANCE = 1e-4
