"""Engine-wide caps and defaults.

Every computation is bounded by these caps so that a single call stays cheap
enough to rerun on each interactive input change.
"""

# Largest partition count accepted by the public Riemann-sum API.
MAX_PARTITIONS = 200

# Partition count used internally for reference integrals without a closed form.
REFERENCE_PARTITIONS = 20000

# Bootstrap resamples and CLT repetitions.
MAX_RESAMPLES = 5000

# Largest single draw from a distribution or population.
MAX_SAMPLE_SIZE = 10000

# Discrete quantile searches stop after this many support steps.
MAX_QUANTILE_STEPS = 100000

DEFAULT_CONFIDENCE = 0.95
DEFAULT_ALPHA = 0.05

# Below this many observations an unknown-variance interval uses Student's t.
LARGE_SAMPLE_THRESHOLD = 30

DEFAULT_SEED = 42
