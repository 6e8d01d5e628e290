from evoselect.rng.random import (
    MASK32,
    MASK64,
    RAND_CAP,
    STEP_SIZE,
    UINT32_MAX,
    Prob,
    Random,
)
from evoselect.rng.utils import (
    get_permutation,
    sample_with_replacement,
)

__all__ = [
    "MASK32",
    "MASK64",
    "RAND_CAP",
    "STEP_SIZE",
    "UINT32_MAX",
    "Prob",
    "Random",
    "get_permutation",
    "sample_with_replacement",
]
