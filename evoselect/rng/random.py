"""
Middle-square Weyl-sequence pseudo-random generator.

Every stochastic decision made by the selection procedures goes through a
single ``Random`` instance owned by the population, which keeps runs
reproducible from one integer seed.
"""

from __future__ import annotations

from enum import Enum
import math
import time

from evoselect.exceptions import ContractViolation, ProbabilityError

MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF
RAND_CAP = 1 << 32
STEP_SIZE = 0xB5AD4ECEDA1CE2A9

# Returned by distributions whose result cannot be represented.
UINT32_MAX = MASK32


class Prob(Enum):
    """Per-bit probabilities (in tenths of a percent) supported by bit draws."""

    PROB_0 = 0
    PROB_12_5 = 125
    PROB_25 = 250
    PROB_37_5 = 375
    PROB_50 = 500
    PROB_62_5 = 625
    PROB_75 = 750
    PROB_87_5 = 875
    PROB_100 = 1000


def _check_probability(p: float) -> None:
    if not 0.0 <= p <= 1.0:
        raise ProbabilityError(f"Probability must be in [0, 1], got {p}")


def _neg_log(u: float) -> float:
    return -math.log(u) if u > 0.0 else math.inf


class Random:
    """Seedable generator with a 64-bit squaring accumulator and Weyl state.

    Each raw draw squares the accumulator, adds the advanced Weyl state,
    swaps the 32-bit halves and returns the low 32 bits.

    Not safe for uncoordinated concurrent use: give each worker its own
    independently seeded instance.
    """

    def __init__(self, seed: int = -1):
        self._value = 0
        self._weyl_state = 0
        self._original_seed = 0
        self._exp_rv = 0.0
        self.reset_seed(seed)

    def get_seed(self) -> int:
        """Seed used to start the current sequence."""
        return self._original_seed

    def reset_seed(self, seed: int) -> None:
        """Start a new sequence.

        A seed <= 0 draws entropy from the wall clock and the generator's
        identity, so the resulting sequence is not reproducible.
        """
        if seed <= 0:
            weyl_state = (int(time.time()) ^ id(self)) & MASK64
        else:
            weyl_state = seed & MASK64

        self._original_seed = weyl_state
        self._weyl_state = (weyl_state * 2) & MASK64  # starting state must be even
        self._value = 0
        self._exp_rv = 0.0

    def _get(self) -> int:
        value = (self._value * self._value) & MASK64
        self._weyl_state = (self._weyl_state + STEP_SIZE) & MASK64
        value = (value + self._weyl_state) & MASK64
        self._value = ((value >> 32) | (value << 32)) & MASK64
        return self._value & MASK32

    # ------------------------------------------------------------------
    # Uniform draws
    # ------------------------------------------------------------------

    def get_double(self, a: float | None = None, b: float | None = None) -> float:
        """Uniform double.

        ``get_double()`` is in [0, 1), ``get_double(max)`` in [0, max) and
        ``get_double(min, max)`` in [min, max).
        """
        value = self._get() / RAND_CAP
        if a is None:
            return value
        if b is None:
            return value * a
        return value * (b - a) + a

    def get_uint(self, a: int | None = None, b: int | None = None) -> int:
        """Uniform unsigned integer.

        ``get_uint()`` returns 32 raw bits, ``get_uint(max)`` is in [0, max)
        and ``get_uint(min, max)`` in [min, max).  Bounded draws scale a double,
        which is slightly biased for ranges that are not powers of two.
        """
        if a is None:
            return self._get()
        if b is not None:
            if b <= a:
                raise ContractViolation(f"Empty range [{a}, {b})")
            return self.get_uint(b - a) + a
        if a <= 0:
            raise ContractViolation(f"Upper bound must be positive, got {a}")
        return int(self.get_double() * a)

    def get_int(self, a: int, b: int | None = None) -> int:
        """Uniform signed integer in [0, a) or [a, b)."""
        if b is None:
            return self.get_uint(a)
        if b <= a:
            raise ContractViolation(f"Empty range [{a}, {b})")
        return self.get_uint(b - a) + a

    def get_uint64(self, max_value: int | None = None) -> int:
        """64 random bits, or a value in [0, max_value) without modulo bias."""
        if max_value is None:
            return (self._get() << 32) + self._get()
        if max_value <= 0:
            raise ContractViolation(f"Upper bound must be positive, got {max_value}")
        if max_value <= RAND_CAP:
            return self.get_uint(max_value)

        mask = (1 << max_value.bit_length()) - 1
        value = self.get_uint64() & mask
        while value >= max_value:
            value = self.get_uint64() & mask
        return value

    # ------------------------------------------------------------------
    # Bit draws
    # ------------------------------------------------------------------

    def get_bits12_5(self) -> int:
        return self._get() & self._get() & self._get()

    def get_bits25(self) -> int:
        return self._get() & self._get()

    def get_bits37_5(self) -> int:
        return (self._get() | self._get()) & self._get()

    def get_bits50(self) -> int:
        return self._get()

    def get_bits62_5(self) -> int:
        return (self._get() & self._get()) | self._get()

    def get_bits75(self) -> int:
        return self._get() | self._get()

    def get_bits87_5(self) -> int:
        return self._get() | self._get() | self._get()

    def get_bits(self, prob: Prob) -> int:
        """32 bits where each bit is set with probability ``prob``."""
        if prob is Prob.PROB_0:
            return 0
        if prob is Prob.PROB_100:
            return MASK32
        return _BIT_DRAWS[prob](self)

    def rand_fill(self, num_bytes: int, prob: Prob = Prob.PROB_50) -> bytes:
        """Random bytes where each bit is set with probability ``prob``."""
        if num_bytes < 0:
            raise ContractViolation(f"num_bytes must be non-negative, got {num_bytes}")
        buffer = bytearray()
        while len(buffer) < num_bytes:
            buffer += self.get_bits(prob).to_bytes(4, "little")
        return bytes(buffer[:num_bytes])

    # ------------------------------------------------------------------
    # Events and distributions
    # ------------------------------------------------------------------

    def p(self, prob: float) -> bool:
        """Bernoulli trial that succeeds with probability ``prob``."""
        _check_probability(prob)
        return self._get() < prob * RAND_CAP

    def get_rand_normal(self, mean: float = 0.0, std: float = 1.0) -> float:
        """Normal variate via the rejection method.

        A leftover exponential variate is carried between calls, so results
        depend on call order.
        """
        while True:
            exp_rv2 = _neg_log(self.get_double())
            self._exp_rv -= (exp_rv2 - 1.0) * (exp_rv2 - 1.0) / 2.0
            if self._exp_rv > 0:
                break
            self._exp_rv = _neg_log(self.get_double())

        value = exp_rv2 if self.p(0.5) else -exp_rv2
        return mean + value * std

    def get_rand_poisson(self, mean: float) -> int:
        """Poisson variate; ``UINT32_MAX`` if ``exp(-mean)`` underflows."""
        threshold = math.exp(-mean)
        if threshold <= 0:
            return UINT32_MAX

        k = 0
        u = self.get_double()
        while u >= threshold:
            u *= self.get_double()
            k += 1
        return k

    def get_rand_poisson_trials(self, n: float, p: float) -> int:
        """Poisson approximation of ``n`` trials with success probability ``p``."""
        _check_probability(p)
        if p > 0.5:
            return max(0, int(n) - self.get_rand_poisson(n * (1 - p)))
        return self.get_rand_poisson(n * p)

    def get_rand_binomial(self, n: float, p: float) -> int:
        """Exact binomial variate: actually runs ``n`` Bernoulli trials."""
        _check_probability(p)
        if n < 0:
            raise ContractViolation(f"Number of trials must be non-negative, got {n}")
        return sum(1 for _ in range(math.ceil(n)) if self.p(p))

    def get_rand_geometric(self, p: float) -> int:
        """Trials up to and including the first success.

        ``p == 0`` can never succeed; ``UINT32_MAX`` stands in for infinity.
        """
        _check_probability(p)
        if p == 0:
            return UINT32_MAX
        result = 1
        while not self.p(p):
            result += 1
        return result

    def __repr__(self) -> str:
        return f"Random(seed={self._original_seed})"


_BIT_DRAWS = {
    Prob.PROB_12_5: Random.get_bits12_5,
    Prob.PROB_25: Random.get_bits25,
    Prob.PROB_37_5: Random.get_bits37_5,
    Prob.PROB_50: Random.get_bits50,
    Prob.PROB_62_5: Random.get_bits62_5,
    Prob.PROB_75: Random.get_bits75,
    Prob.PROB_87_5: Random.get_bits87_5,
}
