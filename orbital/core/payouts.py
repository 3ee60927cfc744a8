"""
Payout weights for orb distribution.

For an epoch count n, every divisor y of n is a payout token whose weight
is y / sigma(n), where sigma(n) is the sum of all divisors of n. The
weights of one n always sum to 1.
"""

from dataclasses import asdict, dataclass
from typing import Dict, List


@dataclass(frozen=True)
class PayoutWeight:
    """Weight of one payout token."""
    token: int
    weight: float

    def to_dict(self) -> Dict:
        return asdict(self)


def sum_of_divisors(n: int) -> int:
    """
    Sum of all positive divisors of n, via prime factorisation.

    sigma(n) is multiplicative: for n = p1^a1 * ... * pk^ak it equals
    the product of (1 + p + ... + p^a) over every prime power.
    """
    if n < 1:
        return 0

    result = 1
    i = 2
    while i * i <= n:
        term_sum = 1
        term = 1
        while n % i == 0:
            n //= i
            term *= i
            term_sum += term
        result *= term_sum
        i += 1

    # Remaining factor is a prime greater than sqrt of the original n
    if n >= 2:
        result *= 1 + n

    return result


def payout_weights(n: int) -> List[PayoutWeight]:
    """
    Payout weights for every divisor of n, in ascending divisor order.

    Args:
        n: Epoch count

    Returns:
        List of PayoutWeight, empty when n < 1
    """
    if n < 1:
        return []

    total = sum_of_divisors(n)
    return [
        PayoutWeight(token=y, weight=y / total)
        for y in range(1, n + 1)
        if n % y == 0
    ]
