"""
Corruption-tolerant secret reconstruction by subset consensus.

Given n >= k shares of which some may be corrupted or forged, the secret
is recomputed from every k-subset and the value produced by the most
subsets wins:

    1. Enumerate all C(n, k) subsets of the x-sorted shares
       (lexicographic order).
    2. Interpolate each subset at x = 0 in exact rational arithmetic.
    3. Tally how many subsets produced each distinct value, remembering
       the first subset (the witness) that produced it.
    4. Select the value with the highest count. Ties go to the value
       whose witness came first in enumeration order.

A corrupted share pulls almost every subset containing it onto a value of
its own, while every all-honest subset lands on the true secret, so the
secret is the mode as long as honest shares sufficiently outnumber bad
ones.

Work is C(n, k) interpolations of O(k^2) rational operations each, which
is exponential in the worst case (k near n/2).
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence

from ..crypto.combinations import combinations, count_combinations
from ..crypto.rational import Rational
from ..crypto.shamir import Share, lagrange_at_zero
from ..errors import InsufficientSharesError, NoConsensusError


logger = logging.getLogger(__name__)

# Subsets handed to each worker process per round trip.
PARALLEL_CHUNK_SIZE = 64


@dataclass
class TallyEntry:
    """
    Agreement record for one candidate secret.

    Attributes:
        value: The candidate secret.
        count: Number of subsets that produced it.
        witness: First subset (in enumeration order) that produced it.
        first_seen: Enumeration position of the witness.
    """

    value: Rational
    count: int
    witness: tuple[Share, ...]
    first_seen: int


@dataclass
class ReconstructionResult:
    """Outcome of one consensus reconstruction run."""

    value: Rational
    witness: tuple[Share, ...]
    count: int
    subsets_evaluated: int
    distinct_values: int

    @property
    def is_integer(self) -> bool:
        return self.value.is_integer

    @property
    def integer_value(self) -> Optional[int]:
        return self.value.to_exact_integer()

    @property
    def unanimous(self) -> bool:
        return self.count == self.subsets_evaluated

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "secret": str(self.value),
            "numerator": str(self.value.numerator),
            "denominator": str(self.value.denominator),
            "is_integer": self.is_integer,
            "agreement": self.count,
            "subsets_evaluated": self.subsets_evaluated,
            "distinct_values": self.distinct_values,
            "witness": [share.to_dict() for share in self.witness],
        }


def _subsets(shares: Sequence[Share], k: int) -> Iterator[tuple[Share, ...]]:
    for idx in combinations(len(shares), k):
        yield tuple(shares[i] for i in idx)


def _evaluate(
    subsets: Iterable[tuple[Share, ...]], workers: Optional[int]
) -> Iterator[tuple[tuple[Share, ...], Rational]]:
    """Pair each subset with its interpolated value, in enumeration order."""
    if not workers or workers <= 1:
        for subset in subsets:
            yield subset, lagrange_at_zero(subset)
        return

    # Executor.map returns results in submission order, so positions (and
    # therefore witnesses and tie-breaks) match the sequential run.
    subsets = list(subsets)
    with ProcessPoolExecutor(max_workers=workers) as pool:
        values = pool.map(lagrange_at_zero, subsets, chunksize=PARALLEL_CHUNK_SIZE)
        yield from zip(subsets, values)


def tally_subsets(
    shares: Sequence[Share], k: int, workers: Optional[int] = None
) -> dict[Rational, TallyEntry]:
    """
    Interpolate every k-subset of shares and count agreeing results.

    Args:
        shares: Shares in the order enumeration should follow
            (ascending x for a canonical run)
        k: Subset size (reconstruction threshold)
        workers: Interpolate in this many processes when > 1

    Returns:
        Mapping from candidate secret to its TallyEntry, in first-seen
        order. Empty when k <= 0 or k > len(shares).
    """
    tally: dict[Rational, TallyEntry] = {}

    for position, (subset, value) in enumerate(_evaluate(_subsets(shares, k), workers)):
        logger.debug("Subset x=%s -> %s", [s.x for s in subset], value)

        entry = tally.get(value)
        if entry is None:
            tally[value] = TallyEntry(
                value=value, count=1, witness=subset, first_seen=position
            )
        else:
            entry.count += 1

    return tally


def ranked(tally: dict[Rational, TallyEntry]) -> list[TallyEntry]:
    """Tally entries ordered by count (desc), then first seen (asc)."""
    return sorted(tally.values(), key=lambda e: (-e.count, e.first_seen))


def select_consensus(tally: dict[Rational, TallyEntry]) -> TallyEntry:
    """
    Pick the modal candidate from a tally.

    Ties on count are broken by enumeration position of the witness,
    never by mapping iteration order.

    Raises:
        NoConsensusError: If the tally is empty
    """
    if not tally:
        raise NoConsensusError("Could not determine modal secret: no subsets evaluated")

    entries = ranked(tally)
    winner = entries[0]

    tied = [e for e in entries[1:] if e.count == winner.count]
    if tied:
        logger.warning(
            "%d value(s) tie with %s at %d subsets; keeping the earliest seen",
            len(tied), winner.value, winner.count,
        )

    return winner


def reconstruct(
    shares: Sequence[Share], k: int, workers: Optional[int] = None
) -> ReconstructionResult:
    """
    Recover the consensus secret from possibly corrupted shares.

    Args:
        shares: Decoded shares with distinct x values (sorted by x here)
        k: Reconstruction threshold
        workers: Interpolate in this many processes when > 1

    Returns:
        ReconstructionResult with the modal value and its witness subset

    Raises:
        InsufficientSharesError: If fewer than k shares are available
        NoConsensusError: If k <= 0, so no subset can be evaluated
        DivideByZeroError: If two shares share an x value

    Example:
        >>> r = reconstruct([Share(1, 3), Share(2, 5), Share(3, 7)], k=2)
        >>> r.integer_value
        1
    """
    if len(shares) < k:
        raise InsufficientSharesError(
            f"Not enough shares in input: need {k}, got {len(shares)}"
        )

    ordered = sorted(shares, key=lambda s: s.x)
    logger.info(
        "Evaluating %d subsets of size %d from %d shares",
        count_combinations(len(ordered), k), k, len(ordered),
    )

    tally = tally_subsets(ordered, k, workers=workers)
    winner = select_consensus(tally)
    evaluated = sum(e.count for e in tally.values())

    result = ReconstructionResult(
        value=winner.value,
        witness=winner.witness,
        count=winner.count,
        subsets_evaluated=evaluated,
        distinct_values=len(tally),
    )

    if result.unanimous:
        logger.info("All %d subsets agree on %s", evaluated, result.value)
    else:
        logger.warning(
            "Shares disagree: %d of %d subsets agree on %s (%d distinct values)",
            result.count, evaluated, result.value, result.distinct_values,
        )

    return result
