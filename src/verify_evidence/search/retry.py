"""Retry schedule and attempt state for the primary search provider.

The schedule is pure data (:class:`RetryPolicy`) and the bookkeeping is an
explicit state machine (:class:`RetryMachine`)::

    IDLE -> ATTEMPTING(1) -> ATTEMPTING(2) -> ... -> SUCCEEDED | EXHAUSTED

Neither performs I/O, so both can be tested without a network.
"""

from dataclasses import dataclass, field
from enum import StrEnum

from verify_evidence.errors import ProviderError
from verify_evidence.query.keywords import clean_query, keyword_query


@dataclass(frozen=True)
class RetryPolicy:
    """How many attempts to make and how long each one may take.

    Attempt ``n`` (zero-based) gets ``base_timeout + n * timeout_step``
    seconds. Later attempts use simpler phrasings, and the provider may be
    recovering from load, so deadlines grow rather than shrink.
    """

    max_attempts: int = 3
    base_timeout: float = 5.0
    timeout_step: float = 2.0

    def timeout_for(self, attempt_index: int) -> float:
        return self.base_timeout + attempt_index * self.timeout_step

    @property
    def schedule(self) -> tuple[float, ...]:
        return tuple(self.timeout_for(i) for i in range(self.max_attempts))


def attempt_phrasings(query: str) -> tuple[str, ...]:
    """Distinct phrasings to try in order: cleaned, keyword-only, original."""
    phrasings: list[str] = []
    for candidate in (clean_query(query), keyword_query(query), query.strip()):
        if candidate and candidate not in phrasings:
            phrasings.append(candidate)
    return tuple(phrasings)


class AttemptPhase(StrEnum):
    IDLE = "idle"
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


@dataclass
class RetryMachine:
    """Tracks one retry sequence over a fixed list of phrasings.

    Args:
        policy: Attempt count and timeout schedule.
        phrasings: Query phrasings, one per attempt.
    """

    policy: RetryPolicy
    phrasings: tuple[str, ...]
    phase: AttemptPhase = AttemptPhase.IDLE
    attempt: int = 0
    errors: list[ProviderError] = field(default_factory=list)

    @property
    def max_attempts(self) -> int:
        return min(self.policy.max_attempts, len(self.phrasings))

    @property
    def finished(self) -> bool:
        return self.phase in (AttemptPhase.SUCCEEDED, AttemptPhase.EXHAUSTED)

    @property
    def last_error(self) -> ProviderError | None:
        return self.errors[-1] if self.errors else None

    def begin(self) -> tuple[str, float] | None:
        """Start the next attempt.

        Returns:
            Tuple of (query phrasing, timeout) for the attempt, or None when
            no attempts remain (the machine is then EXHAUSTED).
        """
        if self.finished:
            raise RuntimeError(f"Cannot begin an attempt in phase {self.phase}")
        if self.attempt >= self.max_attempts:
            self.phase = AttemptPhase.EXHAUSTED
            return None
        index = self.attempt
        self.attempt += 1
        self.phase = AttemptPhase.ATTEMPTING
        return (self.phrasings[index], self.policy.timeout_for(index))

    def succeed(self) -> None:
        self._require_attempting()
        self.phase = AttemptPhase.SUCCEEDED

    def fail(self, error: ProviderError) -> None:
        """Record a failed attempt; EXHAUSTED once no attempts remain."""
        self._require_attempting()
        self.errors.append(error)
        if self.attempt >= self.max_attempts:
            self.phase = AttemptPhase.EXHAUSTED

    def _require_attempting(self) -> None:
        if self.phase != AttemptPhase.ATTEMPTING:
            raise RuntimeError(f"No attempt in progress (phase {self.phase})")
