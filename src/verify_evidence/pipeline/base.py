"""Pipeline protocol for claim evidence gathering."""

from collections.abc import Callable
from typing import Protocol

from verify_evidence.data import Claim, PipelineStatus, ScoredArticle, Usage

StatusCallback = Callable[[PipelineStatus], None]


class Pipeline(Protocol):
    """Interface for end-to-end evidence pipelines."""

    async def run(
        self,
        claim: Claim | str,
        *,
        on_status: StatusCallback | None = None,
    ) -> tuple[list[ScoredArticle], Usage]:
        """Gather ranked evidence for a claim.

        Args:
            claim: The claim to verify.
            on_status: Optional callback receiving progress notifications.

        Returns:
            Tuple of (ranked evidence, usage). The list is never empty.
        """
        ...
