"""Base abstraction for candidate sourcing strategies.

Each strategy is tagged with a ``CandidateSource`` and has an async ``fetch``
method that returns a ``SourceResult``.  Strategies receive their stores at
construction time and are composed by :class:`~.generator.CandidateGenerator`.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from ...models import CandidateSource, ContentItem


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class SourceResult(BaseModel):
    """The output of one sourcing strategy invocation."""

    source: CandidateSource = Field(..., description="Strategy that produced these items")
    items: list[ContentItem] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class SourcingStrategy(ABC):
    """Abstract base class for candidate sourcing strategies.

    Subclasses must implement `source` (property) and `fetch`.
    """

    @property
    @abstractmethod
    def source(self) -> CandidateSource:
        """Tag attached to every candidate this strategy discovers first."""
        ...

    @abstractmethod
    async def fetch(self, viewer_id: str, limit: int) -> SourceResult:
        """Produce up to *limit* public items for the given viewer.

        Parameters
        ----------
        viewer_id:
            Id of the requesting viewer.
        limit:
            Maximum number of items to return.

        Returns
        -------
        SourceResult
        """
        ...
