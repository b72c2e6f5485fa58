import logging
import os

from dotenv import load_dotenv

from models.errors import InvalidBudgetError, ResourceProbeError
from repositories.resource_limit_repository import ResourceLimitRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ResourceLimitService:
    """
    Decides the concurrency budget for a run.
    Delegates host probing to ResourceLimitRepository.
    """

    def __init__(self,
                 repository: ResourceLimitRepository = None,
                 strict: bool = None,
                 fallback_multiplier: int = None):
        self.repository = repository or ResourceLimitRepository()
        if strict is None:
            strict = os.getenv("STRICT_RESOURCE_PROBE", "false").lower() in ("1", "true", "yes")
        self.strict = strict
        if fallback_multiplier is None:
            raw = os.getenv("FALLBACK_BUDGET_MULTIPLIER", "4").strip()
            try:
                fallback_multiplier = int(raw)
            except ValueError:
                raise InvalidBudgetError(f"FALLBACK_BUDGET_MULTIPLIER is not an integer: {raw!r}") from None
        if fallback_multiplier < 1:
            raise InvalidBudgetError(f"FALLBACK_BUDGET_MULTIPLIER must be >= 1, got {fallback_multiplier}")
        self.fallback_multiplier = fallback_multiplier

    def fallback_limit(self) -> int:
        return (os.cpu_count() or 1) * self.fallback_multiplier

    def discover_limit(self) -> int:
        """
        Returns:
            int: CONCURRENCY_BUDGET if set, else the host open-file limit,
            else (non-strict only) cpu_count * fallback multiplier.
        Raises:
            InvalidBudgetError: the resulting budget is not a positive integer.
            ResourceProbeError: strict mode and the host could not report a limit.
        """
        override = os.getenv("CONCURRENCY_BUDGET", "").strip()
        if override:
            try:
                limit = int(override)
            except ValueError:
                raise InvalidBudgetError(f"CONCURRENCY_BUDGET is not an integer: {override!r}") from None
            source = "CONCURRENCY_BUDGET"
        else:
            try:
                limit = self.repository.read_open_file_limit()
                source = "open file limit"
            except ResourceProbeError as err:
                if self.strict:
                    raise
                limit = self.fallback_limit()
                source = "cpu fallback"
                logger.warning(f"Resource probe failed ({err}); falling back to budget {limit}")

        if limit <= 0:
            raise InvalidBudgetError(f"Concurrency budget from {source} must be positive, got {limit}")

        logger.info(f"Concurrency budget: {limit} (from {source})")
        return limit
