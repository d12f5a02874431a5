"""Stage interface and the orchestrator running stages in order.

Stages run strictly one after the other. A stage reports its outcome as a
:class:`StageResult`; a stage that raises a :class:`BootstrapError` is
recorded as failed and nothing after it runs. There is no retry and no
rollback: running the tool again converges the host.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from torbootstrap.core.context import BootstrapContext
from torbootstrap.core.errors import BootstrapError
from torbootstrap.models.result import ApplyResult, StageResult, StageStatus
from torbootstrap.utils.formatting import print_detail, print_error, print_step

logger = logging.getLogger(__name__)


class Stage(ABC):
    """A single step of the provisioning pipeline.

    Attributes:
        name: Short identifier used in results.
        title: Header printed when the stage starts.
    """

    name: str = ""
    title: str = ""

    def applies_to(self, ctx: BootstrapContext) -> bool:
        """Check whether the stage runs for this context. Defaults to always."""
        return True

    @abstractmethod
    def run(self, ctx: BootstrapContext) -> StageResult:
        """Run the stage.

        Args:
            ctx: Context of the current run.

        Returns:
            StageResult describing what happened.

        Raises:
            BootstrapError: If the stage cannot complete.
        """

    def result(
        self,
        changed: bool,
        details: Iterable[str] = (),
    ) -> StageResult:
        """Build a successful result for this stage."""
        return StageResult(
            stage=self.name,
            status=StageStatus.CHANGED if changed else StageStatus.UNCHANGED,
            details=tuple(details),
        )

    def skipped(self, reason: str) -> StageResult:
        """Build a skipped result for this stage."""
        return StageResult(stage=self.name, status=StageStatus.SKIPPED, details=(reason,))

    def from_applies(self, applies: Sequence[ApplyResult], *notes: str) -> StageResult:
        """Build a result from file applies plus free-form notes."""
        changed = any(a.changed for a in applies)
        return self.result(changed, [*(a.message for a in applies), *notes])


def run_pipeline(stages: Sequence[Stage], ctx: BootstrapContext) -> list[StageResult]:
    """Run stages in order, stopping at the first failure.

    Args:
        stages: Stages to run.
        ctx: Context passed to every stage.

    Returns:
        Results of every stage that was considered, ending with the failed
        one if the run aborted.
    """
    results: list[StageResult] = []

    for stage in stages:
        if not stage.applies_to(ctx):
            logger.debug("Stage %s does not apply to %s", stage.name, ctx.mode.value)
            results.append(stage.skipped(f"Not needed for {ctx.mode.value} mode"))
            continue

        if stage.title:
            print_step(stage.title)
        logger.debug("Starting stage %s", stage.name)

        try:
            result = stage.run(ctx)
        except BootstrapError as e:
            logger.error("Stage %s failed: %s", stage.name, e)
            print_error(str(e))
            results.append(
                StageResult(
                    stage=stage.name,
                    status=StageStatus.FAILED,
                    error=str(e),
                    exit_code=e.exit_code,
                )
            )
            break

        for detail in result.details:
            print_detail(detail)
        results.append(result)

    return results
