"""Rich display functions for pipeline results."""

from rich.markup import escape
from rich.table import Table

from torbootstrap.models.result import StageResult, StageStatus
from torbootstrap.utils.formatting import console, print_success

_STATUS_LABELS: dict[StageStatus, str] = {
    StageStatus.CHANGED: "[changed]CHANGED[/changed]",
    StageStatus.UNCHANGED: "[unchanged]OK[/unchanged]",
    StageStatus.SKIPPED: "[muted]SKIP[/muted]",
    StageStatus.FAILED: "[error]FAIL[/error]",
}


def create_results_table(results: list[StageResult], dry_run: bool = False) -> Table:
    """Create a Rich table displaying stage results.

    Builds a table with Status, Stage, and Details columns. Failed stages
    show their error message instead of details.

    Args:
        results: Stage results in execution order.
        dry_run: Whether this is a dry-run (changes table title).

    Returns:
        Rich Table configured for results display.
    """
    title = "Results (Dry Run)" if dry_run else "Results"

    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=9, justify="center")
    table.add_column("Stage", no_wrap=True)
    table.add_column("Details")

    for result in results:
        if result.failed:
            message = result.error or "Unknown error"
        else:
            message = "\n".join(result.details)

        table.add_row(
            _STATUS_LABELS[result.status],
            result.stage,
            f"[muted]{escape(message)}[/muted]",
        )

    return table


def print_results_summary(results: list[StageResult]) -> None:
    """Print a one-line summary of stage results.

    Args:
        results: Stage results in execution order.
    """
    failed = [r for r in results if r.failed]
    changed_count = sum(1 for r in results if r.changed)

    if not failed:
        print_success(f"All stages completed, {changed_count} changed the host.")
    else:
        console.print(
            f"\n[error]Stage {failed[0].stage} failed[/error], "
            "later stages were not run."
        )
