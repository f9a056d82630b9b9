"""Progress bar utilities for Rich console displays."""

from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


def create_progress(console: Console | None = None) -> Progress:
    """Create a progress bar with a spinner, an M of N counter and elapsed time.

    Args:
        console: Rich console instance (optional)

    Returns:
        Configured Progress instance
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("•"),
        TimeElapsedColumn(),
        console=console,
    )


@contextmanager
def track_progress(
    description: str, total: int, console: Console | None = None
) -> Iterator[tuple[Progress, TaskID]]:
    """Context manager yielding a running progress bar and its task.

    Example:
        ```python
        from voirewards.helpers.progress import track_progress

        weeks = list(iter_weeks(start, until))
        with track_progress("Counting weeks", total=len(weeks)) as (progress, task):
            for week in weeks:
                progress.update(task, advance=1)
        ```
    """
    with create_progress(console) as progress:
        task_id = progress.add_task(description, total=total)
        yield progress, task_id


__all__ = ["create_progress", "track_progress"]
