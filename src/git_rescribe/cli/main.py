"""Command-line interface for git-rescribe."""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from git_rescribe.core.rescriber import Rescriber, describe_plan
from git_rescribe.exceptions import InvalidBaseError, PlanValidationError, RescribeError
from git_rescribe.models import RebasePlan, RescribeResult

console = Console()

USAGE = """\
Usage:
  git-rescribe <base>        Start interactive rebase from base
  git-rescribe --root        Rescribe all commits
  git-rescribe --continue    Continue in-progress rescribe
  git-rescribe --abort       Abort in-progress rescribe

Options:
  --yes, -y                  Skip confirmation prompt

Examples:
  git-rescribe HEAD~5        Rescribe last 5 commits
  git-rescribe main --yes    Rescribe commits since main without prompt"""


def _setup_logging(verbose: bool) -> None:
    """Send git_rescribe log records to the console."""
    logger = logging.getLogger("git_rescribe")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.handlers = [h for h in logger.handlers if not isinstance(h, RichHandler)]
    logger.addHandler(
        RichHandler(
            console=console,
            show_time=False,
            show_path=False,
            show_level=verbose,
            markup=False,
        )
    )


def show_plan(plan: RebasePlan) -> None:
    """Print a table of what the plan does to each commit."""
    total = len(plan.commits)
    table = Table(
        title=f"Plan for {total} commit{'' if total == 1 else 's'}",
        show_header=False,
        box=None,
    )
    table.add_column("Status")
    table.add_column("Commit")

    for row in describe_plan(plan):
        style = "dim" if row.status == "Reuse" else "yellow"
        table.add_row(f"[{style}]{row.status}[/{style}]", escape(row.subject))
        for change in row.changes:
            table.add_row("", f"  - {change}")

    console.print(table)


def confirm_plan(plan: RebasePlan) -> bool:
    return click.confirm("Apply these changes?", default=True)


def _print_base_guidance(error: InvalidBaseError) -> None:
    total = error.total_commits
    console.print(f"[red]Error: Invalid base '{escape(error.base)}'[/red]")
    console.print(f"\nThis branch has {total} commit{'' if total == 1 else 's'}.")
    console.print("\nTo rescribe all commits, run:")
    console.print("  git-rescribe --root")
    if total > 1:
        console.print("\nOr to rescribe the last N commits, run:")
        console.print("  git-rescribe HEAD~N")
        console.print(f"  (e.g., git-rescribe HEAD~{min(5, total - 1)})")


def _print_result(result: Optional[RescribeResult]) -> None:
    if result is None:
        console.print(
            "[yellow]Plan not applied. Run 'git-rescribe --continue' to apply it "
            "or 'git-rescribe --abort' to discard it.[/yellow]"
        )
        return

    created = len(result.created)
    reused = len(result.replacements) - len(result.rewritten)
    console.print(
        f"[green]✓ Rescribe complete![/green] "
        f"{created} created, {reused} reused"
        + (f", HEAD is now {result.final_commit[:7]}" if result.branch_updated else "")
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="git-rescribe")
@click.argument("base", required=False)
@click.option("--root", is_flag=True, help="Rescribe every commit reachable from HEAD")
@click.option("--continue", "continue_", is_flag=True, help="Continue in-progress rescribe")
@click.option("--abort", is_flag=True, help="Abort in-progress rescribe")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
@click.option("--edit/--no-edit", default=True, help="Open the plan in an editor before applying")
@click.option("--verbose", "-v", is_flag=True, help="Show per-commit details")
def main(
    base: Optional[str],
    root: bool,
    continue_: bool,
    abort: bool,
    yes: bool,
    edit: bool,
    verbose: bool,
):
    """Rewrite commit metadata by editing it as YAML.

    Opens every commit in BASE..HEAD as an editable plan (author, committer,
    dates, message, content and parents), then recreates only the commits
    that changed.
    """
    _setup_logging(verbose)

    if not (abort or continue_ or root or base):
        console.print("[red]Error: Missing base argument[/red]\n")
        console.print(USAGE, markup=False, highlight=False)
        raise click.Abort()

    rescriber = None
    try:
        rescriber = Rescriber.open(
            Path.cwd(),
            preview=show_plan,
            confirm=confirm_plan,
            skip_confirmation=yes or None,
            edit=edit,
        )

        if abort:
            console.print("Aborting rescribe...")
            if rescriber.abort():
                console.print("Cleaned up rescribe state")
            else:
                console.print("No rescribe state to clean up")
            return

        if continue_:
            result = rescriber.resume()
        else:
            result = rescriber.start(None if root else base)
    except InvalidBaseError as e:
        _print_base_guidance(e)
        raise click.Abort() from e
    except PlanValidationError as e:
        console.print("[red]Error: Invalid rescribe plan[/red]")
        for message in e.errors:
            console.print(f"  - {message}", markup=False)
        console.print("Fix the plan and run 'git-rescribe --continue', or run --abort.")
        raise click.Abort() from e
    except RescribeError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if rescriber is not None and (continue_ or root or base) and rescriber.state.in_progress():
            branch = rescriber.state.original_branch() or "the original branch"
            console.print(
                f"{branch} is unchanged. Fix the problem and run "
                "'git-rescribe --continue', or run 'git-rescribe --abort'."
            )
        raise click.Abort() from e

    _print_result(result)


if __name__ == "__main__":
    main()
