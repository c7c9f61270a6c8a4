"""
appforge.recovery - Retry State Machine and Top-Level Error Handler
===================================================================

The pipeline in :mod:`appforge.creator` is wrapped in a small state machine
so a connectivity failure during install can be retried once:

    RUNNING ──success──────────────────────────────► DONE
       │
       ├── DownloadError ──► RECOVERABLE_FAILURE
       │                        │
       │                        ├── confirmed ──► RETRYING ──success──► DONE
       │                        │                    │
       │                        │                    └── any error ──► TERMINAL_FAILURE
       │                        └── declined ──────────────────────► TERMINAL_FAILURE
       │
       └── any other error ────────────────────────────────────────► TERMINAL_FAILURE

The confirmation is an injected callable, so tests drive the retry path
with a scripted answer instead of terminal input.

:func:`run` is the single place that turns outcomes into exit codes and
final diagnostics.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.traceback import Traceback

from appforge import log
from appforge.config import ScaffoldSettings
from appforge.creator import CreationResult, create_app, print_next_steps
from appforge.errors import (
    CommandFailedError,
    DownloadError,
    FolderNotEmptyError,
    ScaffoldValidationError,
)
from appforge.installer import DependencyInstaller
from appforge.models import ProjectRequest, RunState


console = Console(stderr=True)

Pipeline = Callable[[ProjectRequest], CreationResult]
ConfirmRetry = Callable[[DownloadError], bool]

RETRY_PROMPT = (
    "Could not download because of a connectivity issue between your machine "
    "and the package registry.\n"
    "Do you want to retry using the built-in template instead?"
)


class RecoveryController:
    """
    Run the pipeline, offering one retry after a ``DownloadError``.

    Parameters
    ----------
    pipeline : Callable[[ProjectRequest], CreationResult]
        One full attempt at creating the app.

    confirm_retry : Callable[[DownloadError], bool]
        Asked after a connectivity failure; True retries.

    Attributes
    ----------
    state : RunState
        Current state.

    history : list[RunState]
        Every state entered, in order, starting with ``RUNNING``.

    attempts : int
        Number of times the pipeline was started.

    Examples
    --------
    >>> controller = RecoveryController(pipeline, confirm_retry=lambda e: True)
    >>> result = controller.run(request)
    >>> controller.state
    <RunState.DONE: 'done'>
    """

    def __init__(self, pipeline: Pipeline, confirm_retry: ConfirmRetry) -> None:
        self._pipeline = pipeline
        self._confirm_retry = confirm_retry
        self.state = RunState.RUNNING
        self.history: list[RunState] = [RunState.RUNNING]
        self.attempts = 0

    def _transition(self, state: RunState) -> None:
        log.debug(f"{self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def _attempt(self, request: ProjectRequest) -> CreationResult:
        self.attempts += 1
        return self._pipeline(request)

    def run(self, request: ProjectRequest) -> CreationResult:
        """
        Drive the state machine to ``DONE`` or ``TERMINAL_FAILURE``.

        Returns
        -------
        CreationResult
            Result of the successful attempt.

        Raises
        ------
        Exception
            Whatever ended the run in ``TERMINAL_FAILURE``, unchanged.
        """
        try:
            result = self._attempt(request)
        except DownloadError as error:
            self._transition(RunState.RECOVERABLE_FAILURE)
            if not self._confirm_retry(error):
                self._transition(RunState.TERMINAL_FAILURE)
                raise
            result = self._retry(request)
        except Exception:
            self._transition(RunState.TERMINAL_FAILURE)
            raise

        self._transition(RunState.DONE)
        return result

    def _retry(self, request: ProjectRequest) -> CreationResult:
        self._transition(RunState.RETRYING)
        try:
            return self._attempt(request)
        except Exception:
            self._transition(RunState.TERMINAL_FAILURE)
            raise


# =============================================================================
# Top-Level Handler
# =============================================================================


def report_failure(error: BaseException) -> None:
    """
    Print the final diagnostic for a failed run.

    Validation errors list their reasons. A failed subprocess names the
    command. Anything else is an internal error and gets a full traceback.
    """
    if isinstance(error, ScaffoldValidationError):
        console.print(f"[red]{escape(str(error))}[/]")
        for reason in error.reasons:
            console.print(f"    [bold red]*[/] {escape(reason)}")
        if isinstance(error, FolderNotEmptyError):
            console.print()
            console.print(
                "Either try using a new directory name, or remove the files listed above."
            )
        console.print()
        return

    console.print()
    console.print("Aborting installation.")
    if isinstance(error, CommandFailedError):
        console.print(f"  [cyan]{escape(error.command)}[/] has failed.")
    else:
        console.print("[red]Unexpected error. Please report it as a bug:[/]")
        console.print(
            Traceback.from_exception(type(error), error, error.__traceback__)
        )
    console.print()


def run(
    request: ProjectRequest,
    *,
    confirm_retry: ConfirmRetry,
    settings: ScaffoldSettings | None = None,
    installer: DependencyInstaller | None = None,
    init_git: bool = True,
    cwd: Path | None = None,
) -> int:
    """
    Create an app and return the process exit code.

    Parameters
    ----------
    request : ProjectRequest
        Resolved user input.

    confirm_retry : Callable[[DownloadError], bool]
        Decides whether to retry after a connectivity failure.

    settings, installer, init_git
        Passed through to :func:`appforge.creator.create_app`.

    cwd : Path | None
        Working directory used to shorten the ``cd`` hint.

    Returns
    -------
    int
        0 on success, 1 on any failure.
    """

    def pipeline(req: ProjectRequest) -> CreationResult:
        return create_app(
            req,
            settings=settings,
            installer=installer,
            init_git=init_git,
            resume=controller.state is RunState.RETRYING,
        )

    controller = RecoveryController(pipeline, confirm_retry)
    try:
        result = controller.run(request)
    except Exception as error:
        report_failure(error)
        return 1

    print_next_steps(result, cwd)
    return 0
