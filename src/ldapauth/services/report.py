"""Report the outcome of an authentication attempt."""

from __future__ import annotations

from structlog.stdlib import BoundLogger

from ..config import AuthHook
from ..models.auth import AuthOutcome
from ..models.enums import ExitCode

__all__ = ["ResultReporter"]


class ResultReporter:
    """Log the outcome, run hooks, and choose the exit status.

    Parameters
    ----------
    on_success
        Hook to call with the raw directory output on success.
    on_failure
        Hook to call with the raw directory output on failure.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        on_success: AuthHook | None,
        on_failure: AuthHook | None,
        logger: BoundLogger,
    ) -> None:
        self._on_success = on_success
        self._on_failure = on_failure
        self._logger = logger

    def report(self, outcome: AuthOutcome) -> ExitCode:
        """Report an authentication outcome.

        Exceptions raised by hooks are logged and do not change the exit
        status.

        Parameters
        ----------
        outcome
            Outcome of the authentication attempt.

        Returns
        -------
        ExitCode
            Exit status for the calling program.
        """
        reason = outcome.failure_reason
        self._logger.debug(
            "Authentication result",
            user=outcome.username,
            success=outcome.success,
            entries=outcome.entry_count,
            failure_reason=reason.value if reason else None,
            output=outcome.raw_output,
        )
        if outcome.success:
            msg = f"User '{outcome.username}' authenticated successfully."
            self._logger.info(msg)
            hook = self._on_success
        else:
            msg = f"User '{outcome.username}' failed to authenticate."
            self._logger.warning(msg)
            hook = self._on_failure
        if hook:
            try:
                hook(outcome.raw_output)
            except Exception as e:
                # The exit status reflects only the authentication decision.
                self._logger.exception(
                    "Authentication hook failed",
                    hook=getattr(hook, "__name__", repr(hook)),
                    error=str(e),
                )
        return ExitCode.success if outcome.success else ExitCode.failure
