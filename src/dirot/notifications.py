"""Fire-and-forget delivery of apartment notifications."""

import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any

from dirot.email import Action, send_apartment_email

SendFunc = Callable[[dict[str, Any], Action, bool], bool]
FailureHook = Callable[[str, BaseException | None], None]

logger = logging.getLogger(__name__)


class Notifier:
    """
    Runs notification sends on a background worker.

    The caller never waits for the send and never sees its failure: a failed send
    is logged here and reported to the registered failure hooks.
    """

    def __init__(
        self,
        send: SendFunc = send_apartment_email,
        dry_run: bool = False,
        max_workers: int = 2,
    ) -> None:
        self._send = send
        self.dry_run = dry_run
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notify")
        self._pending: list[Future[bool]] = []
        self._failure_hooks: list[FailureHook] = []

    def on_failure(self, hook: FailureHook) -> None:
        """Register a callback invoked with (title, error) when a send fails."""
        self._failure_hooks.append(hook)

    def notify(self, data: dict[str, Any], action: Action) -> "Future[bool]":
        """
        Schedule a notification and return immediately.

        Args:
            data: Apartment fields
            action: "added" or "updated"

        Returns:
            Future resolving to True on success, False on failure
        """
        self._pending = [f for f in self._pending if not f.done()]
        future = self._executor.submit(self._deliver, dict(data), action)
        self._pending.append(future)
        return future

    def _deliver(self, data: dict[str, Any], action: Action) -> bool:
        title = str(data.get("title", ""))
        try:
            sent = self._send(data, action, self.dry_run)
        except ValueError as e:
            logger.error("Cannot send '%s' notification for %s: %s", action, title, e)
            self._report_failure(title, e)
            return False
        except Exception as e:
            logger.exception("Failed to send '%s' notification for %s", action, title)
            self._report_failure(title, e)
            return False

        if not sent:
            logger.warning("Notification for %s was not accepted", title)
            self._report_failure(title, None)
        return sent

    def _report_failure(self, title: str, error: BaseException | None) -> None:
        for hook in self._failure_hooks:
            hook(title, error)

    def drain(self, timeout: float | None = None) -> None:
        """Wait for every scheduled notification to settle."""
        pending, self._pending = self._pending, []
        wait(pending, timeout=timeout)

    def shutdown(self) -> None:
        """Wait for pending sends and stop the worker."""
        self._executor.shutdown(wait=True)


__all__ = ["Notifier"]
