# common/orchestrator.py
# -*- coding: utf-8 -*-
"""
Linear orchestrator for the setup pipeline.

Tasks run strictly in order. What happens when a task raises is decided
by its StepPolicy: HARD_FAIL stops the run and exits, SOFT_WARN logs a
warning and moves on to the next task.
"""

import logging
import subprocess
import sys
from typing import Any, Callable, Dict, List, Optional

from common.exceptions import SetupError
from setup.config_models import StepPolicy


def exit_code_for(error: BaseException) -> int:
    """
    Exit with the failing command's return code when there is one.

    A command killed by signal N (negative return code -N) maps to 128 + N,
    the status a shell reports for it.
    """
    if isinstance(error, subprocess.CalledProcessError) and error.returncode:
        if error.returncode < 0:
            return 128 - error.returncode
        return error.returncode
    return 1


class Orchestrator:
    """Runs a series of named tasks with a shared context."""

    def __init__(
        self,
        app_settings: Any,
        orchestrator_logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.logger = orchestrator_logger or logging.getLogger(__name__)
        self.tasks: List[Dict[str, Any]] = []
        # Shared context for tasks to pass state between each other
        self.context: Dict[str, Any] = {}
        self.warnings: List[str] = []

    def add_task(
        self,
        name: str,
        func: Callable,
        args: Optional[List[Any]] = None,
        kwargs: Optional[Dict[str, Any]] = None,
        policy: StepPolicy = StepPolicy.HARD_FAIL,
    ) -> None:
        """
        Adds a task to the execution list.

        Args:
            name: Step tag, also used as the context key for the result.
            func: The function to execute for this task.
            args: Positional arguments to pass to the function.
            kwargs: Keyword arguments to pass to the function.
            policy: HARD_FAIL halts the orchestration on error, SOFT_WARN
                downgrades the error to a warning.
        """
        self.tasks.append({
            "name": name,
            "func": func,
            "args": args or [],
            "kwargs": kwargs or {},
            "policy": StepPolicy(policy),
        })
        self.logger.debug(f"Task '{name}' added to the queue ({policy.value}).")

    def run(self) -> bool:
        """
        Executes all added tasks in sequence.

        Returns:
            True when every task completed, False when a SOFT_WARN task failed.

        Raises:
            SystemExit: A HARD_FAIL task failed. The code is the failing
                command's return code, or 1.
        """
        self.logger.info("Orchestration started.")
        all_succeeded = True
        for i, task in enumerate(self.tasks):
            task_name = task["name"]
            self.logger.info(
                f"--- Stage {i + 1}: Running task '{task_name}' ---"
            )

            try:
                task["kwargs"]["context"] = self.context
                task["kwargs"]["app_settings"] = self.app_settings

                result = task["func"](*task["args"], **task["kwargs"])
                self.context[f"{task_name}_result"] = result

                self.logger.info(
                    f"✅ Task '{task_name}' completed successfully."
                )

            except Exception as e:
                if task["policy"] is StepPolicy.SOFT_WARN:
                    all_succeeded = False
                    self.warnings.append(f"{task_name}: {e}")
                    self.logger.warning(
                        f"⚠️ Task '{task_name}' failed: {e}. The task is non-fatal; continuing."
                    )
                    remediation = getattr(e, "remediation", None)
                    if remediation:
                        self.logger.info(remediation)
                    continue

                self.logger.critical(
                    f"🔥 Task '{task_name}' failed: {e}",
                    exc_info=not isinstance(
                        e, (SetupError, subprocess.CalledProcessError)
                    ),
                )
                remediation = getattr(e, "remediation", None)
                if remediation:
                    self.logger.info(remediation)
                self.logger.error(
                    "A fatal error occurred. Halting orchestration and exiting application."
                )
                sys.exit(exit_code_for(e))

        if all_succeeded:
            self.logger.info("✨ Orchestration finished successfully.")
        else:
            self.logger.warning(
                f"Orchestration finished with {len(self.warnings)} warning(s)."
            )
        return all_succeeded
