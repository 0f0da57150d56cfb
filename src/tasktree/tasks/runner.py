"""Task runner utilities."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional

from .base import Task
from .output import OutputSink

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Outcome of running a task tree."""

    task: Task
    success: bool
    error: Optional[BaseException] = None
    duration: float = 0.0


class TaskRunner:
    """Executes task trees and records whether each run succeeded."""

    def __init__(self, output: Optional[OutputSink] = None) -> None:
        self.output = output
        self._results: List[RunResult] = []

    def run(self, task: Task, only: Optional[str] = None) -> RunResult:
        target = task
        if only is not None:
            target = task.find(only)
            if target is None:
                raise KeyError(f"No task with an action named '{only}'")
        started = time.perf_counter()
        try:
            if only is not None:
                target.call_action(self.output if self.output is not None else task.output)
            else:
                target.execute(self.output)
        except Exception as exc:
            logger.error("Task %s failed: %s", target.name or "<root>", exc)
            logger.debug("Failure details", exc_info=True)
            result = RunResult(task=target, success=False, error=exc, duration=time.perf_counter() - started)
        else:
            result = RunResult(task=target, success=True, duration=time.perf_counter() - started)
        self._results.append(result)
        return result

    def results(self) -> List[RunResult]:
        return list(self._results)
