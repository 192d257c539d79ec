# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Mesh Execution Manager

Allocates, registers, queries and cancels execution contexts.
"""

import time
import uuid
from threading import Lock
from typing import Dict, List, Optional

from .context import ExecutionContext
from .logging import ExecutionLogger
from .models import Execution, ExecutionStatus, TriggerEvent, WorkflowConfig, utc_now


class ExecutionManager:
    """
    Registry of in-flight executions.

    Contexts are registered at creation and removed on every exit path.
    Terminated executions are not kept: lookups for them return None.

    The registry is shared with request handlers running on other threads,
    so every map access happens under a lock. The lock only covers the map
    operation itself and is never held across an await.
    """

    def __init__(self, execution_logger: ExecutionLogger, id_prefix: str = "exec"):
        self.execution_logger = execution_logger
        self.id_prefix = id_prefix

        self._active: Dict[str, ExecutionContext] = {}  # execution_id -> context
        self._lock = Lock()

    def generate_execution_id(self) -> str:
        """Execution id in the form <prefix>_<epoch millis>_<random suffix>"""
        return f"{self.id_prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:12]}"

    def create(self, workflow: WorkflowConfig, event: TriggerEvent) -> ExecutionContext:
        """Build a pending execution for the event and register it"""
        with self._lock:
            execution_id = self.generate_execution_id()
            while execution_id in self._active:
                execution_id = self.generate_execution_id()

            execution = Execution(
                id=execution_id,
                workflow_id=workflow.id,
                status=ExecutionStatus.PENDING,
                start_time=utc_now(),
                event_data=event.data,
            )
            context = ExecutionContext(execution, workflow, event.data)
            self._active[execution_id] = context

        return context

    def get_active(self) -> List[ExecutionContext]:
        """Snapshot of every registered execution"""
        with self._lock:
            return list(self._active.values())

    def get(self, execution_id: str) -> Optional[ExecutionContext]:
        with self._lock:
            return self._active.get(execution_id)

    def cancel(self, execution_id: str) -> bool:
        """
        Cancel a registered execution.

        Marks the record cancelled and deregisters it. Work already running
        for the execution is not interrupted; the mesh loops notice the
        cancellation at their next round boundary.
        """
        with self._lock:
            context = self._active.get(execution_id)
            if context is None or context.execution.status.is_terminal:
                return False
            del self._active[execution_id]
            context.execution.transition(ExecutionStatus.CANCELLED)
            context.execution.end_time = utc_now()

        self.execution_logger.log(context, "info", "Workflow execution cancelled")
        return True

    def finalize(self, context: ExecutionContext) -> None:
        """Stamp the end time and deregister; safe to call more than once"""
        context.finalize()
        with self._lock:
            self._active.pop(context.execution_id, None)
