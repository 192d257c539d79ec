# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Mesh Execution Logging

Appends structured entries to an execution's log and mirrors them to the
process logger. Fails gracefully: logging never fails an execution.
"""

import logging
from typing import Any, Optional

from arbiter_mesh.core.logging import get_mesh_logger, log_event

from .context import ExecutionContext
from .models import ExecutionLogEntry


class ExecutionLogger:
    """
    Logs execution events onto the execution record.

    Every entry is appended to ``execution.execution_log`` first and then
    emitted on the ``arbiter.mesh`` logger.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_mesh_logger()

    def log(
        self,
        context: ExecutionContext,
        level: str,
        message: str,
        data: Any = None,
        agent_id: Optional[str] = None
    ) -> None:
        """Append a timestamped entry to the execution log"""
        try:
            entry = ExecutionLogEntry(
                level=level,
                message=message,
                agent_id=agent_id,
                data=data
            )
            context.execution.execution_log.append(entry)
        except Exception as e:
            print(f"[ExecutionLogger] Failed to record log entry: {e}")
            return

        try:
            log_event(
                self.logger,
                message,
                level=level,
                execution_id=context.execution.id,
                workflow_id=context.execution.workflow_id,
                agent_id=agent_id,
                data=data
            )
        except Exception as e:
            print(f"[ExecutionLogger] Failed to emit log entry: {e}")
            # Continue execution even if logging fails
