# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Tests for ExecutionLogger
"""

import logging

from unittest.mock import Mock

from arbiter_mesh.mesh.logging import ExecutionLogger


def test_entry_appended_and_emitted(context, caplog):
    execution_logger = ExecutionLogger(logging.getLogger("arbiter.mesh.tests"))

    with caplog.at_level(logging.DEBUG, logger="arbiter.mesh.tests"):
        execution_logger.log(context, "warn", "Tool not found: nmap", data={"tool": "nmap"}, agent_id="R")

    entry = context.execution.execution_log[-1]
    assert entry.level == "warn"
    assert entry.message == "Tool not found: nmap"
    assert entry.agent_id == "R"
    assert entry.data == {"tool": "nmap"}
    assert entry.timestamp is not None

    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert record.execution_id == context.execution_id
    assert record.workflow_id == "test-workflow"


def test_broken_logger_is_swallowed(context):
    broken = Mock(spec=logging.Logger)
    broken.info.side_effect = RuntimeError("handler closed")
    execution_logger = ExecutionLogger(broken)

    execution_logger.log(context, "info", "Executing root agent")

    assert context.execution.execution_log[-1].message == "Executing root agent"


def test_unrecordable_entry_is_swallowed(context):
    broken = Mock(spec=logging.Logger)
    execution_logger = ExecutionLogger(broken)

    execution_logger.log(context, None, "Bad level")

    assert context.execution.execution_log == []
    broken.info.assert_not_called()
