# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Execution of planned invocations."""

from __future__ import annotations

from .runner import ActionRunner, InvocationRunner
from .scheduler import ExecutionOptions, PlannedInvocation, Scheduler

__all__ = ["ActionRunner", "ExecutionOptions", "InvocationRunner", "PlannedInvocation", "Scheduler"]
