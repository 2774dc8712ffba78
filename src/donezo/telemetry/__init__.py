"""Telemetry module for OpenTelemetry instrumentation."""
from donezo.telemetry.instrumentation import TelemetryManager
from donezo.telemetry.metrics import auth_rejections, login_attempts, task_changes

__all__ = ["TelemetryManager", "auth_rejections", "login_attempts", "task_changes"]
