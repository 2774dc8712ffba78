"""Application metrics.

Instruments are taken from the global meter, which forwards to whatever
provider :class:`~donezo.telemetry.TelemetryManager` registers and is a no-op
otherwise.
"""

from opentelemetry import metrics

meter = metrics.get_meter("donezo")

login_attempts = meter.create_counter(
    "donezo.login.attempts",
    unit="1",
    description="Login attempts, by outcome",
)

auth_rejections = meter.create_counter(
    "donezo.auth.rejections",
    unit="1",
    description="API requests rejected for missing or invalid credentials",
)

task_changes = meter.create_counter(
    "donezo.task.changes",
    unit="1",
    description="Task mutations, by operation",
)
