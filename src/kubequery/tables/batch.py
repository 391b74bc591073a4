"""
batch 表：CronJob、Job
"""

from ..core.projector import attr, bigint, boolean, integer, structured, text, timestamp
from ..core.registry import TableDefinition
from ..core.resources import CRON_JOB, JOB
from .common import JOB_TEMPLATE_POD_SPEC, TEMPLATE_POD_SPEC, object_fields, pod_spec_fields


CRON_JOB_FIELDS = object_fields() + (
    text("schedule", attr("spec", "schedule")),
    text("time_zone", attr("spec", "time_zone")),
    text("concurrency_policy", attr("spec", "concurrency_policy")),
    boolean("suspend", attr("spec", "suspend")),
    bigint("starting_deadline_seconds", attr("spec", "starting_deadline_seconds")),
    integer("successful_jobs_history_limit", attr("spec", "successful_jobs_history_limit")),
    integer("failed_jobs_history_limit", attr("spec", "failed_jobs_history_limit")),
) + pod_spec_fields(JOB_TEMPLATE_POD_SPEC) + (
    structured("active", attr("status", "active")),
    timestamp("last_schedule_time", attr("status", "last_schedule_time")),
    timestamp("last_successful_time", attr("status", "last_successful_time")),
)

JOB_FIELDS = object_fields() + (
    integer("parallelism", attr("spec", "parallelism")),
    integer("completions", attr("spec", "completions")),
    text("completion_mode", attr("spec", "completion_mode")),
    bigint("active_deadline_seconds", attr("spec", "active_deadline_seconds")),
    integer("backoff_limit", attr("spec", "backoff_limit")),
    integer("ttl_seconds_after_finished", attr("spec", "ttl_seconds_after_finished")),
    boolean("suspend", attr("spec", "suspend")),
    boolean("manual_selector", attr("spec", "manual_selector")),
    structured("selector", attr("spec", "selector")),
) + pod_spec_fields(TEMPLATE_POD_SPEC) + (
    integer("active", attr("status", "active")),
    integer("succeeded", attr("status", "succeeded")),
    integer("failed", attr("status", "failed")),
    timestamp("start_time", attr("status", "start_time")),
    timestamp("completion_time", attr("status", "completion_time")),
    structured("conditions", attr("status", "conditions")),
)


TABLES = [
    TableDefinition("kubernetes_cron_jobs", CRON_JOB, CRON_JOB_FIELDS, description="CronJob"),
    TableDefinition("kubernetes_jobs", JOB, JOB_FIELDS, description="Job"),
]
