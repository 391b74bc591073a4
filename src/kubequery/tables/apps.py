"""
apps 表：DaemonSet、Deployment、ReplicaSet、StatefulSet

每种工作负载三张表：对象本身、Pod模板中的容器、Pod模板中的卷。
"""

from typing import List

from ..core.projector import Expand, attr, bigint, boolean, integer, structured, text
from ..core.registry import TableDefinition
from ..core.resources import DAEMON_SET, DEPLOYMENT, REPLICA_SET, STATEFUL_SET, ResourceKind
from .common import (
    CONTAINER_FIELDS, TEMPLATE_POD_SPEC, VOLUME_FIELDS,
    containers_of, identity_fields, object_fields, pod_spec_fields, volumes_of,
)


def _template_tables(prefix: str, kind: ResourceKind) -> List[TableDefinition]:
    """Pod模板的容器表和卷表"""
    return [
        TableDefinition(
            name=f"{prefix}_containers",
            kind=kind,
            fields=identity_fields(),
            expand=Expand(containers_of(TEMPLATE_POD_SPEC), CONTAINER_FIELDS),
            description=f"{kind.name} Pod模板中的容器",
        ),
        TableDefinition(
            name=f"{prefix}_volumes",
            kind=kind,
            fields=identity_fields(),
            expand=Expand(volumes_of(TEMPLATE_POD_SPEC), VOLUME_FIELDS),
            description=f"{kind.name} Pod模板中的卷",
        ),
    ]


DAEMON_SET_FIELDS = object_fields() + (
    structured("selector", attr("spec", "selector")),
    integer("min_ready_seconds", attr("spec", "min_ready_seconds")),
    integer("revision_history_limit", attr("spec", "revision_history_limit")),
    text("update_strategy_type", attr("spec", "update_strategy", "type")),
    structured("update_strategy", attr("spec", "update_strategy", "rolling_update")),
) + pod_spec_fields(TEMPLATE_POD_SPEC) + (
    integer("current_number_scheduled", attr("status", "current_number_scheduled")),
    integer("desired_number_scheduled", attr("status", "desired_number_scheduled")),
    integer("number_available", attr("status", "number_available")),
    integer("number_misscheduled", attr("status", "number_misscheduled")),
    integer("number_ready", attr("status", "number_ready")),
    integer("number_unavailable", attr("status", "number_unavailable")),
    integer("updated_number_scheduled", attr("status", "updated_number_scheduled")),
    integer("collision_count", attr("status", "collision_count")),
    bigint("observed_generation", attr("status", "observed_generation")),
    structured("conditions", attr("status", "conditions")),
)

DEPLOYMENT_FIELDS = object_fields() + (
    integer("replicas", attr("spec", "replicas")),
    structured("selector", attr("spec", "selector")),
    integer("min_ready_seconds", attr("spec", "min_ready_seconds")),
    text("strategy_type", attr("spec", "strategy", "type")),
    structured("strategy", attr("spec", "strategy", "rolling_update")),
    integer("revision_history_limit", attr("spec", "revision_history_limit")),
    integer("progress_deadline_seconds", attr("spec", "progress_deadline_seconds")),
    boolean("paused", attr("spec", "paused")),
) + pod_spec_fields(TEMPLATE_POD_SPEC) + (
    integer("status_replicas", attr("status", "replicas")),
    integer("updated_replicas", attr("status", "updated_replicas")),
    integer("ready_replicas", attr("status", "ready_replicas")),
    integer("available_replicas", attr("status", "available_replicas")),
    integer("unavailable_replicas", attr("status", "unavailable_replicas")),
    integer("collision_count", attr("status", "collision_count")),
    bigint("observed_generation", attr("status", "observed_generation")),
    structured("conditions", attr("status", "conditions")),
)

REPLICA_SET_FIELDS = object_fields() + (
    integer("replicas", attr("spec", "replicas")),
    structured("selector", attr("spec", "selector")),
    integer("min_ready_seconds", attr("spec", "min_ready_seconds")),
) + pod_spec_fields(TEMPLATE_POD_SPEC) + (
    integer("status_replicas", attr("status", "replicas")),
    integer("fully_labeled_replicas", attr("status", "fully_labeled_replicas")),
    integer("ready_replicas", attr("status", "ready_replicas")),
    integer("available_replicas", attr("status", "available_replicas")),
    bigint("observed_generation", attr("status", "observed_generation")),
    structured("conditions", attr("status", "conditions")),
)

STATEFUL_SET_FIELDS = object_fields() + (
    integer("replicas", attr("spec", "replicas")),
    structured("selector", attr("spec", "selector")),
    text("service_name", attr("spec", "service_name")),
    text("pod_management_policy", attr("spec", "pod_management_policy")),
    text("update_strategy_type", attr("spec", "update_strategy", "type")),
    structured("update_strategy", attr("spec", "update_strategy", "rolling_update")),
    integer("revision_history_limit", attr("spec", "revision_history_limit")),
    integer("min_ready_seconds", attr("spec", "min_ready_seconds")),
    structured("volume_claim_templates", attr("spec", "volume_claim_templates")),
    structured("persistent_volume_claim_retention_policy",
               attr("spec", "persistent_volume_claim_retention_policy")),
) + pod_spec_fields(TEMPLATE_POD_SPEC) + (
    integer("status_replicas", attr("status", "replicas")),
    integer("current_replicas", attr("status", "current_replicas")),
    integer("ready_replicas", attr("status", "ready_replicas")),
    integer("updated_replicas", attr("status", "updated_replicas")),
    integer("available_replicas", attr("status", "available_replicas")),
    text("current_revision", attr("status", "current_revision")),
    text("update_revision", attr("status", "update_revision")),
    integer("collision_count", attr("status", "collision_count")),
    bigint("observed_generation", attr("status", "observed_generation")),
    structured("conditions", attr("status", "conditions")),
)


TABLES = [
    TableDefinition("kubernetes_daemon_sets", DAEMON_SET, DAEMON_SET_FIELDS, description="DaemonSet"),
    *_template_tables("kubernetes_daemon_set", DAEMON_SET),
    TableDefinition("kubernetes_deployments", DEPLOYMENT, DEPLOYMENT_FIELDS, description="Deployment"),
    *_template_tables("kubernetes_deployments", DEPLOYMENT),
    TableDefinition("kubernetes_replica_sets", REPLICA_SET, REPLICA_SET_FIELDS, description="ReplicaSet"),
    *_template_tables("kubernetes_replica_set", REPLICA_SET),
    TableDefinition("kubernetes_stateful_sets", STATEFUL_SET, STATEFUL_SET_FIELDS, description="StatefulSet"),
    *_template_tables("kubernetes_stateful_set", STATEFUL_SET),
]
