"""
autoscaling 表
"""

from ..core.projector import attr, bigint, integer, structured, text, timestamp
from ..core.registry import TableDefinition
from ..core.resources import HORIZONTAL_POD_AUTOSCALER
from .common import object_fields


HORIZONTAL_POD_AUTOSCALER_FIELDS = object_fields() + (
    text("scale_target_api_version", attr("spec", "scale_target_ref", "api_version")),
    text("scale_target_kind", attr("spec", "scale_target_ref", "kind")),
    text("scale_target_name", attr("spec", "scale_target_ref", "name")),
    integer("min_replicas", attr("spec", "min_replicas")),
    integer("max_replicas", attr("spec", "max_replicas")),
    structured("metrics", attr("spec", "metrics")),
    structured("behavior", attr("spec", "behavior")),
    integer("current_replicas", attr("status", "current_replicas")),
    integer("desired_replicas", attr("status", "desired_replicas")),
    timestamp("last_scale_time", attr("status", "last_scale_time")),
    bigint("observed_generation", attr("status", "observed_generation")),
    structured("current_metrics", attr("status", "current_metrics")),
    structured("conditions", attr("status", "conditions")),
)


TABLES = [
    TableDefinition(
        "kubernetes_horizontal_pod_autoscalers",
        HORIZONTAL_POD_AUTOSCALER,
        HORIZONTAL_POD_AUTOSCALER_FIELDS,
        description="HorizontalPodAutoscaler (autoscaling/v2)",
    ),
]
