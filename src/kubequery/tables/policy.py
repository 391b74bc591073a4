"""
policy 表
"""

from ..core.projector import attr, bigint, integer, structured, text
from ..core.registry import TableDefinition
from ..core.resources import POD_DISRUPTION_BUDGET
from .common import object_fields


# min_available / max_unavailable 是IntOrString，统一按文本输出
POD_DISRUPTION_BUDGET_FIELDS = object_fields() + (
    text("min_available", attr("spec", "min_available")),
    text("max_unavailable", attr("spec", "max_unavailable")),
    structured("selector", attr("spec", "selector")),
    text("unhealthy_pod_eviction_policy", attr("spec", "unhealthy_pod_eviction_policy")),
    integer("current_healthy", attr("status", "current_healthy")),
    integer("desired_healthy", attr("status", "desired_healthy")),
    integer("disruptions_allowed", attr("status", "disruptions_allowed")),
    integer("expected_pods", attr("status", "expected_pods")),
    bigint("observed_generation", attr("status", "observed_generation")),
    structured("disrupted_pods", attr("status", "disrupted_pods")),
    structured("conditions", attr("status", "conditions")),
)


TABLES = [
    TableDefinition(
        "kubernetes_pod_disruption_budget", POD_DISRUPTION_BUDGET, POD_DISRUPTION_BUDGET_FIELDS,
        description="PodDisruptionBudget (policy/v1)",
    ),
]
