"""
rbac.authorization.k8s.io 表

绑定表每个subject一行，角色表每条策略规则一行。
"""

from ..core.projector import Expand, attr, structured, text
from ..core.registry import TableDefinition
from ..core.resources import CLUSTER_ROLE, CLUSTER_ROLE_BINDING, ROLE, ROLE_BINDING
from .common import object_fields


ROLE_REF_FIELDS = (
    text("role_kind", attr("role_ref", "kind")),
    text("role_name", attr("role_ref", "name")),
    text("role_api_group", attr("role_ref", "api_group")),
)

SUBJECT_FIELDS = (
    text("subject_kind", attr("kind")),
    text("subject_name", attr("name"), required=True),
    text("subject_namespace", attr("namespace")),
    text("subject_api_group", attr("api_group")),
)

POLICY_RULE_FIELDS = (
    structured("api_groups", attr("api_groups")),
    structured("resources", attr("resources")),
    structured("resource_names", attr("resource_names")),
    structured("verbs", attr("verbs")),
    structured("non_resource_urls", attr("nonResourceURLs")),
)


TABLES = [
    TableDefinition(
        "kubernetes_cluster_role_binding_subjects", CLUSTER_ROLE_BINDING,
        object_fields(namespaced=False) + ROLE_REF_FIELDS,
        Expand(attr("subjects"), SUBJECT_FIELDS),
        description="ClusterRoleBinding的subject",
    ),
    TableDefinition(
        "kubernetes_cluster_role_policy_rule", CLUSTER_ROLE,
        object_fields(namespaced=False) + (structured("aggregation_rule", attr("aggregation_rule")),),
        Expand(attr("rules"), POLICY_RULE_FIELDS),
        description="ClusterRole的策略规则",
    ),
    TableDefinition(
        "kubernetes_role_binding_subjects", ROLE_BINDING,
        object_fields() + ROLE_REF_FIELDS,
        Expand(attr("subjects"), SUBJECT_FIELDS),
        description="RoleBinding的subject",
    ),
    TableDefinition(
        "kubernetes_role_policy_rule", ROLE, object_fields(),
        Expand(attr("rules"), POLICY_RULE_FIELDS),
        description="Role的策略规则",
    ),
]
