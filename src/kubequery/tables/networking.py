"""
networking.k8s.io 表
"""

from ..core.projector import attr, structured, text
from ..core.registry import TableDefinition
from ..core.resources import INGRESS, INGRESS_CLASS, NETWORK_POLICY
from .common import object_fields


INGRESS_CLASS_FIELDS = object_fields(namespaced=False) + (
    text("controller", attr("spec", "controller")),
    structured("parameters", attr("spec", "parameters")),
)

INGRESS_FIELDS = object_fields() + (
    text("ingress_class_name", attr("spec", "ingress_class_name")),
    structured("default_backend", attr("spec", "default_backend")),
    structured("rules", attr("spec", "rules")),
    structured("tls", attr("spec", "tls")),
    structured("load_balancer_ingress", attr("status", "load_balancer", "ingress")),
)

NETWORK_POLICY_FIELDS = object_fields() + (
    structured("pod_selector", attr("spec", "pod_selector")),
    structured("policy_types", attr("spec", "policy_types")),
    structured("ingress", attr("spec", "ingress")),
    structured("egress", attr("spec", "egress")),
)


TABLES = [
    TableDefinition("kubernetes_ingress_classes", INGRESS_CLASS, INGRESS_CLASS_FIELDS, description="IngressClass"),
    TableDefinition("kubernetes_ingresses", INGRESS, INGRESS_FIELDS, description="Ingress"),
    TableDefinition("kubernetes_network_policies", NETWORK_POLICY, NETWORK_POLICY_FIELDS, description="NetworkPolicy"),
]
