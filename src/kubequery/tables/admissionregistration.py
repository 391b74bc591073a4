"""
admissionregistration.k8s.io 表：每个webhook一行
"""

from ..core.projector import Expand, attr, integer, structured, text
from ..core.registry import TableDefinition
from ..core.resources import MUTATING_WEBHOOK_CONFIGURATION, VALIDATING_WEBHOOK_CONFIGURATION
from .common import object_fields


WEBHOOK_FIELDS = (
    text("webhook_name", attr("name"), required=True),
    text("client_config_url", attr("client_config", "url")),
    text("client_config_service_namespace", attr("client_config", "service", "namespace")),
    text("client_config_service_name", attr("client_config", "service", "name")),
    text("client_config_service_path", attr("client_config", "service", "path")),
    integer("client_config_service_port", attr("client_config", "service", "port")),
    structured("rules", attr("rules")),
    text("failure_policy", attr("failure_policy")),
    text("match_policy", attr("match_policy")),
    structured("namespace_selector", attr("namespace_selector")),
    structured("object_selector", attr("object_selector")),
    text("side_effects", attr("side_effects")),
    integer("timeout_seconds", attr("timeout_seconds")),
    structured("admission_review_versions", attr("admission_review_versions")),
)


TABLES = [
    TableDefinition(
        name="kubernetes_mutating_webhooks",
        kind=MUTATING_WEBHOOK_CONFIGURATION,
        fields=object_fields(namespaced=False),
        expand=Expand(
            attr("webhooks"),
            WEBHOOK_FIELDS + (text("reinvocation_policy", attr("reinvocation_policy")),),
        ),
        description="MutatingWebhookConfiguration中的webhook",
    ),
    TableDefinition(
        name="kubernetes_validating_webhooks",
        kind=VALIDATING_WEBHOOK_CONFIGURATION,
        fields=object_fields(namespaced=False),
        expand=Expand(attr("webhooks"), WEBHOOK_FIELDS),
        description="ValidatingWebhookConfiguration中的webhook",
    ),
]
