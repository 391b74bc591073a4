"""
core (v1) 表
"""

from typing import Optional

from ..core.projector import (
    Expand, attr, boolean, entry, first_set, integer, sorted_keys, structured, text, timestamp,
)
from ..core.registry import TableDefinition
from ..core.resources import (
    COMPONENT_STATUS, CONFIG_MAP, ENDPOINTS, LIMIT_RANGE, NAMESPACE, NODE,
    PERSISTENT_VOLUME, PERSISTENT_VOLUME_CLAIM, POD, POD_TEMPLATE, RESOURCE_QUOTA,
    SECRET, SERVICE, SERVICE_ACCOUNT,
)
from .common import (
    CONTAINER_FIELDS, CONTAINER_STATUS_FIELDS, POD_SPEC, VOLUME_FIELDS,
    containers_of, identity_fields, object_fields, pod_spec_fields, volumes_of,
)


# PersistentVolumeSpec中不属于卷来源的字段
_PV_SPEC_SETTINGS = {
    "access_modes", "capacity", "claim_ref", "mount_options", "node_affinity",
    "persistent_volume_reclaim_policy", "storage_class_name", "volume_attributes_class_name",
    "volume_mode",
}


def persistent_volume_type(pv) -> Optional[str]:
    spec = pv.spec
    if spec is None:
        return None
    return first_set(spec, [name for name in type(spec).openapi_types if name not in _PV_SPEC_SETTINGS])


_capacity = attr("status", "capacity")
_allocatable = attr("status", "allocatable")
_node_info = attr("status", "node_info")


COMPONENT_CONDITION_FIELDS = (
    text("condition_type", attr("type")),
    text("status", attr("status")),
    text("message", attr("message")),
    text("error", attr("error")),
)

CONFIG_MAP_FIELDS = object_fields() + (
    boolean("immutable", attr("immutable")),
    structured("data", attr("data")),
    structured("binary_data_keys", sorted_keys(attr("binary_data"))),
)

ENDPOINT_SUBSET_FIELDS = (
    structured("addresses", attr("addresses")),
    structured("not_ready_addresses", attr("not_ready_addresses")),
    structured("ports", attr("ports")),
)

LIMIT_RANGE_ITEM_FIELDS = (
    text("limit_type", attr("type")),
    structured("max", attr("max")),
    structured("min", attr("min")),
    structured("default", attr("default")),
    structured("default_request", attr("default_request")),
    structured("max_limit_request_ratio", attr("max_limit_request_ratio")),
)

NAMESPACE_FIELDS = object_fields(namespaced=False) + (
    structured("finalizers", attr("spec", "finalizers")),
    text("phase", attr("status", "phase")),
    structured("conditions", attr("status", "conditions")),
)

NODE_FIELDS = object_fields(namespaced=False) + (
    text("pod_cidr", attr("spec", "pod_cidr")),
    structured("pod_cidrs", attr("spec", "podCIDRs")),
    text("provider_id", attr("spec", "provider_id")),
    boolean("unschedulable", attr("spec", "unschedulable")),
    structured("taints", attr("spec", "taints")),
    structured("addresses", attr("status", "addresses")),
    text("cpu_capacity", entry(_capacity, "cpu")),
    text("memory_capacity", entry(_capacity, "memory")),
    text("pods_capacity", entry(_capacity, "pods")),
    text("cpu_allocatable", entry(_allocatable, "cpu")),
    text("memory_allocatable", entry(_allocatable, "memory")),
    text("pods_allocatable", entry(_allocatable, "pods")),
    structured("capacity", _capacity),
    structured("allocatable", _allocatable),
    structured("conditions", attr("status", "conditions")),
    structured("volumes_in_use", attr("status", "volumes_in_use")),
    text("architecture", attr("architecture", source=_node_info)),
    text("boot_id", attr("boot_id", source=_node_info)),
    text("container_runtime_version", attr("container_runtime_version", source=_node_info)),
    text("kernel_version", attr("kernel_version", source=_node_info)),
    text("kube_proxy_version", attr("kube_proxy_version", source=_node_info)),
    text("kubelet_version", attr("kubelet_version", source=_node_info)),
    text("machine_id", attr("machine_id", source=_node_info)),
    text("operating_system", attr("operating_system", source=_node_info)),
    text("os_image", attr("os_image", source=_node_info)),
    text("system_uuid", attr("system_uuid", source=_node_info)),
)

PERSISTENT_VOLUME_CLAIM_FIELDS = object_fields() + (
    structured("access_modes", attr("spec", "access_modes")),
    text("storage_class_name", attr("spec", "storage_class_name")),
    text("volume_name", attr("spec", "volume_name")),
    text("volume_mode", attr("spec", "volume_mode")),
    text("storage_request", entry(attr("spec", "resources", "requests"), "storage")),
    structured("selector", attr("spec", "selector")),
    structured("data_source", attr("spec", "data_source")),
    text("phase", attr("status", "phase")),
    text("capacity_storage", entry(attr("status", "capacity"), "storage")),
    structured("status_access_modes", attr("status", "access_modes")),
    structured("conditions", attr("status", "conditions")),
)

PERSISTENT_VOLUME_FIELDS = object_fields(namespaced=False) + (
    text("capacity_storage", entry(attr("spec", "capacity"), "storage")),
    structured("access_modes", attr("spec", "access_modes")),
    text("persistent_volume_reclaim_policy", attr("spec", "persistent_volume_reclaim_policy")),
    text("storage_class_name", attr("spec", "storage_class_name")),
    text("volume_mode", attr("spec", "volume_mode")),
    structured("mount_options", attr("spec", "mount_options")),
    text("claim_ref_namespace", attr("spec", "claim_ref", "namespace")),
    text("claim_ref_name", attr("spec", "claim_ref", "name")),
    text("volume_type", persistent_volume_type),
    text("csi_driver", attr("spec", "csi", "driver")),
    text("csi_volume_handle", attr("spec", "csi", "volume_handle")),
    text("host_path", attr("spec", "host_path", "path")),
    text("local_path", attr("spec", "local", "path")),
    text("nfs_server", attr("spec", "nfs", "server")),
    text("nfs_path", attr("spec", "nfs", "path")),
    structured("node_affinity", attr("spec", "node_affinity")),
    text("phase", attr("status", "phase")),
    text("reason", attr("status", "reason")),
    text("message", attr("status", "message")),
)

POD_TEMPLATE_FIELDS = object_fields() + (
    structured("template_labels", attr("template", "metadata", "labels")),
) + pod_spec_fields(attr("template", "spec"))

POD_FIELDS = object_fields() + pod_spec_fields(POD_SPEC) + (
    text("phase", attr("status", "phase")),
    text("reason", attr("status", "reason")),
    text("message", attr("status", "message")),
    text("host_ip", attr("status", "host_ip")),
    text("pod_ip", attr("status", "pod_ip")),
    structured("pod_ips", attr("status", "podIPs")),
    text("nominated_node_name", attr("status", "nominated_node_name")),
    text("qos_class", attr("status", "qos_class")),
    timestamp("start_time", attr("status", "start_time")),
    structured("conditions", attr("status", "conditions")),
    structured("owner_references", attr("metadata", "owner_references")),
)

RESOURCE_QUOTA_FIELDS = object_fields() + (
    structured("hard", attr("spec", "hard")),
    structured("scopes", attr("spec", "scopes")),
    structured("scope_selector", attr("spec", "scope_selector")),
    structured("status_hard", attr("status", "hard")),
    structured("used", attr("status", "used")),
)

# 不暴露Secret的值，只列出键名
SECRET_FIELDS = object_fields() + (
    text("type", attr("type")),
    boolean("immutable", attr("immutable")),
    structured("data_keys", sorted_keys(attr("data"))),
)

SERVICE_ACCOUNT_FIELDS = object_fields() + (
    boolean("automount_service_account_token", attr("automount_service_account_token")),
    structured("secrets", attr("secrets")),
    structured("image_pull_secrets", attr("image_pull_secrets")),
)

SERVICE_FIELDS = object_fields() + (
    text("type", attr("spec", "type")),
    text("cluster_ip", attr("spec", "cluster_ip")),
    structured("cluster_ips", attr("spec", "clusterIPs")),
    structured("external_ips", attr("spec", "externalIPs")),
    text("external_name", attr("spec", "external_name")),
    text("external_traffic_policy", attr("spec", "external_traffic_policy")),
    text("internal_traffic_policy", attr("spec", "internal_traffic_policy")),
    integer("health_check_node_port", attr("spec", "health_check_node_port")),
    structured("ip_families", attr("spec", "ip_families")),
    text("ip_family_policy", attr("spec", "ip_family_policy")),
    text("load_balancer_ip", attr("spec", "load_balancer_ip")),
    text("load_balancer_class", attr("spec", "load_balancer_class")),
    structured("load_balancer_source_ranges", attr("spec", "load_balancer_source_ranges")),
    structured("ports", attr("spec", "ports")),
    structured("selector", attr("spec", "selector")),
    text("session_affinity", attr("spec", "session_affinity")),
    boolean("publish_not_ready_addresses", attr("spec", "publish_not_ready_addresses")),
    structured("load_balancer_ingress", attr("status", "load_balancer", "ingress")),
)


TABLES = [
    TableDefinition(
        "kubernetes_component_statuses", COMPONENT_STATUS, identity_fields(namespaced=False),
        Expand(attr("conditions"), COMPONENT_CONDITION_FIELDS),
        description="ComponentStatus，每个状态条件一行",
    ),
    TableDefinition("kubernetes_config_maps", CONFIG_MAP, CONFIG_MAP_FIELDS, description="ConfigMap"),
    TableDefinition(
        "kubernetes_endpoint_subsets", ENDPOINTS, object_fields(),
        Expand(attr("subsets"), ENDPOINT_SUBSET_FIELDS),
        description="Endpoints，每个subset一行",
    ),
    TableDefinition(
        "kubernetes_limit_ranges", LIMIT_RANGE, object_fields(),
        Expand(attr("spec", "limits"), LIMIT_RANGE_ITEM_FIELDS),
        description="LimitRange，每个限制项一行",
    ),
    TableDefinition("kubernetes_namespaces", NAMESPACE, NAMESPACE_FIELDS, description="Namespace"),
    TableDefinition("kubernetes_nodes", NODE, NODE_FIELDS, description="Node"),
    TableDefinition(
        "kubernetes_persistent_volume_claims", PERSISTENT_VOLUME_CLAIM, PERSISTENT_VOLUME_CLAIM_FIELDS,
        description="PersistentVolumeClaim",
    ),
    TableDefinition(
        "kubernetes_persistent_volumes", PERSISTENT_VOLUME, PERSISTENT_VOLUME_FIELDS,
        description="PersistentVolume",
    ),
    TableDefinition("kubernetes_pod_templates", POD_TEMPLATE, POD_TEMPLATE_FIELDS, description="PodTemplate"),
    TableDefinition("kubernetes_pods", POD, POD_FIELDS, description="Pod"),
    TableDefinition(
        "kubernetes_pod_containers", POD, identity_fields(),
        Expand(containers_of(POD_SPEC, attr("status")), CONTAINER_FIELDS + CONTAINER_STATUS_FIELDS),
        description="Pod中的容器及其运行状态",
    ),
    TableDefinition(
        "kubernetes_pod_volumes", POD, identity_fields(),
        Expand(volumes_of(POD_SPEC), VOLUME_FIELDS),
        description="Pod中的卷",
    ),
    TableDefinition(
        "kubernetes_resource_quotas", RESOURCE_QUOTA, RESOURCE_QUOTA_FIELDS, description="ResourceQuota",
    ),
    TableDefinition("kubernetes_secrets", SECRET, SECRET_FIELDS, description="Secret（不含数据）"),
    TableDefinition(
        "kubernetes_service_accounts", SERVICE_ACCOUNT, SERVICE_ACCOUNT_FIELDS, description="ServiceAccount",
    ),
    TableDefinition("kubernetes_services", SERVICE, SERVICE_FIELDS, description="Service"),
]
