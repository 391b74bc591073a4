"""
storage.k8s.io 表
"""

from ..core.projector import Expand, attr, boolean, integer, structured, text
from ..core.registry import TableDefinition
from ..core.resources import CSI_DRIVER, CSI_NODE, CSI_STORAGE_CAPACITY, STORAGE_CLASS, VOLUME_ATTACHMENT
from .common import object_fields


CSI_DRIVER_FIELDS = object_fields(namespaced=False) + (
    boolean("attach_required", attr("spec", "attach_required")),
    boolean("pod_info_on_mount", attr("spec", "pod_info_on_mount")),
    boolean("storage_capacity", attr("spec", "storage_capacity")),
    boolean("requires_republish", attr("spec", "requires_republish")),
    boolean("se_linux_mount", attr("spec", "se_linux_mount")),
    text("fs_group_policy", attr("spec", "fs_group_policy")),
    structured("volume_lifecycle_modes", attr("spec", "volume_lifecycle_modes")),
    structured("token_requests", attr("spec", "token_requests")),
)

CSI_NODE_DRIVER_FIELDS = (
    text("driver_name", attr("name"), required=True),
    text("node_id", attr("node_id")),
    structured("topology_keys", attr("topology_keys")),
    integer("allocatable_count", attr("allocatable", "count")),
)

STORAGE_CAPACITY_FIELDS = object_fields() + (
    text("storage_class_name", attr("storage_class_name")),
    text("capacity", attr("capacity")),
    text("maximum_volume_size", attr("maximum_volume_size")),
    structured("node_topology", attr("node_topology")),
)

STORAGE_CLASS_FIELDS = object_fields(namespaced=False) + (
    text("provisioner", attr("provisioner")),
    structured("parameters", attr("parameters")),
    text("reclaim_policy", attr("reclaim_policy")),
    structured("mount_options", attr("mount_options")),
    boolean("allow_volume_expansion", attr("allow_volume_expansion")),
    text("volume_binding_mode", attr("volume_binding_mode")),
    structured("allowed_topologies", attr("allowed_topologies")),
)

VOLUME_ATTACHMENT_FIELDS = object_fields(namespaced=False) + (
    text("attacher", attr("spec", "attacher")),
    text("node_name", attr("spec", "node_name")),
    text("persistent_volume_name", attr("spec", "source", "persistent_volume_name")),
    boolean("attached", attr("status", "attached")),
    structured("attachment_metadata", attr("status", "attachment_metadata")),
    structured("attach_error", attr("status", "attach_error")),
    structured("detach_error", attr("status", "detach_error")),
)


TABLES = [
    TableDefinition("kubernetes_csi_drivers", CSI_DRIVER, CSI_DRIVER_FIELDS, description="CSIDriver"),
    TableDefinition(
        "kubernetes_csi_node_drivers", CSI_NODE, object_fields(namespaced=False),
        Expand(attr("spec", "drivers"), CSI_NODE_DRIVER_FIELDS),
        description="CSINode上注册的驱动，每个驱动一行",
    ),
    TableDefinition(
        "kubernetes_storage_capacities", CSI_STORAGE_CAPACITY, STORAGE_CAPACITY_FIELDS,
        description="CSIStorageCapacity",
    ),
    TableDefinition("kubernetes_storage_classes", STORAGE_CLASS, STORAGE_CLASS_FIELDS, description="StorageClass"),
    TableDefinition(
        "kubernetes_volume_attachments", VOLUME_ATTACHMENT, VOLUME_ATTACHMENT_FIELDS, description="VolumeAttachment",
    ),
]
