"""
公共列集合

- identity_fields: 父对象标识列（uid/name/namespace）
- object_fields: 对象元数据列（标识列 + creation_timestamp/labels/annotations）
- pod_spec_fields: PodSpec列，Pod以及各工作负载的Pod模板共用
- containers_of / CONTAINER_FIELDS: 容器展开（普通、init、ephemeral容器）
- volumes_of / VOLUME_FIELDS: 卷展开
"""

from typing import Any, List, NamedTuple, Optional, Tuple

from ..core.projector import (
    Accessor, Field, attr, bigint, boolean, entry, first_set, integer, structured, text, timestamp,
)


def identity_fields(namespaced: bool = True) -> Tuple[Field, ...]:
    """父对象标识列，一对多展开时在每一行重复"""
    fields = (
        text("uid", attr("metadata", "uid")),
        text("name", attr("metadata", "name"), required=True),
    )
    if namespaced:
        fields += (text("namespace", attr("metadata", "namespace"), required=True),)
    return fields


def object_fields(namespaced: bool = True) -> Tuple[Field, ...]:
    """对象元数据列"""
    fields = list(identity_fields(namespaced))
    fields.extend([
        timestamp("creation_timestamp", attr("metadata", "creation_timestamp")),
        structured("labels", attr("metadata", "labels")),
        structured("annotations", attr("metadata", "annotations")),
    ])
    return tuple(fields)


def pod_spec_fields(spec: Accessor) -> Tuple[Field, ...]:
    """PodSpec列

    Args:
        spec: 从资源取出V1PodSpec的访问函数
    """
    return (
        text("node_name", attr("node_name", source=spec)),
        text("service_account_name", attr("service_account_name", source=spec)),
        boolean("automount_service_account_token", attr("automount_service_account_token", source=spec)),
        boolean("host_network", attr("host_network", source=spec)),
        boolean("host_pid", attr("host_pid", source=spec)),
        boolean("host_ipc", attr("host_ipc", source=spec)),
        boolean("share_process_namespace", attr("share_process_namespace", source=spec)),
        text("priority_class_name", attr("priority_class_name", source=spec)),
        integer("priority", attr("priority", source=spec)),
        text("restart_policy", attr("restart_policy", source=spec)),
        text("dns_policy", attr("dns_policy", source=spec)),
        text("scheduler_name", attr("scheduler_name", source=spec)),
        text("runtime_class_name", attr("runtime_class_name", source=spec)),
        bigint("termination_grace_period_seconds", attr("termination_grace_period_seconds", source=spec)),
        structured("security_context", attr("security_context", source=spec)),
        structured("node_selector", attr("node_selector", source=spec)),
        structured("tolerations", attr("tolerations", source=spec)),
        structured("affinity", attr("affinity", source=spec)),
        structured("image_pull_secrets", attr("image_pull_secrets", source=spec)),
    )


# 模板中PodSpec的位置
POD_SPEC = attr("spec")
TEMPLATE_POD_SPEC = attr("spec", "template", "spec")
JOB_TEMPLATE_POD_SPEC = attr("spec", "job_template", "spec", "template", "spec")


# ---------------------------------------------------------------------------
# 容器
# ---------------------------------------------------------------------------

class ContainerEntry(NamedTuple):
    """展开后的一个容器及其运行状态"""
    container_type: str
    container: Any
    status: Optional[Any] = None


# (container_type, PodSpec中的列表属性, PodStatus中的状态列表属性)
CONTAINER_LISTS = (
    ("container", "containers", "container_statuses"),
    ("init_container", "init_containers", "init_container_statuses"),
    ("ephemeral_container", "ephemeral_containers", "ephemeral_container_statuses"),
)


def containers_of(spec: Accessor, status: Optional[Accessor] = None):
    """返回展开函数：依次列出普通、init、ephemeral容器，并按名称关联容器状态"""
    def elements(resource) -> List[ContainerEntry]:
        pod_spec = spec(resource)
        if pod_spec is None:
            return []
        pod_status = status(resource) if status is not None else None

        entries = []
        for container_type, spec_attr, status_attr in CONTAINER_LISTS:
            statuses = {}
            if pod_status is not None:
                statuses = {item.name: item for item in getattr(pod_status, status_attr) or []}
            for container in getattr(pod_spec, spec_attr) or []:
                entries.append(ContainerEntry(container_type, container, statuses.get(container.name)))
        return entries
    return elements


_requests = attr("container", "resources", "requests")
_limits = attr("container", "resources", "limits")

CONTAINER_FIELDS = (
    text("container_type", attr("container_type")),
    text("container_name", attr("container", "name"), required=True),
    text("image", attr("container", "image")),
    text("image_pull_policy", attr("container", "image_pull_policy")),
    structured("command", attr("container", "command")),
    structured("args", attr("container", "args")),
    text("working_dir", attr("container", "working_dir")),
    structured("ports", attr("container", "ports")),
    structured("env", attr("container", "env")),
    structured("env_from", attr("container", "env_from")),
    text("cpu_request", entry(_requests, "cpu")),
    text("cpu_limit", entry(_limits, "cpu")),
    text("memory_request", entry(_requests, "memory")),
    text("memory_limit", entry(_limits, "memory")),
    structured("resources", attr("container", "resources")),
    structured("volume_mounts", attr("container", "volume_mounts")),
    structured("liveness_probe", attr("container", "liveness_probe")),
    structured("readiness_probe", attr("container", "readiness_probe")),
    structured("startup_probe", attr("container", "startup_probe")),
    structured("lifecycle", attr("container", "lifecycle")),
    structured("security_context", attr("container", "security_context")),
    boolean("privileged", attr("container", "security_context", "privileged")),
    boolean("stdin", attr("container", "stdin")),
    boolean("tty", attr("container", "tty")),
    text("termination_message_path", attr("container", "termination_message_path")),
    text("termination_message_policy", attr("container", "termination_message_policy")),
)

# 仅Pod有运行状态
CONTAINER_STATUS_FIELDS = (
    text("container_id", attr("status", "container_id")),
    text("image_id", attr("status", "image_id")),
    boolean("ready", attr("status", "ready")),
    boolean("started", attr("status", "started")),
    integer("restart_count", attr("status", "restart_count")),
    structured("state", attr("status", "state")),
    structured("last_state", attr("status", "last_state")),
)


# ---------------------------------------------------------------------------
# 卷
# ---------------------------------------------------------------------------

def volume_type(volume) -> Optional[str]:
    """V1Volume中已设置的卷来源（host_path、secret、config_map...）"""
    if volume is None:
        return None
    return first_set(volume, [name for name in type(volume).openapi_types if name != "name"])


def volume_source(volume) -> Any:
    source = volume_type(volume)
    return getattr(volume, source) if source else None


def volumes_of(spec: Accessor) -> Accessor:
    return attr("volumes", source=spec)


VOLUME_FIELDS = (
    text("volume_name", attr("name"), required=True),
    text("volume_type", volume_type),
    text("host_path", attr("host_path", "path")),
    text("host_path_type", attr("host_path", "type")),
    text("secret_name", attr("secret", "secret_name")),
    text("config_map_name", attr("config_map", "name")),
    text("claim_name", attr("persistent_volume_claim", "claim_name")),
    text("empty_dir_medium", attr("empty_dir", "medium")),
    text("empty_dir_size_limit", attr("empty_dir", "size_limit")),
    structured("source", volume_source),
)
