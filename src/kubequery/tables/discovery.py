"""
API发现和版本信息表

这两种资源不是列表接口，通过ResourceKind.loader获取。
"""

from ..core.projector import attr, boolean, structured, text
from ..core.registry import TableDefinition
from ..core.resources import ResourceKind
from ..k8s_client import get_version_info, list_api_resources


API_RESOURCE = ResourceKind(name="APIResource", loader=list_api_resources)
VERSION = ResourceKind(name="Version", loader=get_version_info)


API_RESOURCE_FIELDS = (
    text("group_version", attr("group_version"), required=True),
    text("name", attr("resource", "name"), required=True),
    text("singular_name", attr("resource", "singular_name")),
    text("kind", attr("resource", "kind")),
    boolean("namespaced", attr("resource", "namespaced")),
    text("group", attr("resource", "group")),
    text("version", attr("resource", "version")),
    structured("verbs", attr("resource", "verbs")),
    structured("short_names", attr("resource", "short_names")),
    structured("categories", attr("resource", "categories")),
)

VERSION_FIELDS = (
    text("major", attr("major")),
    text("minor", attr("minor")),
    text("git_version", attr("git_version")),
    text("git_commit", attr("git_commit")),
    text("git_tree_state", attr("git_tree_state")),
    text("build_date", attr("build_date")),
    text("go_version", attr("go_version")),
    text("compiler", attr("compiler")),
    text("platform", attr("platform")),
)


TABLES = [
    TableDefinition("kubernetes_api_resources", API_RESOURCE, API_RESOURCE_FIELDS, description="集群支持的API资源"),
    TableDefinition("kubernetes_info", VERSION, VERSION_FIELDS, description="集群版本信息"),
]
