"""
资源类型目录

每种资源类型对应一次列表调用：API类、全命名空间列表方法、按命名空间列表方法以及反序列化模型。
不是列表接口的资源（API发现、版本信息）通过loader提供自定义获取方式。
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from kubernetes import client


@dataclass(frozen=True)
class ResourceKind:
    """一种kubernetes资源"""
    name: str
    api: Optional[type] = None
    list_all: Optional[str] = None
    list_namespaced: Optional[str] = None
    model: Optional[str] = None
    loader: Optional[Callable[[Any], List[Any]]] = None

    @property
    def namespaced(self) -> bool:
        return self.list_namespaced is not None


def _namespaced(name: str, api: type, plural: str, model: str) -> ResourceKind:
    return ResourceKind(
        name=name,
        api=api,
        list_all=f"list_{plural}_for_all_namespaces",
        list_namespaced=f"list_namespaced_{plural}",
        model=model,
    )


def _cluster_scoped(name: str, api: type, plural: str, model: str) -> ResourceKind:
    return ResourceKind(name=name, api=api, list_all=f"list_{plural}", model=model)


# admissionregistration.k8s.io
MUTATING_WEBHOOK_CONFIGURATION = _cluster_scoped(
    "MutatingWebhookConfiguration", client.AdmissionregistrationV1Api,
    "mutating_webhook_configuration", "V1MutatingWebhookConfiguration")
VALIDATING_WEBHOOK_CONFIGURATION = _cluster_scoped(
    "ValidatingWebhookConfiguration", client.AdmissionregistrationV1Api,
    "validating_webhook_configuration", "V1ValidatingWebhookConfiguration")

# apps
DAEMON_SET = _namespaced("DaemonSet", client.AppsV1Api, "daemon_set", "V1DaemonSet")
DEPLOYMENT = _namespaced("Deployment", client.AppsV1Api, "deployment", "V1Deployment")
REPLICA_SET = _namespaced("ReplicaSet", client.AppsV1Api, "replica_set", "V1ReplicaSet")
STATEFUL_SET = _namespaced("StatefulSet", client.AppsV1Api, "stateful_set", "V1StatefulSet")

# autoscaling
HORIZONTAL_POD_AUTOSCALER = _namespaced(
    "HorizontalPodAutoscaler", client.AutoscalingV2Api,
    "horizontal_pod_autoscaler", "V2HorizontalPodAutoscaler")

# batch
CRON_JOB = _namespaced("CronJob", client.BatchV1Api, "cron_job", "V1CronJob")
JOB = _namespaced("Job", client.BatchV1Api, "job", "V1Job")

# core
COMPONENT_STATUS = _cluster_scoped("ComponentStatus", client.CoreV1Api, "component_status", "V1ComponentStatus")
CONFIG_MAP = _namespaced("ConfigMap", client.CoreV1Api, "config_map", "V1ConfigMap")
ENDPOINTS = _namespaced("Endpoints", client.CoreV1Api, "endpoints", "V1Endpoints")
LIMIT_RANGE = _namespaced("LimitRange", client.CoreV1Api, "limit_range", "V1LimitRange")
NAMESPACE = _cluster_scoped("Namespace", client.CoreV1Api, "namespace", "V1Namespace")
NODE = _cluster_scoped("Node", client.CoreV1Api, "node", "V1Node")
PERSISTENT_VOLUME_CLAIM = _namespaced(
    "PersistentVolumeClaim", client.CoreV1Api, "persistent_volume_claim", "V1PersistentVolumeClaim")
PERSISTENT_VOLUME = _cluster_scoped(
    "PersistentVolume", client.CoreV1Api, "persistent_volume", "V1PersistentVolume")
POD_TEMPLATE = _namespaced("PodTemplate", client.CoreV1Api, "pod_template", "V1PodTemplate")
POD = _namespaced("Pod", client.CoreV1Api, "pod", "V1Pod")
RESOURCE_QUOTA = _namespaced("ResourceQuota", client.CoreV1Api, "resource_quota", "V1ResourceQuota")
SECRET = _namespaced("Secret", client.CoreV1Api, "secret", "V1Secret")
SERVICE_ACCOUNT = _namespaced("ServiceAccount", client.CoreV1Api, "service_account", "V1ServiceAccount")
SERVICE = _namespaced("Service", client.CoreV1Api, "service", "V1Service")

# networking.k8s.io
INGRESS_CLASS = _cluster_scoped("IngressClass", client.NetworkingV1Api, "ingress_class", "V1IngressClass")
INGRESS = _namespaced("Ingress", client.NetworkingV1Api, "ingress", "V1Ingress")
NETWORK_POLICY = _namespaced("NetworkPolicy", client.NetworkingV1Api, "network_policy", "V1NetworkPolicy")

# policy
POD_DISRUPTION_BUDGET = _namespaced(
    "PodDisruptionBudget", client.PolicyV1Api, "pod_disruption_budget", "V1PodDisruptionBudget")

# rbac.authorization.k8s.io
CLUSTER_ROLE_BINDING = _cluster_scoped(
    "ClusterRoleBinding", client.RbacAuthorizationV1Api, "cluster_role_binding", "V1ClusterRoleBinding")
CLUSTER_ROLE = _cluster_scoped("ClusterRole", client.RbacAuthorizationV1Api, "cluster_role", "V1ClusterRole")
ROLE_BINDING = _namespaced("RoleBinding", client.RbacAuthorizationV1Api, "role_binding", "V1RoleBinding")
ROLE = _namespaced("Role", client.RbacAuthorizationV1Api, "role", "V1Role")

# storage.k8s.io
CSI_DRIVER = _cluster_scoped("CSIDriver", client.StorageV1Api, "csi_driver", "V1CSIDriver")
CSI_NODE = _cluster_scoped("CSINode", client.StorageV1Api, "csi_node", "V1CSINode")
CSI_STORAGE_CAPACITY = _namespaced(
    "CSIStorageCapacity", client.StorageV1Api, "csi_storage_capacity", "V1CSIStorageCapacity")
STORAGE_CLASS = _cluster_scoped("StorageClass", client.StorageV1Api, "storage_class", "V1StorageClass")
VOLUME_ATTACHMENT = _cluster_scoped(
    "VolumeAttachment", client.StorageV1Api, "volume_attachment", "V1VolumeAttachment")
