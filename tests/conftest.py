"""
测试公共夹具

SAMPLES 中是各资源类型的线上格式（camelCase）样例，通过真实的
ApiClient.deserialize 解码为kubernetes模型后再做投影。
"""

import copy

import pytest
from kubernetes import client

from kubequery.core.schema import ClusterIdentity
from kubequery.k8s_client import ClusterContext, decode_object


METADATA = {
    "name": "web",
    "namespace": "default",
    "uid": "uid-web",
    "creationTimestamp": "2024-01-02T03:04:05Z",
    "labels": {"app": "web"},
    "annotations": {"team": "infra"},
}

CLUSTER_METADATA = {
    "name": "cluster-wide",
    "uid": "uid-cluster-wide",
    "creationTimestamp": "2024-01-02T03:04:05Z",
}

POD_SPEC = {
    "nodeName": "node-1",
    "serviceAccountName": "web",
    "hostNetwork": False,
    "restartPolicy": "Always",
    "terminationGracePeriodSeconds": 30,
    "containers": [
        {
            "name": "app",
            "image": "nginx:1.25",
            "ports": [{"containerPort": 80, "protocol": "TCP"}],
            "resources": {
                "requests": {"cpu": "100m", "memory": "128Mi"},
                "limits": {"cpu": "500m", "memory": "256Mi"},
            },
            "securityContext": {"privileged": False},
        },
        {"name": "sidecar", "image": "busybox:1.36"},
    ],
    "initContainers": [{"name": "init", "image": "busybox:1.36", "command": ["sh", "-c", "true"]}],
    "volumes": [
        {"name": "data", "hostPath": {"path": "/var/data", "type": "Directory"}},
        {"name": "config", "configMap": {"name": "web-config"}},
    ],
}

TEMPLATE = {"metadata": {"labels": {"app": "web"}}, "spec": POD_SPEC}
SELECTOR = {"matchLabels": {"app": "web"}}

WEBHOOK = {
    "name": "hook.example.com",
    "admissionReviewVersions": ["v1"],
    "sideEffects": "None",
    "failurePolicy": "Fail",
    "timeoutSeconds": 5,
    "clientConfig": {"service": {"name": "hook", "namespace": "system", "path": "/mutate", "port": 443}},
    "rules": [{"apiGroups": [""], "apiVersions": ["v1"], "operations": ["CREATE"], "resources": ["pods"]}],
}

ROLE_REF = {"apiGroup": "rbac.authorization.k8s.io", "kind": "ClusterRole", "name": "view"}
SUBJECTS = [
    {"kind": "User", "name": "alice", "apiGroup": "rbac.authorization.k8s.io"},
    {"kind": "ServiceAccount", "name": "web", "namespace": "default"},
]
RULES = [
    {"apiGroups": [""], "resources": ["pods"], "verbs": ["get", "list"]},
    {"nonResourceURLs": ["/healthz"], "verbs": ["get"]},
]


SAMPLES = {
    "V1MutatingWebhookConfiguration": {
        "metadata": CLUSTER_METADATA,
        "webhooks": [dict(WEBHOOK, reinvocationPolicy="Never")],
    },
    "V1ValidatingWebhookConfiguration": {
        "metadata": CLUSTER_METADATA,
        "webhooks": [WEBHOOK, dict(WEBHOOK, name="second.example.com")],
    },
    "V1DaemonSet": {
        "metadata": METADATA,
        "spec": {"selector": SELECTOR, "template": TEMPLATE, "updateStrategy": {"type": "RollingUpdate"}},
        "status": {
            "currentNumberScheduled": 3,
            "desiredNumberScheduled": 3,
            "numberMisscheduled": 0,
            "numberReady": 3,
            "observedGeneration": 7,
        },
    },
    "V1Deployment": {
        "metadata": METADATA,
        "spec": {"replicas": 2, "selector": SELECTOR, "template": TEMPLATE, "strategy": {"type": "RollingUpdate"}},
        "status": {"replicas": 2, "readyReplicas": 2, "availableReplicas": 2, "observedGeneration": 4},
    },
    "V1ReplicaSet": {
        "metadata": METADATA,
        "spec": {"replicas": 2, "selector": SELECTOR, "template": TEMPLATE},
        "status": {"replicas": 2, "readyReplicas": 1},
    },
    "V1StatefulSet": {
        "metadata": METADATA,
        "spec": {"replicas": 1, "selector": SELECTOR, "template": TEMPLATE, "serviceName": "web"},
        "status": {"replicas": 1, "currentRevision": "web-1"},
    },
    "V2HorizontalPodAutoscaler": {
        "metadata": METADATA,
        "spec": {
            "scaleTargetRef": {"apiVersion": "apps/v1", "kind": "Deployment", "name": "web"},
            "minReplicas": 1,
            "maxReplicas": 5,
        },
        "status": {"currentReplicas": 2, "desiredReplicas": 3, "lastScaleTime": "2024-01-03T00:00:00Z"},
    },
    "V1CronJob": {
        "metadata": METADATA,
        "spec": {
            "schedule": "*/5 * * * *",
            "suspend": False,
            "jobTemplate": {"spec": {"template": {"spec": POD_SPEC}}},
        },
        "status": {"lastScheduleTime": "2024-01-03T00:05:00Z"},
    },
    "V1Job": {
        "metadata": METADATA,
        "spec": {"backoffLimit": 6, "completions": 1, "template": {"spec": POD_SPEC}},
        "status": {"succeeded": 1, "startTime": "2024-01-03T00:00:00Z"},
    },
    "V1ComponentStatus": {
        "metadata": {"name": "scheduler"},
        "conditions": [{"type": "Healthy", "status": "True", "message": "ok"}],
    },
    "V1ConfigMap": {
        "metadata": METADATA,
        "data": {"nginx.conf": "events {}"},
        "binaryData": {"logo.png": "aGVsbG8="},
    },
    "V1Endpoints": {
        "metadata": METADATA,
        "subsets": [
            {"addresses": [{"ip": "10.0.0.5"}], "ports": [{"port": 80, "protocol": "TCP"}]},
            {"notReadyAddresses": [{"ip": "10.0.0.6"}], "ports": [{"port": 80}]},
        ],
    },
    "V1LimitRange": {
        "metadata": METADATA,
        "spec": {"limits": [{"type": "Container", "max": {"cpu": "2"}, "default": {"cpu": "500m"}}]},
    },
    "V1Namespace": {
        "metadata": CLUSTER_METADATA,
        "spec": {"finalizers": ["kubernetes"]},
        "status": {"phase": "Active"},
    },
    "V1Node": {
        "metadata": CLUSTER_METADATA,
        "spec": {
            "podCIDR": "10.244.0.0/24",
            "podCIDRs": ["10.244.0.0/24"],
            "taints": [{"key": "dedicated", "effect": "NoSchedule"}],
        },
        "status": {
            "capacity": {"cpu": "4", "memory": "16Gi", "pods": "110"},
            "allocatable": {"cpu": "3800m", "memory": "15Gi", "pods": "110"},
            "addresses": [{"type": "InternalIP", "address": "192.168.1.10"}],
            "nodeInfo": {
                "architecture": "amd64",
                "bootID": "boot",
                "containerRuntimeVersion": "containerd://1.7.0",
                "kernelVersion": "6.1.0",
                "kubeProxyVersion": "v1.29.0",
                "kubeletVersion": "v1.29.0",
                "machineID": "machine",
                "operatingSystem": "linux",
                "osImage": "Debian GNU/Linux 12",
                "systemUUID": "system",
            },
        },
    },
    "V1PersistentVolumeClaim": {
        "metadata": METADATA,
        "spec": {
            "accessModes": ["ReadWriteOnce"],
            "storageClassName": "standard",
            "resources": {"requests": {"storage": "10Gi"}},
        },
        "status": {"phase": "Bound", "capacity": {"storage": "10Gi"}},
    },
    "V1PersistentVolume": {
        "metadata": CLUSTER_METADATA,
        "spec": {
            "capacity": {"storage": "10Gi"},
            "accessModes": ["ReadWriteOnce"],
            "csi": {"driver": "ebs.csi.aws.com", "volumeHandle": "vol-1"},
            "claimRef": {"namespace": "default", "name": "web"},
        },
        "status": {"phase": "Bound"},
    },
    "V1PodTemplate": {"metadata": METADATA, "template": TEMPLATE},
    "V1Pod": {
        "metadata": METADATA,
        "spec": POD_SPEC,
        "status": {
            "phase": "Running",
            "podIP": "10.0.0.5",
            "podIPs": [{"ip": "10.0.0.5"}],
            "startTime": "2024-01-02T03:05:00Z",
            "containerStatuses": [
                {
                    "name": "app",
                    "image": "nginx:1.25",
                    "imageID": "docker.io/library/nginx@sha256:abc",
                    "containerID": "containerd://abc",
                    "ready": True,
                    "started": True,
                    "restartCount": 2,
                    "state": {"running": {"startedAt": "2024-01-02T03:05:01Z"}},
                },
            ],
        },
    },
    "V1ResourceQuota": {
        "metadata": METADATA,
        "spec": {"hard": {"pods": "10"}},
        "status": {"hard": {"pods": "10"}, "used": {"pods": "3"}},
    },
    "V1Secret": {
        "metadata": METADATA,
        "type": "Opaque",
        "data": {"password": "c2VjcmV0", "username": "YWRtaW4="},
    },
    "V1ServiceAccount": {"metadata": METADATA, "secrets": [{"name": "web-token"}]},
    "V1Service": {
        "metadata": METADATA,
        "spec": {
            "type": "ClusterIP",
            "clusterIP": "10.96.0.10",
            "clusterIPs": ["10.96.0.10"],
            "externalIPs": ["192.0.2.1"],
            "ports": [{"port": 80, "targetPort": 8080, "protocol": "TCP"}],
            "selector": {"app": "web"},
        },
    },
    "V1IngressClass": {"metadata": CLUSTER_METADATA, "spec": {"controller": "k8s.io/ingress-nginx"}},
    "V1Ingress": {
        "metadata": METADATA,
        "spec": {
            "ingressClassName": "nginx",
            "rules": [{"host": "web.example.com"}],
        },
    },
    "V1NetworkPolicy": {
        "metadata": METADATA,
        "spec": {"podSelector": SELECTOR, "policyTypes": ["Ingress"]},
    },
    "V1PodDisruptionBudget": {
        "metadata": METADATA,
        "spec": {"minAvailable": 1, "maxUnavailable": "25%", "selector": SELECTOR},
        "status": {"currentHealthy": 2, "desiredHealthy": 1, "disruptionsAllowed": 1, "expectedPods": 2},
    },
    "V1ClusterRoleBinding": {"metadata": CLUSTER_METADATA, "roleRef": ROLE_REF, "subjects": SUBJECTS},
    "V1ClusterRole": {"metadata": CLUSTER_METADATA, "rules": RULES},
    "V1RoleBinding": {"metadata": METADATA, "roleRef": dict(ROLE_REF, kind="Role"), "subjects": SUBJECTS},
    "V1Role": {"metadata": METADATA, "rules": RULES},
    "V1CSIDriver": {
        "metadata": CLUSTER_METADATA,
        "spec": {"attachRequired": True, "volumeLifecycleModes": ["Persistent"]},
    },
    "V1CSINode": {
        "metadata": CLUSTER_METADATA,
        "spec": {"drivers": [{"name": "ebs.csi.aws.com", "nodeID": "i-123", "allocatable": {"count": 25}}]},
    },
    "V1CSIStorageCapacity": {
        "metadata": METADATA,
        "storageClassName": "standard",
        "capacity": "100Gi",
    },
    "V1StorageClass": {
        "metadata": CLUSTER_METADATA,
        "provisioner": "ebs.csi.aws.com",
        "parameters": {"type": "gp3"},
        "allowVolumeExpansion": True,
    },
    "V1VolumeAttachment": {
        "metadata": CLUSTER_METADATA,
        "spec": {"attacher": "ebs.csi.aws.com", "nodeName": "node-1", "source": {"persistentVolumeName": "pv-1"}},
        "status": {"attached": True},
    },
}

@pytest.fixture
def api_client():
    return client.ApiClient(client.Configuration())


@pytest.fixture
def cluster():
    return ClusterIdentity(name="test-cluster", uid="uid-kube-system")


@pytest.fixture
def cluster_context(api_client, cluster):
    return ClusterContext(api_client=api_client, identity=cluster, request_timeout=5.0, page_size=2)


@pytest.fixture
def decode(cluster_context):
    """把线上格式的字典解码为kubernetes模型"""
    def _decode(payload, model):
        return decode_object(cluster_context, copy.deepcopy(payload), model)
    return _decode


@pytest.fixture
def sample(decode):
    """按模型名解码SAMPLES中的样例"""
    def _sample(model):
        return decode(SAMPLES[model], model)
    return _sample


@pytest.fixture
def bare_object():
    """只有metadata的模型对象，不做客户端校验，不依赖具体客户端版本的必需字段"""
    configuration = client.Configuration()
    configuration.client_side_validation = False

    def _bare_object(model, **metadata):
        return getattr(client, model)(
            metadata=client.V1ObjectMeta(**metadata),
            local_vars_configuration=configuration,
        )
    return _bare_object
