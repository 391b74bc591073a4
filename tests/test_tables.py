"""
表目录测试

对每张注册的表验证：投影出的每一行恰好包含声明的列，且顺序一致。
"""

import pytest
from kubernetes import client

from kubequery.core.schema import CLUSTER_COLUMNS, ColumnType, check_row_shape
from kubequery.errors import SchemaContractViolation, UnknownTableError
from kubequery.k8s_client import APIResourceEntry
from kubequery.tables import all_tables, build_registry

from conftest import SAMPLES


TABLES = all_tables()
MODEL_TABLES = [table for table in TABLES if table.kind.model is not None]


def discovery_resources(table):
    if table.name == "kubernetes_api_resources":
        return [
            APIResourceEntry("v1", client.V1APIResource(
                name="pods", singular_name="pod", kind="Pod", namespaced=True,
                verbs=["get", "list"], short_names=["po"],
            )),
            APIResourceEntry("apps/v1", client.V1APIResource(
                name="deployments", singular_name="deployment", kind="Deployment", namespaced=True,
                verbs=["get"],
            )),
        ]
    return [client.VersionInfo(
        major="1", minor="29", git_version="v1.29.0", git_commit="abc", git_tree_state="clean",
        build_date="2023-12-13T08:51:44Z", go_version="go1.21.5", compiler="gc", platform="linux/amd64",
    )]


class TestRegistry:
    """测试表注册表"""

    def test_table_count(self):
        registry = build_registry()
        assert len(registry) == 48
        assert len(set(registry.names())) == 48

    def test_every_table_starts_with_cluster_columns(self):
        for table in TABLES:
            assert table.columns[:2] == CLUSTER_COLUMNS

    def test_columns_for(self):
        registry = build_registry()
        columns = registry.columns_for("kubernetes_pods")
        names = [column.name for column in columns]
        assert names[:4] == ["cluster_name", "cluster_uid", "uid", "name"]
        assert "namespace" in names

    def test_columns_for_unknown_table(self):
        with pytest.raises(UnknownTableError) as exc_info:
            build_registry().columns_for("kubernetes_pod_security_policies")
        assert exc_info.value.table_name == "kubernetes_pod_security_policies"

    def test_columns_are_stable(self):
        assert build_registry().columns_for("kubernetes_nodes") == build_registry().columns_for("kubernetes_nodes")

    def test_every_sample_is_used(self):
        assert {table.kind.model for table in MODEL_TABLES} == set(SAMPLES)

    def test_secret_values_are_not_exposed(self):
        names = [column.name for column in build_registry().columns_for("kubernetes_secrets")]
        assert "data_keys" in names
        assert "data" not in names


class TestRowShape:
    """测试每张表的行结构"""

    @pytest.mark.parametrize("table", MODEL_TABLES, ids=lambda table: table.name)
    def test_sample_rows_match_declared_columns(self, table, sample, cluster):
        rows = table.project(sample(table.kind.model), cluster)

        assert rows, f"{table.name} 样例没有产生任何行"
        for row in rows:
            check_row_shape(table.name, row, table.columns)
            assert row["cluster_name"] == "test-cluster"
            assert row["cluster_uid"] == "uid-kube-system"

    @pytest.mark.parametrize(
        "table",
        MODEL_TABLES,
        ids=lambda table: table.name,
    )
    def test_metadata_only_objects_project_safely(self, table, bare_object, cluster):
        metadata = {"name": "bare"}
        if table.kind.namespaced:
            metadata["namespace"] = "default"
        rows = table.project(bare_object(table.kind.model, **metadata), cluster)

        if table.expand is None:
            assert len(rows) == 1
            check_row_shape(table.name, rows[0], table.columns)
        else:
            assert rows == []

    @pytest.mark.parametrize(
        "table",
        [table for table in TABLES if table.kind.loader is not None],
        ids=lambda table: table.name,
    )
    def test_discovery_rows_match_declared_columns(self, table, cluster):
        resources = discovery_resources(table)
        for resource in resources:
            for row in table.project(resource, cluster):
                check_row_shape(table.name, row, table.columns)

    def test_value_types_match_column_types(self, sample, cluster):
        for table in MODEL_TABLES:
            for row in table.project(sample(table.kind.model), cluster):
                for column in table.columns:
                    value = row[column.name]
                    if value is None:
                        continue
                    if column.type == ColumnType.BOOLEAN:
                        assert isinstance(value, bool), (table.name, column.name)
                    elif column.type in (ColumnType.INTEGER, ColumnType.BIGINT):
                        assert isinstance(value, int) and not isinstance(value, bool), (table.name, column.name)
                    else:
                        assert isinstance(value, str), (table.name, column.name)

    def test_shape_check_reports_extra_and_missing(self):
        table = build_registry().get("kubernetes_info")
        row = {column.name: None for column in table.columns}
        del row["major"]
        row["unexpected"] = 1
        with pytest.raises(SchemaContractViolation) as exc_info:
            check_row_shape(table.name, row, table.columns)
        assert exc_info.value.details["missing"] == ["major"]
        assert exc_info.value.details["extra"] == ["unexpected"]


class TestTableValues:
    """测试典型列的取值"""

    def project_one(self, name, sample, cluster):
        table = build_registry().get(name)
        return table.project(sample(table.kind.model), cluster)

    def test_pods(self, sample, cluster):
        [row] = self.project_one("kubernetes_pods", sample, cluster)
        assert row["namespace"] == "default"
        assert row["creation_timestamp"] == "2024-01-02T03:04:05Z"
        assert row["start_time"] == "2024-01-02T03:05:00Z"
        assert row["labels"] == '{"app":"web"}'
        assert row["node_name"] == "node-1"
        assert row["termination_grace_period_seconds"] == 30
        assert row["phase"] == "Running"
        assert row["pod_ips"] == '[{"ip":"10.0.0.5"}]'

    def test_pod_volumes(self, sample, cluster):
        rows = self.project_one("kubernetes_pod_volumes", sample, cluster)
        assert [(row["volume_name"], row["volume_type"]) for row in rows] == [
            ("data", "host_path"),
            ("config", "config_map"),
        ]
        assert rows[0]["host_path"] == "/var/data"
        assert rows[0]["source"] == '{"path":"/var/data","type":"Directory"}'
        assert rows[1]["config_map_name"] == "web-config"

    def test_secrets_list_keys_only(self, sample, cluster):
        [row] = self.project_one("kubernetes_secrets", sample, cluster)
        assert row["data_keys"] == '["password","username"]'
        assert "c2VjcmV0" not in str(row)

    def test_nodes(self, sample, cluster):
        [row] = self.project_one("kubernetes_nodes", sample, cluster)
        assert "namespace" not in row
        assert row["cpu_capacity"] == "4"
        assert row["memory_allocatable"] == "15Gi"
        assert row["kubelet_version"] == "v1.29.0"
        assert row["pod_cidrs"] == '["10.244.0.0/24"]'

    def test_services(self, sample, cluster):
        [row] = self.project_one("kubernetes_services", sample, cluster)
        assert row["cluster_ip"] == "10.96.0.10"
        assert row["cluster_ips"] == '["10.96.0.10"]'
        assert row["external_ips"] == '["192.0.2.1"]'

    def test_pod_disruption_budget_int_or_string(self, sample, cluster):
        [row] = self.project_one("kubernetes_pod_disruption_budget", sample, cluster)
        assert row["min_available"] == "1"
        assert row["max_unavailable"] == "25%"

    def test_binding_subjects(self, sample, cluster):
        rows = self.project_one("kubernetes_role_binding_subjects", sample, cluster)
        assert [(row["subject_kind"], row["subject_name"]) for row in rows] == [
            ("User", "alice"),
            ("ServiceAccount", "web"),
        ]
        assert {row["role_name"] for row in rows} == {"view"}

    def test_policy_rules(self, sample, cluster):
        rows = self.project_one("kubernetes_cluster_role_policy_rule", sample, cluster)
        assert len(rows) == 2
        assert rows[0]["resources"] == '["pods"]'
        assert rows[1]["non_resource_urls"] == '["/healthz"]'

    def test_persistent_volume_type(self, sample, cluster):
        [row] = self.project_one("kubernetes_persistent_volumes", sample, cluster)
        assert row["volume_type"] == "csi"
        assert row["csi_driver"] == "ebs.csi.aws.com"

    def test_webhooks(self, sample, cluster):
        rows = self.project_one("kubernetes_validating_webhooks", sample, cluster)
        assert [row["webhook_name"] for row in rows] == ["hook.example.com", "second.example.com"]
        assert rows[0]["client_config_service_port"] == 443
