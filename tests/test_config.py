"""
配置测试
"""

import pytest

from kubequery.__main__ import main
from kubequery.config import KubeQueryConfig
from kubequery.errors import ConfigurationError


ENV_VARS = [
    "KUBEQUERY_SOCKET", "KUBEQUERY_TIMEOUT", "KUBEQUERY_INTERVAL", "KUBECONFIG_PATH", "KUBECONFIG",
    "K8S_CONTEXT", "KUBEQUERY_IN_CLUSTER", "KUBEQUERY_CLUSTER_NAME", "K8S_REQUEST_TIMEOUT",
    "K8S_PAGE_SIZE", "KUBEQUERY_DEBUG", "KUBEQUERY_LOG_FILE", "KUBERNETES_SERVICE_HOST",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # 避免读取开发机上的.env和~/.kube/config
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


@pytest.fixture
def kubeconfig(tmp_path):
    path = tmp_path / "kubeconfig"
    path.write_text("apiVersion: v1\nkind: Config\n")
    return str(path)


class TestKubeQueryConfig:
    """测试配置加载和校验"""

    def test_defaults(self):
        config = KubeQueryConfig.from_env()
        assert config.socket is None
        assert config.timeout == 3
        assert config.interval == 3
        assert config.request_timeout == 10.0
        assert config.page_size == 500
        assert config.in_cluster is False
        assert config.kubeconfig_path is None

    def test_env(self, monkeypatch, kubeconfig):
        monkeypatch.setenv("KUBEQUERY_SOCKET", "/tmp/host.em")
        monkeypatch.setenv("KUBEQUERY_TIMEOUT", "5")
        monkeypatch.setenv("KUBECONFIG", kubeconfig)
        monkeypatch.setenv("K8S_CONTEXT", "prod")
        monkeypatch.setenv("KUBEQUERY_DEBUG", "true")

        config = KubeQueryConfig.from_env()

        assert config.socket == "/tmp/host.em"
        assert config.timeout == 5
        assert config.kubeconfig_path == kubeconfig
        assert config.kube_context == "prod"
        assert config.debug is True

    def test_in_cluster_detection(self, monkeypatch):
        monkeypatch.setenv("KUBERNETES_SERVICE_HOST", "10.96.0.1")
        assert KubeQueryConfig.from_env().in_cluster is True

    def test_args_override_env(self, monkeypatch):
        monkeypatch.setenv("KUBEQUERY_SOCKET", "/tmp/env.em")
        monkeypatch.setenv("KUBEQUERY_INTERVAL", "7")

        config = KubeQueryConfig.from_args(["--socket", "/tmp/arg.em", "--timeout", "9", "--verbose"])

        assert config.socket == "/tmp/arg.em"
        assert config.timeout == 9
        assert config.interval == 7
        assert config.debug is True

    def test_unset_flags_keep_env_values(self, monkeypatch):
        monkeypatch.setenv("KUBEQUERY_IN_CLUSTER", "true")
        config = KubeQueryConfig.from_args(["--socket", "/tmp/a.em"])
        assert config.in_cluster is True

    def test_missing_socket(self):
        with pytest.raises(ConfigurationError) as exc_info:
            KubeQueryConfig(in_cluster=True).validate_config()
        assert "--socket" in exc_info.value.message

    @pytest.mark.parametrize("field", ["timeout", "interval", "request_timeout", "page_size"])
    def test_non_positive_values(self, field):
        config = KubeQueryConfig(socket="/tmp/a.em", in_cluster=True, **{field: 0})
        with pytest.raises(ConfigurationError):
            config.validate_config()

    def test_missing_kubeconfig_file(self, tmp_path):
        config = KubeQueryConfig(socket="/tmp/a.em", kubeconfig_path=str(tmp_path / "missing"))
        with pytest.raises(ConfigurationError):
            config.validate_config()

    def test_valid_config(self, kubeconfig):
        KubeQueryConfig(socket="/tmp/a.em", kubeconfig_path=kubeconfig).validate_config()

    def test_kubeconfig_path_expands_home(self, tmp_path):
        config = KubeQueryConfig(kubeconfig_path="~/kubeconfig")
        assert config.get_kubeconfig_path() == str(tmp_path / "kubeconfig")

    @pytest.mark.parametrize("name, value", [
        ("KUBEQUERY_TIMEOUT", "3s"),
        ("KUBEQUERY_INTERVAL", "fast"),
        ("K8S_REQUEST_TIMEOUT", "ten"),
        ("K8S_PAGE_SIZE", "1.5"),
    ])
    def test_malformed_numeric_env(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ConfigurationError) as exc_info:
            KubeQueryConfig.from_args(["--socket", "/tmp/a.em"])
        assert name in exc_info.value.message

    def test_float_request_timeout_env(self, monkeypatch):
        monkeypatch.setenv("K8S_REQUEST_TIMEOUT", "2.5")
        assert KubeQueryConfig.from_env().request_timeout == 2.5

    def test_main_exits_on_malformed_env(self, monkeypatch):
        monkeypatch.setenv("KUBEQUERY_TIMEOUT", "3s")
        with pytest.raises(SystemExit) as exc_info:
            main(["--socket", "/tmp/a.em"])
        assert exc_info.value.code == 1
