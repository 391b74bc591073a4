"""
kubequery 表目录

所有表定义在导入时静态构建，build_registry() 把它们组装成只读的表注册表。
"""

from typing import List

from ..core.registry import TableDefinition, TableRegistry
from . import admissionregistration, apps, autoscaling, batch, core, discovery, networking, policy, rbac, storage


TABLE_MODULES = (
    admissionregistration,
    apps,
    autoscaling,
    batch,
    core,
    discovery,
    networking,
    policy,
    rbac,
    storage,
)


def all_tables() -> List[TableDefinition]:
    """全部表定义（按API组排列）"""
    tables: List[TableDefinition] = []
    for module in TABLE_MODULES:
        tables.extend(module.TABLES)
    return tables


def build_registry() -> TableRegistry:
    """构建表注册表"""
    return TableRegistry(all_tables())


__all__ = ["TABLE_MODULES", "all_tables", "build_registry"]
