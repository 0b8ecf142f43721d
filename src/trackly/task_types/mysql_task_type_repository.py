from __future__ import annotations

from ..catalog.mysql_catalog_repository import MySQLCatalogRepository


class MySQLTaskTypeRepository(MySQLCatalogRepository):
    table = "task_types"
    id_column = "task_type_id"
