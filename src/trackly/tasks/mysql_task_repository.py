from __future__ import annotations

from ..catalog.mysql_catalog_repository import MySQLCatalogRepository


class MySQLTaskRepository(MySQLCatalogRepository):
    table = "tasks"
    id_column = "task_id"
