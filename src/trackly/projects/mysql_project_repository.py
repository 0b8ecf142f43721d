from __future__ import annotations

from ..catalog.mysql_catalog_repository import MySQLCatalogRepository


class MySQLProjectRepository(MySQLCatalogRepository):
    table = "projects"
    id_column = "project_id"
