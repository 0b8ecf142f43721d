from __future__ import annotations

from ..catalog.service import CatalogService
from ..core.enums import Collection


class TaskService(CatalogService):
    entity = "Task"
    collection = Collection.TASKS
