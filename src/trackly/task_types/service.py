from __future__ import annotations

from ..catalog.service import CatalogService
from ..core.enums import Collection


class TaskTypeService(CatalogService):
    entity = "Task type"
    collection = Collection.TASK_TYPES
