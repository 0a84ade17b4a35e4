"""
rest_api.py - REST API serving table row models to a browser front end
"""
import logging
import uuid
from typing import Dict, Any, List, Optional
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from datatable_engine.config import DataTableConfig, get_config
from datatable_engine.controller import DataTableController
from datatable_engine.types.table_spec import TableOptions

logger = logging.getLogger(__name__)


# Pydantic models for API requests/responses
class TableOptionsModel(BaseModel):
    """Pydantic model for table mode flags"""
    is_tree: bool = False
    keep_primitive_value: bool = False
    editable_cell: bool = False
    group_column_count: int = 0


class CreateTableRequest(BaseModel):
    """Pydantic model for creating a table session"""
    columns: List[Dict[str, Any]] = []
    data: Any = None
    options: TableOptionsModel = TableOptionsModel()


class UpdateDataRequest(BaseModel):
    data: Any = None


class UpdateOptionsRequest(BaseModel):
    is_tree: Optional[bool] = None
    keep_primitive_value: Optional[bool] = None
    editable_cell: Optional[bool] = None
    group_column_count: Optional[int] = None


class ToggleRequest(BaseModel):
    node_id: str


class HoverRequest(BaseModel):
    row_index: int
    column_key: str


class APIResponse(BaseModel):
    """Base API response model"""
    status: str
    data: Optional[Any] = None
    metadata: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class DataTableAPI:
    """REST API holding one DataTableController per session"""

    def __init__(self, config: Optional[DataTableConfig] = None):
        self.config = config or get_config()
        self.sessions: Dict[str, DataTableController] = {}
        self.app = FastAPI(title="Data Table Engine API")
        self._setup_routes()

    def _get_session(self, table_id: str) -> DataTableController:
        controller = self.sessions.get(table_id)
        if controller is None:
            raise HTTPException(status_code=404, detail=f"Unknown table session: {table_id}")
        return controller

    def _setup_routes(self):
        """Setup all API routes"""

        @self.app.get("/health")
        async def health_check():
            return {"status": "healthy", "service": "datatable-engine", "version": "1.0"}

        @self.app.post("/tables")
        async def create_table(request: CreateTableRequest):
            try:
                controller = DataTableController(
                    columns=request.columns,
                    data=request.data,
                    options=TableOptions(**request.options.dict()),
                    config=self.config,
                )
            except ValueError as e:
                raise HTTPException(status_code=422, detail=str(e))

            table_id = uuid.uuid4().hex
            self.sessions[table_id] = controller
            logger.info("Created table session %s (%d rows)", table_id, len(controller.table_rows))
            return APIResponse(
                status="success",
                data=controller.to_dict(),
                metadata={"table_id": table_id},
            )

        @self.app.get("/tables/{table_id}/rows")
        async def get_rows(table_id: str):
            controller = self._get_session(table_id)
            return APIResponse(status="success", data=controller.to_dict())

        @self.app.put("/tables/{table_id}/data")
        async def update_data(table_id: str, request: UpdateDataRequest):
            controller = self._get_session(table_id)
            try:
                controller.set_data(request.data)
            except ValueError as e:
                raise HTTPException(status_code=422, detail=str(e))
            return APIResponse(status="success", data=controller.to_dict())

        @self.app.patch("/tables/{table_id}/options")
        async def update_options(table_id: str, request: UpdateOptionsRequest):
            controller = self._get_session(table_id)
            changes = {k: v for k, v in request.dict().items() if v is not None}
            try:
                controller.set_options(**changes)
            except ValueError as e:
                raise HTTPException(status_code=422, detail=str(e))
            return APIResponse(status="success", data=controller.to_dict())

        @self.app.post("/tables/{table_id}/toggle")
        async def toggle_node(table_id: str, request: ToggleRequest):
            controller = self._get_session(table_id)
            expanded = controller.toggle_node(request.node_id)
            return APIResponse(
                status="success",
                data=controller.to_dict(),
                metadata={"node_id": request.node_id, "expanded": expanded},
            )

        @self.app.post("/tables/{table_id}/hover")
        async def hover_enter(table_id: str, request: HoverRequest):
            controller = self._get_session(table_id)
            event = controller.hover_enter(request.row_index, request.column_key)
            return APIResponse(
                status="success",
                data={
                    "item": event.item if event else None,
                    "highlighted_cells": [list(c) for c in sorted(controller.hover.highlighted_cells)],
                },
                metadata={"event_fired": event is not None},
            )

        @self.app.post("/tables/{table_id}/leave")
        async def hover_leave(table_id: str, request: HoverRequest):
            controller = self._get_session(table_id)
            cleared = controller.hover_leave(request.row_index, request.column_key)
            return APIResponse(
                status="success",
                data={"highlighted_cells": [list(c) for c in sorted(controller.hover.highlighted_cells)]},
                metadata={"cleared": cleared},
            )

        @self.app.delete("/tables/{table_id}")
        async def delete_table(table_id: str):
            self._get_session(table_id)
            del self.sessions[table_id]
            logger.info("Deleted table session %s", table_id)
            return APIResponse(status="success", metadata={"table_id": table_id})

    def get_app(self):
        """Get the FastAPI application instance"""
        return self.app


def create_api(config: Optional[DataTableConfig] = None) -> DataTableAPI:
    """Create the API with the given or global configuration"""
    return DataTableAPI(config)
