import logging
from typing import Callable

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from newsanalyzer.core.store import HistoryStore, StoreError


def create_router(get_store: Callable[[], HistoryStore], history_limit: int = 10) -> APIRouter:
    router = APIRouter(prefix="/api/history")

    @router.get("")
    async def list_history():
        """Most recent analyses, newest first. Empty when the store is down."""
        records = await get_store().list_recent(history_limit)
        return [record.to_wire() for record in records]

    @router.delete("/{record_id}")
    async def delete_history_item(record_id: str):
        try:
            found = await get_store().delete_by_id(record_id)
        except StoreError as e:
            logging.error(f"Delete error: {e}")
            return JSONResponse(status_code=500, content={"error": "Failed to delete item"})

        if not found:
            return JSONResponse(status_code=404, content={"error": "Item not found"})
        logging.info(f"🧹 Deleted history item {record_id}")
        return {"success": True, "message": "Item deleted successfully"}

    return router
