import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect

from company_board.api.deps import get_store
from company_board.core.errors import StoreError
from company_board.schemas.company import CompanyCard, CompanyRecord
from company_board.services.company_store import CompanyStore
from company_board.services.display import DisplayRenderer

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/api/companies", response_model=list[CompanyRecord])
def list_companies(store: CompanyStore = Depends(get_store)):
    """All companies, newest first."""
    try:
        return store.fetch_all()
    except StoreError:
        logger.exception("Error fetching companies")
        raise HTTPException(status_code=503, detail="Failed to fetch companies")


async def _pump(websocket: WebSocket, queue: "asyncio.Queue[List[CompanyCard]]"):
    while True:
        cards = await queue.get()
        await websocket.send_json({
            "type": "companies",
            "data": [c.model_dump(mode="json", by_alias=True) for c in cards],
        })


async def _drain(websocket: WebSocket):
    # Incoming messages are ignored; receiving detects the disconnect.
    while True:
        await websocket.receive_text()


async def stream_companies(websocket: WebSocket, store: CompanyStore) -> None:
    """Push the rendered company list to an accepted socket until either side stops.

    Writes happen on threadpool threads, so renders are handed to this loop
    through a queue. If sending fails the socket is closed with 1011.
    """
    loop = asyncio.get_running_loop()
    queue: "asyncio.Queue[List[CompanyCard]]" = asyncio.Queue()

    def on_render(cards: List[CompanyCard]) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, cards)

    renderer = DisplayRenderer(store, on_render=on_render)
    async with renderer.live():
        sender = asyncio.create_task(_pump(websocket, queue))
        receiver = asyncio.create_task(_drain(websocket))
        done, pending = await asyncio.wait({sender, receiver}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        error = sender.exception() if sender in done else None
        if error is not None:
            logger.warning("Company feed send failed: %r", error)
            try:
                await websocket.close(code=1011)
            except (RuntimeError, OSError, WebSocketDisconnect):
                # Already closed by the client.
                pass
        elif receiver in done and not isinstance(receiver.exception(), WebSocketDisconnect):
            logger.warning("Company feed receive failed: %r", receiver.exception())


@router.websocket("/ws/companies")
async def companies_feed(websocket: WebSocket, store: CompanyStore = Depends(get_store)):
    """Live company list for the display page.

    One message per store notification, already sorted and formatted:
      {"type": "companies", "data": [CompanyCard, ...]}
    """
    await websocket.accept()
    await stream_companies(websocket, store)
