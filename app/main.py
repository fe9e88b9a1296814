# app/main.py
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError

from app.compare.client import LaptopServiceClient
from app.compare.models import CompareStub
from app.compare.record_cache import LaptopRecordCache
from app.compare.session import ComparisonSession
from app.compare.store import CompareStore
from app.utils.blobstore import JsonBlobStore, resolve_state_dir
from app.utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    state_dir = resolve_state_dir()
    client = LaptopServiceClient()
    cache = LaptopRecordCache(client.fetch_laptop)
    store = CompareStore(JsonBlobStore(state_dir), cache)
    app.state.session = ComparisonSession(store, cache)
    logger.info(f"Compare state in {state_dir}, laptop service at {client.base_url}")
    try:
        yield
    finally:
        await client.aclose()


app = FastAPI(title="Laptop Compare", version="1.0.0", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_session(request: Request) -> ComparisonSession:
    return request.app.state.session


# ---------- Favicon ----------
@app.get("/favicon.ico")
def favicon():
    return Response(status_code=204)


# ---------- Health ----------

@app.get("/healthz")
def healthz(session: ComparisonSession = Depends(get_session)):
    store = session.store
    return {
        "ok": True,
        "items": len(store),
        "loading": session.is_loading,
        "state_dir": getattr(store.blob_store, "state_dir", None),
        "cache": session.cache.stats(),
    }


# ---------- Compare items ----------

class CompareItemRequest(BaseModel):
    id: str = Field(..., min_length=1, description="Laptop id as served by the laptop service")
    brand: Optional[str] = None
    series: Optional[str] = None
    headline: Optional[str] = None
    thumbnail_urls: List[str] = Field(default_factory=list)
    # number or display text like "₹49,990"
    reference_price: Optional[Any] = None


def _items(session: ComparisonSession) -> Dict[str, Any]:
    store = session.store
    return {
        "items": [s.to_blob() for s in store.stubs],
        "count": len(store),
        "can_add_more": store.capacity_remaining(),
        "loading": session.is_loading,
    }


@app.get("/compare/items")
def list_items(session: ComparisonSession = Depends(get_session)):
    return _items(session)


@app.post("/compare/items", status_code=201)
async def add_item(req: CompareItemRequest, session: ComparisonSession = Depends(get_session)):
    try:
        stub = CompareStub.model_validate(req.model_dump(exclude_none=True))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    result = await session.add(stub)
    if not result:
        raise HTTPException(status_code=409, detail={"reason": result.value, "id": stub.id})
    return {"ok": True, "result": result.value, **_items(session)}


@app.delete("/compare/items/{laptop_id}")
async def remove_item(laptop_id: str, session: ComparisonSession = Depends(get_session)):
    await session.remove(laptop_id)
    return {"ok": True, **_items(session)}


@app.delete("/compare/items")
async def clear_items(session: ComparisonSession = Depends(get_session)):
    await session.clear()
    return {"ok": True, **_items(session)}


# ---------- Comparison table ----------

@app.get("/compare")
async def comparison(session: ComparisonSession = Depends(get_session)):
    """
    Resolve any members not yet loaded, then return the full table.
    Members whose record could not be fetched are listed under ``unresolved``.
    """
    await session.refresh()
    table = session.view()
    resolved = {lap.id for lap in session.laptops}
    return {
        **table.to_dict(),
        "unresolved": [i for i in session.store.ids if i not in resolved],
    }


@app.get("/")
def root():
    return {"message": "Laptop Compare is running. /compare/items manages the list, /compare returns the table."}


if __name__ == "__main__":
    import os
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")
