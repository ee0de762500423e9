"""Data management endpoints: export, restore, bulk import, delete all."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse

from tms.api.dependencies import get_engine
from tms.engine import TransportEngine
from tms.importer.csv_import import ImportOutcome

router = APIRouter()


@router.get("/export")
def export_data(engine: TransportEngine = Depends(get_engine)):
    """Full-state backup document."""
    return JSONResponse(
        content=engine.export_state(),
        headers={"Content-Disposition": 'attachment; filename="logipro_tms_backup.json"'},
    )


@router.post("/restore")
def restore_data(
    document: dict[str, Any] = Body(..., description="Backup document"),
    engine: TransportEngine = Depends(get_engine),
):
    """Replace all data with a backup; nothing changes if the document is invalid."""
    return {"restored": engine.restore_state(document)}


@router.post("/import/shipments")
async def import_shipments(request: Request, engine: TransportEngine = Depends(get_engine)):
    """
    Bulk import shipments from a CSV request body.

    Returns 400 when the payload cannot be read at all. The import itself
    runs in the threadpool like the other mutating endpoints.
    """
    payload = await request.body()
    report = await run_in_threadpool(engine.import_shipments, payload)
    status_code = 400 if report.outcome == ImportOutcome.FAILED else 200
    return JSONResponse(status_code=status_code, content=report.summary())


@router.get("/template")
def download_template(engine: TransportEngine = Depends(get_engine)):
    """CSV import template with one example row."""
    return PlainTextResponse(
        content=engine.template(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="shipment_template.csv"'},
    )


@router.get("/dangling-references")
def dangling_references(engine: TransportEngine = Depends(get_engine)):
    """Stored ids that no longer resolve."""
    return {"references": [ref.to_dict() for ref in engine.dangling_references()]}


@router.delete("", status_code=204)
def delete_all_data(engine: TransportEngine = Depends(get_engine)):
    """Delete every record of every kind."""
    engine.clear_all()
    return Response(status_code=204)
