"""HTTP routes over the record store and upload intake."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from portfolio_sync.models.project import ProjectUpdate
from portfolio_sync.server.uploads import UploadIntake
from portfolio_sync.store.records import RecordStore

router = APIRouter()


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_intake(request: Request) -> UploadIntake:
    return request.app.state.intake


@router.get("/health", tags=["System"])
def health_check() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/proyectos")
def list_projects(store: RecordStore = Depends(get_store)) -> list[dict[str, Any]]:
    return [r.to_json() for r in store.read_all()]


@router.post("/upload")
async def upload_project(
    titulo: str | None = Form(None),
    descripcion: str | None = Form(None),
    archivo: UploadFile | None = File(None),
    intake: UploadIntake = Depends(get_intake),
) -> Any:
    """Save the file, record the project, then mirror the file to the remote repository."""
    if archivo is None or not archivo.filename:
        return JSONResponse(status_code=400, content={"error": "No file was uploaded"})
    try:
        record, _ = await intake.accept(
            title=titulo,
            description=descripcion,
            filename=archivo.filename,
            stream=archivo.file,
        )
    except ValueError as exc:
        return JSONResponse(status_code=400, content={"error": str(exc)})
    finally:
        await archivo.close()
    return record.to_json()


@router.put("/proyectos/{project_id}")
def update_project(
    project_id: int,
    changes: ProjectUpdate | None = Body(None),
    store: RecordStore = Depends(get_store),
) -> dict[str, bool]:
    store.update(project_id, changes or ProjectUpdate())
    return {"success": True}


@router.delete("/proyectos/{project_id}")
def delete_project(
    project_id: int,
    store: RecordStore = Depends(get_store),
) -> dict[str, bool]:
    store.delete(project_id)
    return {"success": True}
