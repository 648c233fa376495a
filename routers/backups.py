# routers/backups.py
"""
Backup routes: full binary copies of the SQLite store.
"""
from typing import List
from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from database import engine
from schemas.backup import BackupResponse, RestoreResponse
from services.backup_service import BackupService
from services.entity_store import SessionContext
from utils.auth import get_current_context

router = APIRouter(prefix="/api/backups", tags=["backups"])


def get_backup_service() -> BackupService:
     return BackupService(engine)


@router.post("", response_model=BackupResponse, status_code=status.HTTP_201_CREATED, summary="Create a backup")
def create_backup(
     service: BackupService = Depends(get_backup_service),
     ctx: SessionContext = Depends(get_current_context)
):
     return BackupResponse.model_validate(service.create_backup())


@router.get("", response_model=List[BackupResponse], summary="List backups")
def list_backups(
     service: BackupService = Depends(get_backup_service),
     ctx: SessionContext = Depends(get_current_context)
):
     return [BackupResponse.model_validate(b) for b in service.list_backups()]


@router.post("/restore", response_model=RestoreResponse, summary="Restore from an uploaded backup")
async def restore_backup(
     backup: UploadFile = File(...),
     service: BackupService = Depends(get_backup_service),
     ctx: SessionContext = Depends(get_current_context)
):
     """Replace the whole database with the uploaded file. Returns success=false for non-SQLite files."""
     data = await backup.read()
     return RestoreResponse(success=await run_in_threadpool(service.restore_backup, data))


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a backup")
def delete_backup(
     name: str,
     service: BackupService = Depends(get_backup_service),
     ctx: SessionContext = Depends(get_current_context)
):
     service.delete_backup(name)
