# routers/tenants.py
from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from schemas.tenant import TenantCreate, TenantUpdate, TenantResponse
from services import entity_store
from services.entity_store import SessionContext
from utils.auth import get_current_context

router = APIRouter(prefix="/api/tenants", tags=["tenants"])


@router.post("", response_model=TenantResponse, status_code=status.HTTP_201_CREATED, summary="Register a tenant")
def create_tenant(
     tenant_data: TenantCreate,
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     tenant = entity_store.create_tenant(db, ctx, **tenant_data.model_dump(exclude_none=True))
     db.commit()
     db.refresh(tenant)
     return tenant


@router.get("", response_model=List[TenantResponse], summary="List tenants")
def list_tenants(
     include_inactive: bool = Query(False, description="Include deactivated tenants"),
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     return entity_store.list_tenants(db, ctx, include_inactive)


@router.get("/{tenant_id}", response_model=TenantResponse, summary="Get a tenant")
def get_tenant(tenant_id: int, db: Session = Depends(get_session), ctx: SessionContext = Depends(get_current_context)):
     return entity_store.get_tenant(db, ctx, tenant_id)


@router.put("/{tenant_id}", response_model=TenantResponse, summary="Update a tenant")
def update_tenant(
     tenant_id: int,
     tenant_data: TenantUpdate,
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     tenant = entity_store.update_tenant(db, ctx, tenant_id, **tenant_data.model_dump(exclude_unset=True))
     db.commit()
     db.refresh(tenant)
     return tenant


@router.patch("/{tenant_id}/deactivate", response_model=TenantResponse, summary="Deactivate a tenant")
def deactivate_tenant(
     tenant_id: int,
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     tenant = entity_store.deactivate_tenant(db, ctx, tenant_id)
     db.commit()
     return tenant
