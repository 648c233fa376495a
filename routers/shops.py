# routers/shops.py
"""
Shop API routes for LeaseHub.

Shops are created VACANT; their status then follows their agreements.
DELETE is a hard delete that cascades to agreements, payments and expenses;
use /deactivate for the usual soft delete.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from models import ShopStatus
from schemas.agreement import AgreementResponse
from schemas.shop import ShopCreate, ShopUpdate, ShopStatusUpdate, ShopResponse
from services import entity_store
from services.entity_store import SessionContext
from services.exceptions import NotFoundError
from utils.auth import get_current_context

router = APIRouter(prefix="/api/shops", tags=["shops"])


@router.post("", response_model=ShopResponse, status_code=status.HTTP_201_CREATED, summary="Add a shop")
def create_shop(
     shop_data: ShopCreate,
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     shop = entity_store.create_shop(db, ctx, **shop_data.model_dump(exclude_none=True))
     db.commit()
     db.refresh(shop)
     return shop


@router.get("", response_model=List[ShopResponse], summary="List active shops")
def list_shops(
     status: Optional[ShopStatus] = Query(None, description="Filter by status"),
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     return entity_store.list_shops(db, ctx, status)


@router.get("/{shop_id}", response_model=ShopResponse, summary="Get a shop")
def get_shop(shop_id: int, db: Session = Depends(get_session), ctx: SessionContext = Depends(get_current_context)):
     return entity_store.get_shop(db, ctx, shop_id)


@router.put("/{shop_id}", response_model=ShopResponse, summary="Update a shop")
def update_shop(
     shop_id: int,
     shop_data: ShopUpdate,
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     shop = entity_store.update_shop(db, ctx, shop_id, **shop_data.model_dump(exclude_unset=True))
     db.commit()
     db.refresh(shop)
     return shop


@router.patch("/{shop_id}/status", response_model=ShopResponse, summary="Set shop status")
def update_shop_status(
     shop_id: int,
     body: ShopStatusUpdate,
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     """
     Set VACANT, UNDER_MAINTENANCE or RESERVED.

     Rejected with **409** while the shop has an active agreement, and for
     OCCUPIED on a shop without one.
     """
     return entity_store.update_shop_status(db, ctx, shop_id, body.status)


@router.patch("/{shop_id}/deactivate", response_model=ShopResponse, summary="Soft delete a shop")
def deactivate_shop(shop_id: int, db: Session = Depends(get_session), ctx: SessionContext = Depends(get_current_context)):
     shop = entity_store.deactivate_shop(db, ctx, shop_id)
     db.commit()
     return shop


@router.delete("/{shop_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a shop and everything under it")
def delete_shop(shop_id: int, db: Session = Depends(get_session), ctx: SessionContext = Depends(get_current_context)):
     entity_store.delete_shop(db, ctx, shop_id)
     db.commit()


@router.get("/{shop_id}/active-agreement", response_model=AgreementResponse, summary="Active agreement of a shop")
def get_active_agreement(
     shop_id: int,
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     shop = entity_store.get_shop(db, ctx, shop_id)
     agreement = entity_store.active_agreement_for_shop(db, shop.id)
     if not agreement:
          raise NotFoundError(f"Shop '{shop.shop_number}' has no active agreement")
     return agreement
