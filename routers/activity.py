# routers/activity.py
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_session
from schemas.activity import ActivityResponse
from services import entity_store
from services.entity_store import SessionContext
from utils.auth import get_current_context

router = APIRouter(prefix="/api/activity", tags=["activity"])


@router.get("/recent", response_model=List[ActivityResponse], summary="Recent activity")
def recent_activity(
     limit: int = Query(50, ge=1, le=500),
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     return entity_store.recent_activities(db, ctx, limit)
