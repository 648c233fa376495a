# routers/expenses.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from schemas.expense import ExpenseCreate, ExpenseResponse
from services import entity_store
from services.entity_store import SessionContext
from utils.auth import get_current_context

router = APIRouter(prefix="/api/expenses", tags=["expenses"])


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED, summary="Record an expense")
def create_expense(
     expense_data: ExpenseCreate,
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     expense = entity_store.create_expense(db, ctx, **expense_data.model_dump(exclude_none=True))
     db.commit()
     db.refresh(expense)
     return expense


@router.get("", response_model=List[ExpenseResponse], summary="List expenses")
def list_expenses(
     shop_id: Optional[int] = Query(None, description="Filter by shop ID"),
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     return entity_store.list_expenses(db, shop_id)
