# routers/dashboard.py
"""
Dashboard API routes: statistics, rent-due reminders, reminder e-mails and a
live statistics stream.

The stream (/api/dashboard/live?token=...) sends the current statistics on
connect and again after every commit touching shops, tenants, agreements,
payments or expenses.
"""
import asyncio
import logging
from datetime import datetime
from typing import List, Optional

import requests
from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool
from jose import JWTError
from sqlalchemy.orm import Session

import config
from database import get_change_feed, get_session
from schemas.dashboard import DashboardStatsResponse, RentDueReminderResponse, ReminderNotifyResponse
from services.aggregation_service import RentDueReminder, get_dashboard_stats, get_rent_due_reminders
from services.change_feed import ChangeFeed
from services.entity_store import SessionContext
from utils.auth import context_from_payload, decode_token, get_current_context
from utils.email import EmailDeliveryError, send_rent_reminder_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

LIVE_TABLES = ("shops", "tenants", "lease_agreements", "rent_payments", "expenses")


def _build_reminder_response(reminder: RentDueReminder) -> RentDueReminderResponse:
     return RentDueReminderResponse(
          agreement_id=reminder.agreement.id,
          agreement_number=reminder.agreement.agreement_number,
          shop_id=reminder.shop.id,
          shop_number=reminder.shop.shop_number,
          tenant_id=reminder.tenant.id,
          tenant_name=reminder.tenant.full_name,
          tenant_phone=reminder.tenant.phone_number,
          tenant_email=reminder.tenant.email,
          due_date=reminder.due_date,
          days_overdue=reminder.days_overdue,
          amount_due=reminder.amount_due,
          period=reminder.period
     )


@router.get("/stats", response_model=DashboardStatsResponse, summary="Dashboard statistics")
def dashboard_stats(db: Session = Depends(get_session), ctx: SessionContext = Depends(get_current_context)):
     return DashboardStatsResponse.model_validate(get_dashboard_stats(db, ctx))


@router.get("/reminders", response_model=List[RentDueReminderResponse], summary="Overdue rent reminders")
def rent_due_reminders(
     include_partial: Optional[bool] = Query(None, description="Also remind for partially paid periods"),
     upcoming_days: Optional[int] = Query(None, ge=0, description="Also remind for rent due within N days"),
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     reminders = get_rent_due_reminders(
          db, ctx,
          include_partial=include_partial,
          upcoming_window_days=upcoming_days
     )
     return [_build_reminder_response(r) for r in reminders]


@router.post("/reminders/notify", response_model=ReminderNotifyResponse, summary="E-mail overdue tenants")
def notify_overdue_tenants(db: Session = Depends(get_session), ctx: SessionContext = Depends(get_current_context)):
     """
     Send a Brevo e-mail to every tenant with an overdue reminder.
     Tenants without an e-mail address are skipped.
     """
     if not config.BREVO_API_KEY:
          raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="E-mail delivery is not configured")

     sent = skipped = failed = 0
     for reminder in get_rent_due_reminders(db, ctx, include_partial=False, upcoming_window_days=0):
          if not reminder.tenant.email:
               skipped += 1
               continue
          try:
               send_rent_reminder_email(
                    to_email=reminder.tenant.email,
                    tenant_name=reminder.tenant.full_name,
                    shop_number=reminder.shop.shop_number,
                    period=reminder.period,
                    amount_due=reminder.amount_due,
                    due_date=reminder.due_date,
                    days_overdue=reminder.days_overdue
               )
               sent += 1
          except (EmailDeliveryError, requests.RequestException) as e:
               logger.error("Reminder e-mail to %s failed: %s", reminder.tenant.email, e)
               failed += 1

     return ReminderNotifyResponse(sent=sent, skipped=skipped, failed=failed)


@router.websocket("/live")
async def live_dashboard(
     websocket: WebSocket,
     token: str = Query(...),
     feed: ChangeFeed = Depends(get_change_feed)
):
     try:
          payload = decode_token(token)
          ctx = await run_in_threadpool(feed.snapshot, lambda session: context_from_payload(session, payload))
     except (JWTError, HTTPException):
          await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
          return

     await websocket.accept()

     def project(session: Session) -> dict:
          stats = get_dashboard_stats(session, ctx, now=datetime.now())
          return DashboardStatsResponse.model_validate(stats).model_dump(mode="json")

     loop = asyncio.get_running_loop()
     updates: asyncio.Queue = asyncio.Queue()
     subscription = feed.subscribe(
          LIVE_TABLES,
          project,
          lambda stats: loop.call_soon_threadsafe(updates.put_nowait, stats)
     )

     async def push_updates():
          while True:
               await websocket.send_json(await updates.get())

     pusher = None
     try:
          await websocket.send_json(await run_in_threadpool(feed.snapshot, project))
          pusher = asyncio.create_task(push_updates())
          while True:
               await websocket.receive_text()
     except WebSocketDisconnect:
          logger.debug("Live dashboard client for user %s disconnected", ctx.user_id)
     finally:
          subscription.cancel()
          if pusher:
               pusher.cancel()
               try:
                    await pusher
               except asyncio.CancelledError:
                    pass
               except Exception:
                    logger.exception("Live dashboard push to user %s failed", ctx.user_id)
