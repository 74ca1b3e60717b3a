"""
Events router — calendar of programmes, exams and holidays.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends

from madrasah.core.dependencies import first_row, repository
from madrasah.repositories.events import EventRepository
from madrasah.schemas.events import EventForm
from madrasah.services.stats import event_counts
from madrasah.utils.response import success_response

router = APIRouter(prefix="/api/events", tags=["Events"])


@router.get("")
async def list_events(
    on_date: Optional[date] = None,
    repo: EventRepository = Depends(repository(EventRepository)),
):
    events = repo.list()
    day = on_date.isoformat() if on_date else None
    return success_response(data={
        "events": events,
        "on_date": [e for e in events if e.get("start_date") == day] if day else [],
        "counts": event_counts(events),
    })


@router.post("")
async def create_event(body: EventForm, repo: EventRepository = Depends(repository(EventRepository))):
    event = first_row(repo.create(body.to_record()), "Event")
    return success_response(data=event, message="ইভেন্ট যোগ করা হয়েছে")


@router.put("/{row_id}")
async def update_event(row_id: str, body: EventForm, repo: EventRepository = Depends(repository(EventRepository))):
    event = first_row(repo.update(row_id, body.to_record()), "Event")
    return success_response(data=event, message="ইভেন্ট আপডেট হয়েছে")


@router.delete("/{row_id}")
async def delete_event(row_id: str, repo: EventRepository = Depends(repository(EventRepository))):
    first_row(repo.delete(row_id), "Event")
    return success_response(message="ইভেন্ট মুছে ফেলা হয়েছে")
