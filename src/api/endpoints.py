"""API endpoints for task management."""

from datetime import date, datetime
from typing import Dict, Any, Optional, Union

from fastapi import APIRouter, HTTPException, Depends, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field
from sqlalchemy import or_
from sqlalchemy.orm import Session

from config import Settings
from database import get_db
from models import Task
from recurrence import RecurrenceError, format_date, next_date, parse_date, parse_rule
from .auth import require_auth
from .dependencies import get_settings, get_today
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

# Search terms in these formats filter by date instead of text
SEARCH_DATE_FORMATS = ("%d.%m.%Y", "%Y%m%d")


# Pydantic models for request/response
class TaskCreate(BaseModel):
    date: str = ""
    title: str = Field("", max_length=255)
    comment: str = Field("", max_length=255)
    repeat: str = Field("", max_length=50)


class TaskUpdate(TaskCreate):
    id: Union[str, int] = ""


def _parse_task_id(raw: Union[str, int, None]) -> int:
    if raw is None or raw == "":
        raise HTTPException(status_code=400, detail="Task id is not specified")
    try:
        task_id = int(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid task id: '{raw}'")
    if task_id <= 0:
        raise HTTPException(status_code=400, detail=f"Invalid task id: '{raw}'")
    return task_id


def _parse_task_date(raw: str, today: date) -> date:
    if not raw:
        return today
    try:
        return parse_date(raw)
    except RecurrenceError:
        raise HTTPException(status_code=400, detail="Invalid date format, expected YYYYMMDD")


def _check_repeat(repeat: str):
    try:
        parse_rule(repeat)
    except RecurrenceError as e:
        logger.warning(f"Rejected repeat rule '{repeat}': {e}")
        raise HTTPException(status_code=400, detail="Invalid recurrence rule")


def _get_task_or_404(db: Session, task_id: int) -> Task:
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


def _search_date(search: str) -> Optional[str]:
    for fmt in SEARCH_DATE_FORMATS:
        try:
            return format_date(datetime.strptime(search, fmt).date())
        except ValueError:
            continue
    return None


# Task endpoints
@router.post("/task", dependencies=[Depends(require_auth)])
async def create_task(
    task: TaskCreate,
    db: Session = Depends(get_db),
    today: date = Depends(get_today)
):
    """
    Create a new task.

    **Body Parameters:**
    - title (str, required): Task title
    - date (str, optional): YYYYMMDD, defaults to today
    - comment (str, optional): Free text
    - repeat (str, optional): "d <n>" (1-400) or "y"

    A date in the past is moved to today for one-shot tasks and to the next
    occurrence after today for repeating tasks.

    **Responses:**
    - 200: `{"id": "<id>"}`
    - 400: Missing title, invalid date or invalid recurrence rule
    """
    if not task.title:
        raise HTTPException(status_code=400, detail="Task title is not specified")

    task_date = _parse_task_date(task.date, today)
    _check_repeat(task.repeat)

    stored_date = format_date(task_date)
    if task_date < today:
        if not task.repeat:
            stored_date = format_date(today)
        else:
            try:
                stored_date = next_date(today, stored_date, task.repeat)
            except RecurrenceError as e:
                logger.warning(f"Cannot schedule task '{task.title}': {e}")
                raise HTTPException(status_code=400, detail="Invalid recurrence rule")

    db_task = Task(
        date=stored_date,
        title=task.title,
        comment=task.comment,
        repeat=task.repeat
    )
    db.add(db_task)
    db.commit()
    db.refresh(db_task)

    logger.info(f"Created task '{db_task.title}' (ID: {db_task.id}) for {db_task.date}")
    return {"id": str(db_task.id)}


@router.get("/task", dependencies=[Depends(require_auth)])
async def get_task(task_id: Optional[str] = Query(None, alias="id"), db: Session = Depends(get_db)):
    """Get a specific task by ID."""
    task = _get_task_or_404(db, _parse_task_id(task_id))
    return task.to_dict()


@router.put("/task", dependencies=[Depends(require_auth)])
async def update_task(
    update: TaskUpdate,
    db: Session = Depends(get_db),
    today: date = Depends(get_today)
):
    """
    Replace a task's fields.

    **Responses:**
    - 200: `{}`
    - 400: Invalid id, missing title, invalid or past date, invalid recurrence rule
    - 404: Task not found
    """
    task_id = _parse_task_id(update.id)

    if not update.title:
        raise HTTPException(status_code=400, detail="Task title is not specified")

    task_date = _parse_task_date(update.date, today)
    if task_date < today:
        raise HTTPException(status_code=400, detail="Date cannot be earlier than today")

    _check_repeat(update.repeat)

    task = _get_task_or_404(db, task_id)
    task.date = format_date(task_date)
    task.title = update.title
    task.comment = update.comment
    task.repeat = update.repeat

    db.commit()

    logger.info(f"Updated task {task_id}")
    return {}


@router.delete("/task", dependencies=[Depends(require_auth)])
async def delete_task(task_id: Optional[str] = Query(None, alias="id"), db: Session = Depends(get_db)):
    """Delete a task."""
    task_id = _parse_task_id(task_id)
    task = _get_task_or_404(db, task_id)

    db.delete(task)
    db.commit()

    logger.info(f"Deleted task {task_id}")
    return {}


@router.post("/task/done", dependencies=[Depends(require_auth)])
async def complete_task(
    task_id: Optional[str] = Query(None, alias="id"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today)
):
    """
    Mark a task as done.

    A one-shot task is deleted. A repeating task keeps its record and moves
    to its next occurrence after today.

    **Responses:**
    - 200: `{}`
    - 400: Invalid id, or the stored recurrence rule cannot be applied
    - 404: Task not found
    """
    task_id = _parse_task_id(task_id)
    task = _get_task_or_404(db, task_id)

    if not task.is_recurring():
        db.delete(task)
        db.commit()
        logger.info(f"Completed one-shot task {task_id}, deleted")
        return {}

    try:
        new_date = next_date(today, task.date, task.repeat)
    except RecurrenceError as e:
        logger.warning(f"Cannot reschedule task {task_id}: {e}")
        raise HTTPException(status_code=400, detail="Cannot compute next date for the task")

    task.date = new_date
    db.commit()

    logger.info(f"Completed task {task_id}, next date {new_date}")
    return {}


@router.get("/tasks", dependencies=[Depends(require_auth)])
async def list_tasks(
    search: Optional[str] = Query(None, description="Date (DD.MM.YYYY or YYYYMMDD) or text to search for"),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> Dict[str, Any]:
    """List upcoming tasks ordered by date, optionally filtered by a search term."""
    query = db.query(Task)

    search = (search or "").strip()
    if search:
        search_date = _search_date(search)
        if search_date:
            query = query.filter(Task.date == search_date)
        else:
            pattern = f"%{search}%"
            query = query.filter(or_(Task.title.ilike(pattern), Task.comment.ilike(pattern)))

    tasks = query.order_by(Task.date, Task.id).limit(settings.tasks_limit).all()

    return {
        "tasks": [task.to_dict() for task in tasks]
    }


@router.get("/nextdate", response_class=PlainTextResponse)
async def get_next_date(
    now: str = Query(""),
    date: str = Query(""),
    repeat: str = Query("")
):
    """Next occurrence for a date and repeat rule as plain text; empty on any error."""
    try:
        return next_date(parse_date(now), date, repeat)
    except RecurrenceError as e:
        logger.debug(f"nextdate({now}, {date}, {repeat}) failed: {e}")
        return ""
