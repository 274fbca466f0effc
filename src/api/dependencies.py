"""FastAPI dependencies shared by the API routers."""

from datetime import date

from fastapi import Request

from config import Settings


def get_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_today() -> date:
    """Current local date, used as the reference for recurrence and date checks."""
    return date.today()
