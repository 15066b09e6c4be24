from datetime import date
from fastapi import APIRouter, Depends
from typing import Optional

from ..backend import Backend
from ..dashboard import summarize
from ..db import get_backend
from ..schemas import DashboardSummary

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

@router.get("", response_model=DashboardSummary)
def dashboard(school: Optional[str] = None, q: Optional[str] = None, today: Optional[date] = None,
              backend: Backend = Depends(get_backend)):
    return summarize(backend, school=school, q=q, today=today)
