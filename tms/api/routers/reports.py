"""Report endpoints."""

from fastapi import APIRouter, Depends

from tms.api.dependencies import get_engine
from tms.engine import TransportEngine
from tms.reports.dashboard import DashboardStats

router = APIRouter()


@router.get("/dashboard", response_model=DashboardStats)
def get_dashboard(engine: TransportEngine = Depends(get_engine)):
    """Headline numbers, distributions and on-time rate."""
    return engine.dashboard()
