from fastapi import APIRouter, Depends, Query

from salon_api.routes.appointment_routes import get_scheduler, parse_date_query
from salon_api.scheduling.aggregation import Granularity, RevenueReport
from salon_api.scheduling.dates import today
from salon_api.scheduling.scheduler import AppointmentScheduler

router = APIRouter(tags=['reports'])


@router.get('/revenue', response_model=RevenueReport)
def get_revenue_report(
    granularity: Granularity = Query(default=Granularity.MONTHLY),
    reference_date: str | None = Query(default=None),
    scheduler: AppointmentScheduler = Depends(get_scheduler),
):
    reference = parse_date_query(reference_date) if reference_date else today()
    return scheduler.revenue_report(granularity, reference)
