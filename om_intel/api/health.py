from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlmodel import Session

from om_intel.db.session import get_session
from om_intel.schemas.health import HealthOut
from om_intel.services.health_service import HEALTHY, collect_health

router = APIRouter(prefix='/health', tags=['health'])


@router.get('', response_model=HealthOut, responses={503: {'model': HealthOut}})
def health(session: Session = Depends(get_session)):
    report = collect_health(session)
    if report.status != HEALTHY:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=report.model_dump(mode='json'),
        )
    return report
