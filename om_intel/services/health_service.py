from datetime import datetime, timezone
from typing import Optional

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from om_intel.core.config import settings
from om_intel.schemas.health import HealthOut

HEALTHY = 'healthy'
UNHEALTHY = 'unhealthy'
ERROR = 'error'


def check_database(session: Session) -> tuple[str, Optional[str]]:
    try:
        session.connection().execute(text('SELECT 1'))
    except SQLAlchemyError as exc:
        logger.warning('health.database_failed', error=str(exc))
        return ERROR, str(exc) or exc.__class__.__name__
    return HEALTHY, None


def collect_health(session: Session) -> HealthOut:
    database, detail = check_database(session)
    details = {'database': detail} if detail else {}
    services = {'database': database}
    overall = HEALTHY if all(value == HEALTHY for value in services.values()) else UNHEALTHY
    return HealthOut(
        status=overall,
        timestamp=datetime.now(timezone.utc),
        version=settings.VERSION,
        services=services,
        details=details,
    )
