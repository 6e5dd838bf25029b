from datetime import datetime

from pydantic import BaseModel


class HealthOut(BaseModel):
    status: str
    timestamp: datetime
    version: str
    services: dict[str, str]
    details: dict[str, str] = {}
