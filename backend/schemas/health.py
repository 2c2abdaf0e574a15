from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: Literal["healthy", "degraded"]
    version: str
    database: Literal["connected", "disconnected"]
    timestamp: datetime
