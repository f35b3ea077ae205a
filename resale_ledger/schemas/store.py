from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class StoreCreate(BaseModel):
    name: Optional[str] = None


class StoreRead(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
