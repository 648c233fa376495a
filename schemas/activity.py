# schemas/activity.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class ActivityResponse(BaseModel):
     id: int
     message: str
     timestamp: datetime

     model_config = ConfigDict(from_attributes=True)
