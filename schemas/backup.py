# schemas/backup.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class BackupResponse(BaseModel):
     name: str
     size: int
     date: datetime

     model_config = ConfigDict(from_attributes=True)


class RestoreResponse(BaseModel):
     success: bool
