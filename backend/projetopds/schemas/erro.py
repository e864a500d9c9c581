from datetime import datetime

from pydantic import BaseModel


class ErroResponse(BaseModel):
    timestamp: datetime
    status: int
    error: str
    code: str
    message: str
