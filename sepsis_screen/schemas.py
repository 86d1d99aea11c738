from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .risk_engine import Observation


class ReadingIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    name: Optional[str] = None
    location: Optional[str] = None
    respiratory_rate: Optional[float] = Field(default=None, alias="respiratoryRate")
    systolic_bp: Optional[float] = Field(default=None, alias="systolicBP")
    mental_status: Optional[str] = Field(default=None, alias="mentalStatus")
    timestamp: Optional[datetime] = None

    def is_complete(self) -> bool:
        return (
            self.respiratory_rate is not None
            and self.systolic_bp is not None
            and bool(self.mental_status)
            and self.timestamp is not None
        )

    def observation(self) -> Observation:
        return Observation(self.respiratory_rate, self.systolic_bp, self.mental_status)
