from typing import Optional
from stringdesk.racquets.descriptor import StringingSnapshot
from stringdesk.racquets.schemas import RacquetResponse


class CustomerRacquetResponse(RacquetResponse):
    brand_name: Optional[str] = None
    model_name: Optional[str] = None
    last_stringing: Optional[StringingSnapshot] = None
