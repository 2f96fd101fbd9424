from typing import List, Optional

from pydantic import BaseModel

class CheckoutRequest(BaseModel):
    booking_id: str
    has_issues: bool = False
    report_category: str = "equipment"
    report_description: Optional[str] = None
    attachments: List[str] = []

class PermitSubmission(BaseModel):
    booking_ids: List[str] = []
    lending_ids: List[str] = []
    attachments: List[str] = []
