from typing import List

from pydantic import BaseModel

from app.core.i18n import Notice

# --- Response Model returned by every write operation ---
class OperationResult(BaseModel):
    status: str          # "success" | "failed"
    message: str
    notices: List[Notice] = []   # secondary, low-priority notices (soft failures)

    @property
    def ok(self) -> bool:
        return self.status == "success"
