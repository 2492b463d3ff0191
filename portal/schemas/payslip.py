from pydantic import BaseModel
from typing import Optional

class Payslip(BaseModel):
    employee_name: str
    period: str
    gross: float
    tax: float
    deductions: float
    net: float
    notes: Optional[str] = None
