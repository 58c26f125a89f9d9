from datetime import datetime
from typing import Optional

from pydantic import BaseModel

REPORT_STATUSES = ("RASCUNHO", "EM ANDAMENTO", "CONCLUIDO", "CANCELADO")
DEFAULT_REPORT_STATUS = "RASCUNHO"


def short_id(value: str) -> str:
    return f"[ID: {value[:8]}...]"


class Customer(BaseModel):
    id: str
    name: str = ""
    document: str = ""
    phone: str = ""
    mobile: str = ""
    email: str = ""
    address: str = ""
    number: str = ""
    complement: str = ""
    city: str = ""
    state: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: Optional[datetime] = None

    @property
    def coordinates(self) -> Optional[tuple[float, float]]:
        if self.latitude is None or self.longitude is None:
            return None
        return (self.latitude, self.longitude)


class Machine(BaseModel):
    id: str
    customer_id: str = ""
    manufacturer: str = ""
    model: str = ""
    serial_number: str = ""
    identification: str = ""
    configuration_code: str = ""
    manufacture_year: Optional[int] = None
    active: bool = True
    created_at: Optional[datetime] = None

    @property
    def is_orphan(self) -> bool:
        return not self.customer_id

    @property
    def label(self) -> str:
        return f"{self.manufacturer} {self.model}".strip()


class ServiceReport(BaseModel):
    id: str
    path: Optional[str] = None
    customer_id: str = ""
    machine_id: str = ""
    title: str = ""
    description: str = ""
    contact: str = ""
    status: str = DEFAULT_REPORT_STATUS
    technician_id: str = ""
    technician_name: str = ""
    service_date: Optional[datetime] = None
    next_preventive_date: Optional[str] = None
    hours_to_next_preventive: Optional[int] = None
    hourly_rate: Optional[float] = None
    travel_km: Optional[float] = None
    start_time: str = ""
    end_time: str = ""
    notes: str = ""
    created_at: Optional[datetime] = None


class Paint(BaseModel):
    code: str
    description: str = ""
    manufacturer: str = ""
    color_hex: str = ""

    @property
    def id(self) -> str:
        return self.code


class Solvent(BaseModel):
    code: str
    description: str = ""
    manufacturer: str = ""

    @property
    def id(self) -> str:
        return self.code
