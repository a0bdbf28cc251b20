from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class OnuSummary(BaseModel):
    board: int
    pon: int
    onu_id: int
    name: str = ""
    onu_type: str = ""
    serial_number: str = ""
    rx_power: str = ""
    status: str = ""


class OnuDetail(OnuSummary):
    tx_power: str = ""
    ip_address: str = ""
    description: str = ""
    last_online: str = ""
    last_offline: str = ""
    uptime: str = ""
    last_down_time_duration: str = ""
    offline_reason: str = ""
    gpon_optical_distance: str = ""


class OnuSlot(BaseModel):
    board: int
    pon: int
    onu_id: int


class Page(BaseModel, Generic[T]):
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    page_count: int = Field(ge=0)
    total_rows: int = Field(ge=0)
    data: list[T] = Field(default_factory=list)


class WebResponse(BaseModel, Generic[T]):
    code: int
    status: str
    data: T


class PageResponse(BaseModel, Generic[T]):
    code: int
    status: str
    page: int
    limit: int
    page_count: int
    total_rows: int
    data: list[T]
