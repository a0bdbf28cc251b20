"""
ONU Telemetry API Endpoints

Read-only views of the ONUs attached to an OLT PON port:
- ONU list per port (optionally paginated)
- Single ONU detail
- Free ONU ids per port
"""
from fastapi import APIRouter, Depends, Query

from app.api.deps import get_onu_service
from app.schemas.onu import (
    OnuDetail,
    OnuSlot,
    OnuSummary,
    PageResponse,
    WebResponse,
)
from app.services.olt.service import OnuService

router = APIRouter(prefix="/board/{board_id}", tags=["onu"])


def _ok(data):
    return {"code": 200, "status": "OK", "data": data}


@router.get("/pon/{pon_id}", response_model=WebResponse[list[OnuSummary]])
def list_onus(
    board_id: int,
    pon_id: int,
    service: OnuService = Depends(get_onu_service),
):
    """List every ONU registered on a PON port."""
    return _ok(service.list_by_port(board_id, pon_id))


@router.get("/pon/{pon_id}/onu/{onu_id}", response_model=WebResponse[OnuDetail])
def get_onu(
    board_id: int,
    pon_id: int,
    onu_id: int,
    service: OnuService = Depends(get_onu_service),
):
    """Get the detail view of one ONU."""
    return _ok(service.detail_by_port_and_slot(board_id, pon_id, onu_id))


@router.get("/pon/{pon_id}/onu_id/empty", response_model=WebResponse[list[OnuSlot]])
def list_free_onu_ids(
    board_id: int,
    pon_id: int,
    service: OnuService = Depends(get_onu_service),
):
    """List ONU ids not yet registered on a PON port."""
    slots = service.free_slots(board_id, pon_id)
    return _ok([OnuSlot(board=board_id, pon=pon_id, onu_id=slot) for slot in slots])


@router.get("/page/pon/{pon_id}", response_model=PageResponse[OnuSummary])
def list_onus_paged(
    board_id: int,
    pon_id: int,
    page: int = Query(1),
    limit: int = Query(0),
    service: OnuService = Depends(get_onu_service),
):
    """List ONUs on a PON port one page at a time."""
    result = service.paged_list_by_port(board_id, pon_id, page, limit)
    return {"code": 200, "status": "OK", **result.model_dump()}
