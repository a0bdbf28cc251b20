"""SNMP address resolution for OLT ports.

Maps a (board, pon) coordinate to the device addresses of every ONU
attribute on that port. The mapping is a single data-driven table loaded
from YAML; an unknown coordinate is always an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError, model_validator

from app.services.olt.exceptions import AddressTableError, InvalidCoordinate

logger = logging.getLogger(__name__)

VALID_BOARDS = frozenset({1, 2})
VALID_PONS = frozenset(range(1, 9))
MIN_ONU_ID = 1
MAX_ONU_ID = 128

DEFAULT_ADDRESS_TABLE_PATH = Path(__file__).with_name("olt_c320.yaml")

SUMMARY_ATTRIBUTES = ("onu_type", "serial_number", "rx_power", "status")
DETAIL_ATTRIBUTES = SUMMARY_ATTRIBUTES + (
    "tx_power",
    "ip_address",
    "description",
    "last_online",
    "last_offline",
    "offline_reason",
    "optical_distance",
)
REQUIRED_ATTRIBUTES = ("identity",) + DETAIL_ATTRIBUTES


# ---------------------------------------------------------------------------
# File schema
# ---------------------------------------------------------------------------


class AttributeEntry(BaseModel):
    base: str
    oid: str
    suffix: str = ""


class PortEntry(BaseModel):
    board: int
    pon: int
    index: int


class AddressTableFile(BaseModel):
    base_oids: dict[str, str]
    attributes: dict[str, AttributeEntry]
    ports: list[PortEntry]

    @model_validator(mode="after")
    def _check_references(self) -> "AddressTableFile":
        missing = [name for name in REQUIRED_ATTRIBUTES if name not in self.attributes]
        if missing:
            raise ValueError(f"missing attributes: {', '.join(missing)}")
        for name, attr in self.attributes.items():
            if attr.base not in self.base_oids:
                raise ValueError(f"attribute {name} references unknown base {attr.base!r}")
        seen: set[tuple[int, int]] = set()
        for port in self.ports:
            key = (port.board, port.pon)
            if key in seen:
                raise ValueError(f"duplicate port board={port.board} pon={port.pon}")
            seen.add(key)
        return self


# ---------------------------------------------------------------------------
# Resolved addresses
# ---------------------------------------------------------------------------


def _join_oid(*parts: str) -> str:
    joined = ".".join(part.strip(".") for part in parts if part and part.strip("."))
    return f".{joined}"


@dataclass(frozen=True)
class AttributeAddress:
    """Table address of one attribute on one port."""

    oid: str
    suffix: str = ""

    def for_onu(self, onu_id: int) -> str:
        """Return the instance address of this attribute for one ONU."""
        return f"{self.oid}.{onu_id}{self.suffix}"


@dataclass(frozen=True)
class PortAddress:
    """Device addresses of every ONU attribute on a (board, pon) port."""

    board: int
    pon: int
    attributes: dict[str, AttributeAddress]

    @property
    def identity(self) -> AttributeAddress:
        return self.attributes["identity"]

    def address(self, attribute: str) -> AttributeAddress:
        return self.attributes[attribute]

    def instance_addresses(self, onu_id: int, attributes: tuple[str, ...]) -> dict[str, str]:
        """Map attribute name to the instance address for ``onu_id``."""
        return {name: self.attributes[name].for_onu(onu_id) for name in attributes}


class AddressTable:
    """Lookup table of port addresses keyed by (board, pon)."""

    def __init__(self, ports: dict[tuple[int, int], PortAddress]):
        self._ports = dict(ports)

    @classmethod
    def from_file(cls, table_file: AddressTableFile) -> "AddressTable":
        ports: dict[tuple[int, int], PortAddress] = {}
        for port in table_file.ports:
            attributes = {
                name: AttributeAddress(
                    oid=_join_oid(table_file.base_oids[attr.base], attr.oid, str(port.index)),
                    suffix=attr.suffix,
                )
                for name, attr in table_file.attributes.items()
            }
            ports[(port.board, port.pon)] = PortAddress(
                board=port.board, pon=port.pon, attributes=attributes
            )
        return cls(ports)

    def __len__(self) -> int:
        return len(self._ports)

    def resolve(self, board: int, pon: int) -> PortAddress:
        """Return the addresses for a port.

        Raises:
            InvalidCoordinate: board or pon outside the valid domain, or the
                pair is not present in the table.
        """
        if board not in VALID_BOARDS:
            raise InvalidCoordinate(f"board_id must be one of {sorted(VALID_BOARDS)}")
        if pon not in VALID_PONS:
            raise InvalidCoordinate(
                f"pon_id must be between {min(VALID_PONS)} and {max(VALID_PONS)}"
            )
        port = self._ports.get((board, pon))
        if port is None:
            raise InvalidCoordinate(f"no address table entry for board {board} pon {pon}")
        return port


def validate_slot(onu_id: int) -> int:
    if not MIN_ONU_ID <= onu_id <= MAX_ONU_ID:
        raise InvalidCoordinate(f"onu_id must be between {MIN_ONU_ID} and {MAX_ONU_ID}")
    return onu_id


def load_address_table(path: str | Path | None = None) -> AddressTable:
    """Load and validate an address table YAML file.

    Args:
        path: File to read. Defaults to the bundled C320 table.

    Returns:
        AddressTable ready for lookups.

    Raises:
        AddressTableError: File missing, unreadable or structurally invalid.
    """
    table_path = Path(path) if path else DEFAULT_ADDRESS_TABLE_PATH
    try:
        with open(table_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as exc:
        raise AddressTableError(f"cannot read address table {table_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise AddressTableError(f"invalid YAML in {table_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise AddressTableError(f"address table {table_path} must be a mapping")
    try:
        table_file = AddressTableFile.model_validate(raw)
    except ValidationError as exc:
        raise AddressTableError(f"invalid address table {table_path}: {exc}") from exc

    table = AddressTable.from_file(table_file)
    logger.info("Loaded OLT address table %s with %d ports", table_path, len(table))
    return table
