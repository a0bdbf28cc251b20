"""Tests for OLT address table loading and resolution."""

import pytest

from app.services.olt.addresses import (
    AttributeAddress,
    load_address_table,
    validate_slot,
)
from app.services.olt.exceptions import AddressTableError, InvalidCoordinate


def test_bundled_table_covers_both_boards(address_table):
    assert len(address_table) == 16
    for board in (1, 2):
        for pon in range(1, 9):
            port = address_table.resolve(board, pon)
            assert (port.board, port.pon) == (board, pon)


def test_resolve_builds_identity_address(address_table):
    port = address_table.resolve(1, 1)
    assert port.identity.oid == ".1.3.6.1.4.1.3902.1012.3.28.1.1.2.285278465"
    assert port.identity.for_onu(5) == ".1.3.6.1.4.1.3902.1012.3.28.1.1.2.285278465.5"


def test_resolve_uses_secondary_base_and_suffix(address_table):
    port = address_table.resolve(2, 3)
    assert port.address("tx_power").for_onu(7) == (
        ".1.3.6.1.4.1.3902.1015.1010.11.4.1.2.285278723.7.1"
    )
    assert port.address("rx_power").for_onu(7).endswith(".285278723.7.1")
    assert port.address("status").for_onu(7).endswith(".285278723.7")


@pytest.mark.parametrize("board, pon", [(0, 1), (3, 1), (1, 0), (1, 9), (-1, -1)])
def test_resolve_rejects_out_of_range(address_table, board, pon):
    with pytest.raises(InvalidCoordinate):
        address_table.resolve(board, pon)


def test_resolve_rejects_pair_missing_from_table(tmp_path):
    path = tmp_path / "table.yaml"
    path.write_text(
        """
base_oids: {primary: ".1.2", secondary: ".1.3"}
attributes:
  identity: {base: primary, oid: ".1"}
  onu_type: {base: secondary, oid: ".2"}
  serial_number: {base: primary, oid: ".3"}
  rx_power: {base: primary, oid: ".4", suffix: ".1"}
  tx_power: {base: secondary, oid: ".5", suffix: ".1"}
  status: {base: primary, oid: ".6"}
  ip_address: {base: secondary, oid: ".7", suffix: ".1"}
  description: {base: primary, oid: ".8"}
  last_online: {base: primary, oid: ".9"}
  last_offline: {base: primary, oid: ".10"}
  offline_reason: {base: primary, oid: ".11"}
  optical_distance: {base: primary, oid: ".12"}
ports:
  - {board: 1, pon: 1, index: 100}
"""
    )
    table = load_address_table(path)
    assert table.resolve(1, 1).identity.oid == ".1.2.1.100"
    with pytest.raises(InvalidCoordinate):
        table.resolve(1, 2)


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(AddressTableError):
        load_address_table(tmp_path / "missing.yaml")


def test_load_rejects_unknown_base(tmp_path):
    path = tmp_path / "table.yaml"
    path.write_text(
        """
base_oids: {primary: ".1.2"}
attributes:
  identity: {base: other, oid: ".1"}
ports: []
"""
    )
    with pytest.raises(AddressTableError):
        load_address_table(path)


def test_load_rejects_non_mapping(tmp_path):
    path = tmp_path / "table.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(AddressTableError):
        load_address_table(path)


def test_attribute_address_without_suffix():
    assert AttributeAddress(".1.2.3").for_onu(9) == ".1.2.3.9"


@pytest.mark.parametrize("onu_id", [1, 64, 128])
def test_validate_slot_accepts_range(onu_id):
    assert validate_slot(onu_id) == onu_id


@pytest.mark.parametrize("onu_id", [0, 129, -5])
def test_validate_slot_rejects_out_of_range(onu_id):
    with pytest.raises(InvalidCoordinate):
        validate_slot(onu_id)
