from __future__ import annotations

import pytest

from ink_wrapper_types import (AccountId, ContractEvent, ContractEvents,
                               ContractInstance, DecodeError, Err, ExecCall,
                               ExecCallNeedsValue, InstantiateCall,
                               InstantiateCallNeedsValue, Ok, ReadCall,
                               TxStatus, UploadCall, scale)
from ink_wrapper_types.connection import require_value

CODE_HASH = bytes(range(32))
ALICE = AccountId(b"\x01" * 32)
BOB = AccountId(b"\x02" * 32)


# ---------- call values ----------


def test_instantiate_builders():
    call = InstantiateCall(CODE_HASH, b"\x00", AccountId)
    assert call.tx_status is TxStatus.FINALIZED
    salted = call.with_salt(b"s")
    assert salted.salt == b"s" and call.salt == b""
    assert call.with_tx_status("in_block").tx_status is TxStatus.IN_BLOCK


def test_instantiate_rejects_bad_code_hash():
    with pytest.raises(ValueError, match="32 bytes"):
        InstantiateCall(b"\x00", b"", AccountId)


def test_needs_value():
    call = InstantiateCallNeedsValue(CODE_HASH, b"\x01", AccountId).with_salt(b"x")
    funded = call.with_value(100)
    assert funded == InstantiateCall(CODE_HASH, b"\x01", AccountId, salt=b"x", value=100)
    exec_call = ExecCallNeedsValue(ALICE, b"\x02").with_value(1)
    assert exec_call == ExecCall(ALICE, b"\x02", value=1)


@pytest.mark.parametrize("value", [-1, 1 << 128, True, 1.5])
def test_value_must_be_u128(value):
    with pytest.raises(ValueError, match="u128"):
        ExecCallNeedsValue(ALICE, b"").with_value(value)


def test_exec_coerces_account_id():
    call = ExecCall(b"\x01" * 32, b"\x00")
    assert isinstance(call.account_id, AccountId)
    assert call.with_tx_status(TxStatus.SUBMITTED).tx_status is TxStatus.SUBMITTED


def test_exec_as_read():
    codec = scale.ResultCodec(scale.U32, scale.UNIT)
    call = ExecCallNeedsValue(ALICE, b"\x07", codec).with_value(2)
    read = call.as_read()
    assert read == ReadCall(ALICE, b"\x07", codec, value=2)
    assert read.decode(b"\x00\x01\x00\x00\x00") == Ok(1)
    with pytest.raises(TypeError, match="no return codec"):
        ExecCall(ALICE, b"").as_read()


def test_read_call():
    call = ReadCall(ALICE, b"\x00", scale.ResultCodec(scale.U32, scale.UNIT))
    assert call.decode(b"\x00\x05\x00\x00\x00") == Ok(5)
    assert call.with_value(3).value == 3


def test_upload_call():
    call = UploadCall(b"\x00asm", CODE_HASH)
    assert call.with_tx_status(TxStatus.IN_BLOCK).tx_status is TxStatus.IN_BLOCK
    assert "asm" not in repr(call)


def test_require_value():
    require_value(ExecCall(ALICE, b""))
    with pytest.raises(TypeError, match="with_value"):
        require_value(ExecCallNeedsValue(ALICE, b""))
    with pytest.raises(TypeError, match="with_value"):
        require_value(InstantiateCallNeedsValue(CODE_HASH, b"", AccountId))


# ---------- results ----------


def test_result_helpers():
    assert Ok(1).unwrap() == 1 and Ok(1).is_ok()
    assert Err("e").unwrap_err() == "e" and Err("e").is_err()
    with pytest.raises(ValueError):
        Err("e").unwrap()
    with pytest.raises(KeyError):
        Err(KeyError("k")).unwrap()
    with pytest.raises(ValueError):
        Ok(1).unwrap_err()


# ---------- instances ----------


class Counter(ContractInstance):
    Event = scale.U8


class Other(ContractInstance):
    pass


def test_instance_identity():
    a = Counter(ALICE)
    assert a == Counter(bytes(ALICE))
    assert a != Other(ALICE)
    assert bytes(a) == bytes(ALICE)
    assert len({a, Counter(ALICE)}) == 1
    assert repr(a) == f"Counter({ALICE})"


# ---------- events ----------


def test_for_contract_filters_and_decodes():
    events = ContractEvents(
        [
            ContractEvent(ALICE, b"\x01"),
            ContractEvent(BOB, b"\x02"),
            ContractEvent(ALICE, b"\x03\x04"),
            ContractEvent(ALICE, b"\x05"),
        ]
    )
    decoded = events.for_contract(Counter(ALICE))
    assert len(decoded) == 3
    assert decoded[0] == Ok(1)
    assert isinstance(decoded[1], Err) and isinstance(decoded[1].error, DecodeError)
    assert decoded[2] == Ok(5)
    assert len(events) == 4


def test_for_contract_needs_event_type():
    with pytest.raises(TypeError, match="no Event"):
        ContractEvents().for_contract(Other(ALICE))


def test_from_iterable():
    events = ContractEvents.from_iterable(ContractEvent(ALICE, b"") for _ in range(2))
    assert [e.account_id for e in events] == [ALICE, ALICE]


class VecKeyed(ContractInstance):
    Event = scale.MapCodec(scale.SequenceCodec(scale.U32), scale.U8)


def test_for_contract_decodes_sequence_keyed_maps():
    events = ContractEvents([ContractEvent(ALICE, bytes([4, 4, 1, 0, 0, 0, 5])), ContractEvent(ALICE, b"\x04")])
    decoded = events.for_contract(VecKeyed(ALICE))
    assert decoded[0] == Ok({(1,): 5})
    assert isinstance(decoded[1], Err) and isinstance(decoded[1].error, DecodeError)
