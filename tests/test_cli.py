# MIT License
# Copyright (c) 2025 Hashborn

import base64
import json
import pytest
from stakewatch.cli.main import main
from stakewatch.protocol.codec.layout import encode_stake_account, encode_stake_history
from stakewatch.protocol.types.common import StakeStateKind
from stakewatch.protocol.types.stake import Delegation, Meta, Stake, StakeAccount, StakeHistoryEntry

RENT_EXEMPT_RESERVE = 2_282_880
STAKE = 3_000_000_000


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


@pytest.fixture
def account_b64():
    account = StakeAccount(
        discriminant=StakeStateKind.STAKE,
        meta=Meta(rent_exempt_reserve=RENT_EXEMPT_RESERVE),
        stake=Stake(delegation=Delegation(voter_pubkey=b"\xab" * 32, stake=STAKE, activation_epoch=100)),
    )
    return b64(encode_stake_account(account))


@pytest.fixture
def history_b64():
    return b64(encode_stake_history([
        StakeHistoryEntry(epoch=101, effective=10**17, activating=10**15, deactivating=0),
        StakeHistoryEntry(epoch=100, effective=10**17, activating=STAKE, deactivating=0),
    ]))


def test_activation_json(capsys, account_b64, history_b64):
    main([
        "activation",
        "--account", account_b64,
        "--history", history_b64,
        "--epoch", "105",
        "--lamports", str(STAKE + RENT_EXEMPT_RESERVE),
    ])

    out = json.loads(capsys.readouterr().out)
    assert out == {"status": "active", "active": STAKE, "inactive": 0}


def test_activation_human(capsys, account_b64, history_b64):
    main([
        "activation",
        "--account", account_b64,
        "--history", history_b64,
        "--epoch", "100",
        "--lamports", str(STAKE + RENT_EXEMPT_RESERVE),
        "--human",
    ])

    out = capsys.readouterr().out
    assert "Status:   activating" in out
    assert "Inactive: 3.0 SOL" in out


def test_decode_account(capsys, account_b64):
    main(["decode-account", account_b64, "--lamports", "5"])

    out = json.loads(capsys.readouterr().out)
    assert out["lamports"] == 5
    assert out["data"]["discriminant"] == 2
    assert out["data"]["stake"]["delegation"]["voter_pubkey"] == "ab" * 32
    assert out["data"]["meta"]["rent_exempt_reserve"] == RENT_EXEMPT_RESERVE


def test_decode_history_single_epoch(capsys, history_b64):
    main(["decode-history", history_b64, "--epoch", "101"])

    out = json.loads(capsys.readouterr().out)
    assert out == {"epoch": 101, "effective": 10**17, "activating": 10**15, "deactivating": 0}


def test_decode_history_missing_epoch(capsys, history_b64):
    with pytest.raises(SystemExit) as exc:
        main(["decode-history", history_b64, "--epoch", "7"])

    assert exc.value.code == 1
    assert "not in stake history" in capsys.readouterr().out


def test_malformed_account_exits(capsys, history_b64):
    with pytest.raises(SystemExit) as exc:
        main([
            "activation",
            "--account", b64(b"\x02\x00\x00\x00"),
            "--history", history_b64,
            "--epoch", "1",
            "--lamports", "1",
        ])

    assert exc.value.code == 1
    assert "Error: Stake account too small" in capsys.readouterr().out


def test_invalid_base64_exits(capsys):
    with pytest.raises(SystemExit):
        main(["decode-history", "not base64!"])

    assert "not valid base64" in capsys.readouterr().out


def test_decode_account_rejects_negative_lamports(capsys, account_b64):
    with pytest.raises(SystemExit) as exc:
        main(["decode-account", account_b64, "--lamports", "-5"])

    assert exc.value.code == 1
    assert "Error:" in capsys.readouterr().out


def test_decode_account_without_lamports(capsys, account_b64):
    main(["decode-account", account_b64])

    out = json.loads(capsys.readouterr().out)
    assert "lamports" not in out
    assert out["discriminant"] == 2
