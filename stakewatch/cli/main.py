# MIT License
# Copyright (c) 2025 Hashborn

import argparse
import base64
import binascii
import json
import logging
import sys
from ..protocol.codec.layout import decode_stake_account, decode_stake_account_info, decode_stake_history
from ..protocol.config.params import LAMPORTS_PER_SOL, DENOM
from ..protocol.types.common import ProtocolError
from ..blockchain.core.stake_history import get_stake_history_entry
from ..blockchain.core.status import get_stake_activation

logger = logging.getLogger(__name__)

def _decode_b64(value: str, what: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        print(f"Error: {what} is not valid base64")
        sys.exit(1)

def _print_json(data):
    # Pubkeys and other raw byte fields are shown as hex
    print(json.dumps(data, indent=2, default=lambda o: o.hex() if isinstance(o, bytes) else str(o)))

# --- Decode Commands ---
def cmd_decode_account(args):
    data = _decode_b64(args.data, "account data")
    try:
        if args.lamports is not None:
            decoded = decode_stake_account_info(data, args.lamports)
        else:
            decoded = decode_stake_account(data)
    except (ProtocolError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    _print_json(decoded.model_dump())

def cmd_decode_history(args):
    data = _decode_b64(args.data, "stake history data")
    try:
        entries = decode_stake_history(data)
    except ProtocolError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.epoch is not None:
        entry = get_stake_history_entry(args.epoch, entries)
        if not entry:
            print(f"Epoch {args.epoch} not in stake history.")
            sys.exit(1)
        _print_json(entry.model_dump())
        return

    logger.debug(f"Decoded {len(entries)} stake history entries")
    _print_json([e.model_dump() for e in entries])

# --- Activation Commands ---
def cmd_activation(args):
    account_data = _decode_b64(args.account, "account data")
    history_data = _decode_b64(args.history, "stake history data")
    try:
        activation = get_stake_activation(account_data, history_data, args.epoch, args.lamports)
    except (ProtocolError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.human:
        print(f"Status:   {activation.status.value}")
        print(f"Active:   {activation.active / LAMPORTS_PER_SOL} {DENOM}")
        print(f"Inactive: {activation.inactive / LAMPORTS_PER_SOL} {DENOM}")
        return
    _print_json(activation.model_dump(mode="json"))

def main(argv=None):
    parser = argparse.ArgumentParser(description="Stake activation inspector")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    p_decode = subparsers.add_parser("decode-account", help="Decode stake account data")
    p_decode.add_argument("data", help="Base64 account data")
    p_decode.add_argument("--lamports", type=int, default=None, help="Account balance to include")

    p_history = subparsers.add_parser("decode-history", help="Decode stake history sysvar data")
    p_history.add_argument("data", help="Base64 sysvar data")
    p_history.add_argument("--epoch", type=int, default=None, help="Show a single epoch")

    p_act = subparsers.add_parser("activation", help="Resolve stake activation status")
    p_act.add_argument("--account", required=True, help="Base64 stake account data")
    p_act.add_argument("--history", required=True, help="Base64 stake history sysvar data")
    p_act.add_argument("--epoch", type=int, required=True, help="Current epoch")
    p_act.add_argument("--lamports", type=int, required=True, help="Stake account balance in lamports")
    p_act.add_argument("--human", action="store_true", help=f"Print amounts in {DENOM}")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    if args.command == "decode-account":
        cmd_decode_account(args)
    elif args.command == "decode-history":
        cmd_decode_history(args)
    elif args.command == "activation":
        cmd_activation(args)
    else:
        parser.print_help()

if __name__ == "__main__":
    main()
