#!/usr/bin/env python3
"""
Voucher Signing Script

Creates a redemption voucher signed by the sale signer and prints it as JSON,
ready to be posted to /api/v1/vouchers/redeem.

Usage:
    python sign_voucher.py --private-key 0x... --redeemer 0x... --price 100 \
        --amount 1 --chain-id 31337 --contract 0x5FbDB2315678afecb367f032d93F642f64180aa3
    python sign_voucher.py ... --data 0xdeadbeef
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from eth_keys.exceptions import ValidationError as KeyValidationError

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.voucher import SigningDomain, Voucher
from services.voucher_signing import sign_voucher


def _hex_bytes(value: str) -> bytes:
    text = value[2:] if value.startswith(("0x", "0X")) else value
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid hex value: {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sign a lazy-mint redemption voucher")
    parser.add_argument("--private-key", required=True, help="Signer private key (hex)")
    parser.add_argument("--redeemer", required=True, help="Address allowed to redeem")
    parser.add_argument("--price", type=int, required=True, help="Exact price in wei")
    parser.add_argument("--amount", type=int, default=1, help="Tokens to mint (default: 1)")
    parser.add_argument("--data", type=_hex_bytes, default=b"", help="Opaque hex data (default: empty)")
    parser.add_argument("--chain-id", type=int, default=31337, help="Chain id (default: 31337)")
    parser.add_argument("--contract", required=True, help="Verifying contract address")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        domain = SigningDomain(chain_id=args.chain_id, verifying_contract=args.contract)
        unsigned = Voucher(
            redeemer=args.redeemer,
            price=args.price,
            amount=args.amount,
            data=args.data,
        )
        voucher = sign_voucher(unsigned, args.private_key, domain)
    except (ValueError, KeyValidationError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(json.dumps({
        "redeemer": voucher.redeemer,
        "price": voucher.price,
        "amount": voucher.amount,
        "data": "0x" + voucher.data.hex(),
        "signature": "0x" + voucher.signature.hex(),
    }, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
