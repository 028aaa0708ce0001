#!/usr/bin/env python3
"""
CLI for deterministic searchable encryption.

Commands:
  keygen                Print a new hex key (not saved anywhere)
  encrypt <value>...    Print the ciphertext of each value
  add <id> <value>      Index a value under a record ID
  find <value>          Print record IDs whose value matches
  remove <id>           Drop a record ID from the index
  estimate              Estimate rainbow table cost for the current key

The key comes from --key or SECURESEARCH_KEY.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import config
from .benchmark import estimate_rainbow_table, write_csv
from .deterministic import encrypt, generate_key, key_from_hex
from .errors import SecureSearchError
from .index_backend import open_backend
from .lookup import EncryptedLookup


def load_key(args: argparse.Namespace) -> bytes:
    key_hex = args.key or config.KEY_HEX
    if not key_hex:
        print("No key given. Use --key or set SECURESEARCH_KEY (see: securesearch keygen)", file=sys.stderr)
        sys.exit(1)
    return key_from_hex(key_hex)


def open_lookup(args: argparse.Namespace) -> EncryptedLookup:
    key = load_key(args)
    backend = open_backend(Path(args.index), args.backend)
    return EncryptedLookup(key, backend)


def cmd_keygen(_: argparse.Namespace) -> None:
    print(generate_key())


def cmd_encrypt(args: argparse.Namespace) -> None:
    key = load_key(args)
    for value in args.values:
        print(encrypt(value.encode("utf-8"), key))


def cmd_add(args: argparse.Namespace) -> None:
    with open_lookup(args) as lookup:
        lookup.add(args.record_id, args.value.encode("utf-8"))
    print("Indexed", args.record_id)


def cmd_find(args: argparse.Namespace) -> None:
    with open_lookup(args) as lookup:
        record_ids = lookup.find(args.value.encode("utf-8"))
    print("Matches:", len(record_ids))
    for record_id in record_ids:
        print(" -", record_id)


def cmd_remove(args: argparse.Namespace) -> None:
    with open_lookup(args) as lookup:
        lookup.remove(args.record_id)
    print("Removed", args.record_id)


def cmd_estimate(args: argparse.Namespace) -> None:
    key = load_key(args) if (args.key or config.KEY_HEX) else key_from_hex(generate_key())
    result = estimate_rainbow_table(key, start=args.start, stop=args.stop, postfix=args.postfix)
    print(f"Encrypted {result['candidates']} candidates in {result['duration_sec']} s "
          f"({result['per_candidate_ms']} ms each)")
    print(f"Full rainbow table, single thread: ~{result['estimated_days']} days")
    if args.csv:
        write_csv([result], Path(args.csv))
        print("Wrote", args.csv)
    if not result["passed"]:
        print(f"Below the floor of {result['threshold_sec']} s", file=sys.stderr)
        sys.exit(1)


COMMANDS = {
    "keygen": cmd_keygen,
    "encrypt": cmd_encrypt,
    "add": cmd_add,
    "find": cmd_find,
    "remove": cmd_remove,
    "estimate": cmd_estimate,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Deterministic one-way encryption for searching sensitive values"
    )
    parser.add_argument("--key", default="", help="Hex key (default: $SECURESEARCH_KEY)")
    parser.add_argument("--index", default=str(config.INDEX_PATH), help="Index file")
    parser.add_argument("--backend", default=config.INDEX_BACKEND, choices=("sqlite", "json"))
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("keygen", help="Generate a new key")
    p_encrypt = sub.add_parser("encrypt", help="Encrypt values")
    p_encrypt.add_argument("values", nargs="+", help="Values to encrypt")
    p_add = sub.add_parser("add", help="Index a value")
    p_add.add_argument("record_id")
    p_add.add_argument("value")
    p_find = sub.add_parser("find", help="Find records by value")
    p_find.add_argument("value")
    p_remove = sub.add_parser("remove", help="Remove a record")
    p_remove.add_argument("record_id")
    p_estimate = sub.add_parser("estimate", help="Estimate rainbow table cost")
    p_estimate.add_argument("--start", type=int, default=1000)
    p_estimate.add_argument("--stop", type=int, default=1500)
    p_estimate.add_argument("--postfix", default="010170", help="Birth date DDMMYY")
    p_estimate.add_argument("--csv", default="", help="Write result to CSV")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        logging.basicConfig(level=config.log_level(), format="%(levelname)s %(name)s: %(message)s")
        COMMANDS[args.command](args)
    except (SecureSearchError, ValueError) as e:
        print("Error:", e, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
