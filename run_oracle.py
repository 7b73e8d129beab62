#!/usr/bin/env python3
"""
Disaster oracle runner.

Usage:
    python run_oracle.py encode-request --request-id 42 \\
        --disaster-type Hurricane --location "Miami, FL"
    python run_oracle.py decode-reply 0x...
    python run_oracle.py replay --messages messages.json
    python run_oracle.py replay --messages messages.json \\
        --fetcher static --records records.json

``replay`` reads configuration from the environment (or ``.env``), registers
the DisasterOracle feature and pushes a JSON list of host messages through
it concurrently, printing each resulting message and an outcome summary.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

from disaster_oracle.config import OracleConfig
from disaster_oracle.errors import ConfigurationError, OracleError
from disaster_oracle.fetchers import get_fetcher
from disaster_oracle.host import FeatureRegistry
from disaster_oracle.logging_config import configure_logging
from disaster_oracle.models import DecodedDisasterRequest, OracleMessage
from disaster_oracle.payload_codec import decode_reply, encode_request
from disaster_oracle.pipeline import DisasterOracleHandler, ProcessOutcome


# ============================================================================
# Codec commands
# ============================================================================

def cmd_encode_request(args: argparse.Namespace) -> int:
    payload = encode_request(DecodedDisasterRequest(
        request_id=args.request_id,
        disaster_type=args.disaster_type,
        location=args.location,
    ))
    print("0x" + payload.hex())
    return 0


def cmd_decode_reply(args: argparse.Namespace) -> int:
    reply = decode_reply(args.payload)
    print(json.dumps(reply.to_dict(), indent=2))
    return 0


# ============================================================================
# Replay
# ============================================================================

def build_handler(args: argparse.Namespace) -> DisasterOracleHandler:
    config = OracleConfig.from_env()
    if args.network:
        config = replace(config, network=args.network)

    if args.fetcher == "static":
        if not args.records:
            raise ConfigurationError("--records is required with --fetcher static")
        with open(args.records) as f:
            fetcher = get_fetcher("static", catalogue=json.load(f))
    else:
        fetcher = None
    return DisasterOracleHandler.create(config, fetcher=fetcher)


def print_summary(outcomes: Counter, n_total: int) -> None:
    print("\n===== Summary =====")
    print(f"Messages:                {n_total}")
    for outcome in ProcessOutcome:
        print(f"  {outcome.value:<22} {outcomes.get(outcome, 0)}")
    print("===================\n")


def cmd_replay(args: argparse.Namespace) -> int:
    try:
        handler = build_handler(args)
    except ConfigurationError as exc:
        print(f"ERROR: {exc} Please check your .env file.", file=sys.stderr)
        return 1

    registry = FeatureRegistry()
    registry.register(handler)

    network = handler.config.network_config
    print(f"Using network: {network['name']} (Chain ID: {network['chain_id']})")
    for feature in registry:
        print(f"Loaded feature: {feature.feature_name} (ID: {feature.feature_id})")

    with open(args.messages) as f:
        messages = [OracleMessage.from_dict(m) for m in json.load(f)]

    feature = registry.get(handler.feature_id)
    with ThreadPoolExecutor(max_workers=args.workers) as pool:
        results = list(pool.map(handler.handle, messages))

    outcomes: Counter = Counter()
    for result in results:
        outcomes[result.outcome] += 1
        print(json.dumps({
            "outcome": result.outcome.value,
            "feature": feature.feature_name,
            "message": result.message.to_dict(),
            "reply": result.reply.to_dict() if result.reply else None,
        }))

    print_summary(outcomes, len(messages))
    return 0


# ============================================================================
# CLI entry point
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Disaster oracle runner.")
    parser.add_argument(
        "--log-level", default=os.getenv("ORACLE_LOG_LEVEL", "INFO"),
        help="Logging level (default INFO or $ORACLE_LOG_LEVEL).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode-request", help="Encode a request payload.")
    enc.add_argument("--request-id", type=int, required=True)
    enc.add_argument("--disaster-type", required=True)
    enc.add_argument("--location", required=True)
    enc.set_defaults(func=cmd_encode_request)

    dec = sub.add_parser("decode-reply", help="Decode a reply payload.")
    dec.add_argument("payload", help="0x-prefixed hex reply payload.")
    dec.set_defaults(func=cmd_decode_reply)

    rep = sub.add_parser("replay", help="Process a JSON file of host messages.")
    rep.add_argument("--messages", required=True,
                     help="JSON list of {txId, sender, featureData}.")
    rep.add_argument("--fetcher", choices=["predicthq", "static"],
                     default="predicthq")
    rep.add_argument("--records", help="Static catalogue JSON (for --fetcher static).")
    rep.add_argument("--workers", type=int, default=4)
    rep.add_argument("--network", help="Override ORACLE_NETWORK.")
    rep.set_defaults(func=cmd_replay)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        return args.func(args)
    except OracleError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
