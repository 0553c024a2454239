"""
Command-line demo of threshold ECDSA signing.

Runs the security audit, generates a key set, has the chosen signers
produce partial signatures under one shared nonce, combines and
verifies them, and finally shows that fewer than  t  partial
signatures are refused.

    python -m tecdsa --threshold 3 --parties 5 --signers 1,3,5
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from .errors import CombinationError
from .protocol import ThresholdECDSA

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "Transfer 5 BTC to address 1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"


def _parse_signers(text: str) -> List[int]:
    try:
        signers = [int(part) for part in text.split(",") if part.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"signers must be comma-separated integers, got {text!r}"
        ) from exc
    if not signers:
        raise argparse.ArgumentTypeError("at least one signer ID is required")
    return signers


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tecdsa-demo",
        description="t-of-n threshold ECDSA signing demo (secp256k1)",
    )
    parser.add_argument("-t", "--threshold", type=int, default=2,
                        help="signatures required (default: 2)")
    parser.add_argument("-n", "--parties", type=int, default=3,
                        help="total participants (default: 3)")
    parser.add_argument("-s", "--signers", type=_parse_signers, default=None,
                        help="comma-separated signer IDs (default: 1..t)")
    parser.add_argument("-m", "--message", default=DEFAULT_MESSAGE,
                        help="message to sign")
    parser.add_argument("--json", action="store_true",
                        help="print the combined signature as JSON")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        tss = ThresholdECDSA.setup(args.threshold, args.parties)
    except ValueError as exc:
        parser.error(str(exc))

    report = tss.audit()
    print(f"Audit: {report.overall}")
    if not report.passed:
        for name in report.failed_checks():
            print(f"  failed check: {name}")
        return 1

    keys = tss.generate_keys()
    print(f"{keys.threshold}-of-{keys.total_parties} key set")
    print(f"Public key: {keys.public_key_hex}")

    signer_ids = args.signers
    if signer_ids is None:
        signer_ids = list(range(1, tss.threshold + 1))
    try:
        parties = [keys.party(pid) for pid in signer_ids]
    except ValueError as exc:
        parser.error(str(exc))

    message = args.message.encode("utf-8")
    session = tss.new_session()
    print(f"Session: {session.session_id}")

    partials = tss.sign_with(parties, message, session)
    try:
        signature = tss.combine(message, partials)
    except CombinationError as exc:
        print(f"Combination refused: {exc}")
        return 1

    result = tss.verify(signature, keys.public_key_hex)
    participants = ", ".join(str(p) for p in signature.participating_parties)
    print(f"Participants: {participants}")
    if args.json:
        print(json.dumps(signature.to_dict(), indent=2))
    else:
        print(f"r: {signature.r.to_hex()}")
        print(f"s: {signature.s.to_hex()}")
    print(f"Verification: {'VALID' if result.valid else 'INVALID'}")
    if not result.valid:
        print(f"  reason: {result.detail}")
        return 1

    try:
        tss.combine(message, partials[: tss.threshold - 1])
    except CombinationError as exc:
        print(f"Threshold enforced: {exc}")
    else:
        logger.error("combination accepted fewer partial signatures than t")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
