"""certgate command line client.

Obtains credentials, has a fresh key signed by the certificate authority and
loads the resulting certificate into the running SSH agent.

Example
-------
    certgate --ca https://ca.example.com --key-type ed25519 --validity 8h
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from certgate import __version__
from certgate.auth.errors import ConfigurationError
from certgate.client.config import KEY_TYPES, ClientConfig, parse_duration
from certgate.client.workflow import SigningWorkflow, WorkflowFatal
from certgate.utils.logging import setup_logging


def _duration(value: str):
    try:
        return parse_duration(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="certgate",
        description="Request a short-lived SSH certificate and add it to ssh-agent.",
    )
    parser.add_argument("--ca", help="Certificate authority URL (env CERTGATE_CA)")
    parser.add_argument("--key-type", choices=KEY_TYPES, help="Type of private key to generate")
    parser.add_argument("--key-size", type=int, help="Key size in bits. Ignored for ed25519 keys")
    parser.add_argument("--validity", type=_duration, help="Certificate validity, e.g. 24h")
    parser.add_argument(
        "--public-file-prefix",
        help="Prefix for filename for public key and cert (optional, no default)",
    )
    parser.add_argument(
        "--browser-auth",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Use a browser to obtain a token from the CA (default) or prompt for a password",
    )
    parser.add_argument(
        "--insecure-skip-tls-verify",
        action="store_true",
        help="Do not validate the CA's TLS certificate",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = ClientConfig.from_env(
            ca=args.ca,
            key_type=args.key_type,
            key_size=args.key_size,
            validity=args.validity,
            public_file_prefix=args.public_file_prefix,
            browser_auth=args.browser_auth,
            validate_tls_certificate=False if args.insecure_skip_tls_verify else None,
        )
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    try:
        SigningWorkflow(config).run()
    except WorkflowFatal as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
