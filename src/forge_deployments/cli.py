"""Command line entry point for forge-deployments."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .constants import JSON_INDENT
from .deployments import load_deployment_log, register_contract
from .exceptions import DeploymentLogError
from .paths import get_deployment_log_path


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="forge-deployments",
        description="Maintain per-network deployment logs of a foundry project.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    register = subparsers.add_parser("register", help="Register a deployed contract")
    register.add_argument("address", help="Deployed contract address")
    register.add_argument("--chain-id", required=True, help="Network identifier")
    register.add_argument("--working-dir", default=".", help="Foundry project root")
    register.add_argument("--rpc-url", help="JSON-RPC endpoint (default: $RPC_URL)")
    register.add_argument("--explorer-api-url", help="Explorer API endpoint")
    register.add_argument(
        "--explorer-api-key", help="Explorer API key (default: $ETHERSCAN_API_KEY)"
    )
    register.add_argument(
        "--skip-docs", action="store_true", help="Do not run forge-chronicles"
    )

    latest = subparsers.add_parser("latest", help="Print the latest deployments")
    latest.add_argument("--chain-id", required=True, help="Network identifier")
    latest.add_argument("--working-dir", default=".", help="Foundry project root")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "register":
            log = register_contract(
                args.address,
                args.chain_id,
                working_dir=args.working_dir,
                rpc_url=args.rpc_url,
                explorer_api_url=args.explorer_api_url,
                explorer_api_key=args.explorer_api_key,
                generate_docs=not args.skip_docs,
            )
        else:
            log = load_deployment_log(
                get_deployment_log_path(args.working_dir, args.chain_id), args.chain_id
            )
            latest = {name: record.to_dict() for name, record in log.latest.items()}
            print(json.dumps(latest, indent=JSON_INDENT))
    except (DeploymentLogError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
