"""
Sceau CLI - Wallet authentication from the command line.

Provides commands for:
- login  (connect, sign challenge, exchange for session token)
- link   (link wallet to the signed-in account)
- logout (clear session token, optionally disconnect)
- status (show stored session and wallet)

All output via SystemReporter.
"""

import argparse
import asyncio
import os
import sys
from typing import List, Optional

from pydantic import ValidationError

from sceau.config.settings import Settings, load_config
from sceau.di.container import DIContainer
from sceau.domain.value_objects.wallet_address import truncate_address
from sceau.infrastructure.wallet.keypair_provider import (
    KeypairWalletProvider,
    load_keypair,
)
from shared.reporter.emojis import ErrorEmoji, StateEmoji, SystemEmoji, WalletEmoji


def build_provider(args: argparse.Namespace, settings: Settings) -> KeypairWalletProvider:
    """Create keypair provider from --keypair (random key otherwise)."""
    signing_key = load_keypair(args.keypair) if args.keypair else None
    return KeypairWalletProvider(
        signing_key=signing_key,
        network=settings.WALLET_NETWORK,
    )


async def run_login(container: DIContainer) -> int:
    """
    Authenticate with the wallet and store the session token.

    Returns:
        Exit code (0 = success, 1 = failure)
    """
    result = await container.orchestrator.authenticate()
    reporter = container.reporter

    if not result.success:
        reporter.error(f"{StateEmoji.FAILED} {result.error}", context="CLI")
        return 1

    session = container.connector.current_session()
    reporter.info(
        f"{StateEmoji.AUTHENTICATED} Signed in as "
        f"{truncate_address(session.address) if session else 'unknown wallet'}",
        context="CLI",
    )
    return 0


async def run_link(container: DIContainer) -> int:
    """
    Link the wallet to the signed-in account.

    Returns:
        Exit code (0 = success, 1 = failure)
    """
    reporter = container.reporter
    if not container.session_store.is_authenticated:
        reporter.warning(
            f"{ErrorEmoji.WARNING} No stored session; backend may refuse the link",
            context="CLI",
        )

    result = await container.orchestrator.link_wallet()
    if not result.success:
        reporter.error(f"{StateEmoji.FAILED} {result.error}", context="CLI")
        return 1

    reporter.info(f"{WalletEmoji.LINK} Wallet linked", context="CLI")
    return 0


async def run_logout(container: DIContainer, disconnect: bool) -> int:
    await container.logout_user.execute(disconnect_wallet=disconnect)
    container.reporter.info(f"{WalletEmoji.LOGOUT} Signed out", context="CLI")
    return 0


async def run_status(container: DIContainer) -> int:
    reporter = container.reporter
    credential = container.session_store.get()
    session = container.connector.current_session()

    if credential:
        reporter.info(
            f"{WalletEmoji.TOKEN} Session: {credential.masked()}", context="CLI"
        )
    else:
        reporter.info(f"{WalletEmoji.TOKEN} Session: none", context="CLI")

    if session:
        reporter.info(
            f"{WalletEmoji.WALLET} Wallet: {session.address} "
            f"({session.network or 'unknown network'})",
            context="CLI",
        )
    else:
        reporter.info(f"{WalletEmoji.WALLET} Wallet: not connected", context="CLI")

    return 0 if credential else 1


async def run(args: argparse.Namespace, settings: Settings) -> int:
    """Build container, restore state, run command, shut down."""
    container = DIContainer(settings=settings, provider=build_provider(args, settings))
    if args.verbose:
        container.reporter.set_verbose(3)
    elif args.quiet:
        container.reporter.set_verbose(0)

    try:
        await container.initialize()

        if args.command == "login":
            return await run_login(container)
        if args.command == "link":
            return await run_link(container)
        if args.command == "logout":
            return await run_logout(container, args.disconnect)
        return await run_status(container)
    finally:
        await container.shutdown()


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="sceau",
        description="Wallet challenge/response authentication client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sceau login --keypair ~/.sceau/key.hex    # Sign in with a local key
  sceau link --keypair second.json          # Link another wallet
  sceau logout --disconnect                 # Sign out and disconnect
  sceau status                              # Show stored session
  sceau login --env production              # Use production.yaml
        """,
    )

    # Options shared by every command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--keypair", help="Key file (hex seed or JSON byte array)", default=None
    )
    common.add_argument("--api-url", help="Override API_BASE_URL", default=None)
    common.add_argument(
        "--env", help="Config environment (development, production, test)"
    )
    common.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    common.add_argument(
        "-q", "--quiet", action="store_true", help="Quiet mode (minimal output)"
    )

    subparsers = parser.add_subparsers(
        dest="command", help="Command to run", required=True
    )

    for name, help_text in (
        ("login", "Authenticate with the wallet"),
        ("link", "Link wallet to the signed-in account"),
        ("status", "Show session and wallet"),
    ):
        subparsers.add_parser(name, help=help_text, parents=[common])

    logout_parser = subparsers.add_parser(
        "logout", help="Clear session token", parents=[common]
    )
    logout_parser.add_argument(
        "--disconnect", action="store_true", help="Also disconnect the wallet"
    )

    args = parser.parse_args(argv)

    if args.api_url:
        os.environ["API_BASE_URL"] = args.api_url

    try:
        settings = load_config(env=args.env)
    except ValidationError as e:
        print(f"{SystemEmoji.CONFIG_ERROR} Invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        return asyncio.run(run(args, settings))
    except (OSError, ValueError) as e:
        print(f"{ErrorEmoji.ERROR} {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
