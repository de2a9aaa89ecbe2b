#!/usr/bin/env python3
"""
Drive the game mint program end to end.

Runs initialize -> grant-permission -> mint -> read-state against a cluster
and stops at the first failure.
"""
import argparse
import logging
import sys

from gamemint_sdk import (
    GameMintClient,
    GameMintError,
    generate_keypair,
    load_keypair,
)
from gamemint_sdk.client import LAMPORTS_PER_SOL


def main() -> int:
    """
    Demonstrate the full instruction sequence.

    This example shows how to:
    1. Build a client for a bundled network
    2. Fund a fresh payer from the faucet
    3. Initialize the contract, grant mint permission and mint a token
    4. Read back the contract state
    """
    parser = argparse.ArgumentParser(description="Run the game mint instruction sequence.")
    parser.add_argument("--network", default="devnet", help="Bundled network name")
    parser.add_argument("--rpc-url", help="Override the network RPC URL")
    parser.add_argument("--program-id", help="Override the program id")
    parser.add_argument("--keypair", help="Payer keypair file (default: generate a new one)")
    parser.add_argument("--game-id", default="game_id")
    parser.add_argument("--token-uri", default="token_uri")
    parser.add_argument("--airdrop", type=float, default=1.0, help="SOL to request for the payer (0 to skip)")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        payer = load_keypair(args.keypair) if args.keypair else generate_keypair()
        client = GameMintClient.from_network(
            args.network,
            payer,
            rpc_url=args.rpc_url,
            program_id=args.program_id,
        )
    except GameMintError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Payer: {client.payer_pubkey}")
    print(f"Program: {client.program_id}")

    with client.ledger:
        try:
            if args.airdrop > 0:
                client.airdrop(int(args.airdrop * LAMPORTS_PER_SOL))
                print(f"Airdropped {args.airdrop} SOL")

            client.initialize_contract()
            print("Contract initialized!")

            client.grant_mint_permission(args.game_id, args.token_uri)
            print("Mint permission granted!")

            client.mint(args.game_id)
            print("Token minted!")

            state = client.get_contract_state()
            print(f"Contract owner: {state.owner_pubkey}")
            print(f"Last token id: {state.last_token_id}")
        except GameMintError as e:
            print(f"ERROR: {e}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
