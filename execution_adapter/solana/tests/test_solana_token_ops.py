"""Direct mint, holding-account and mint-to operations."""

import unittest

from solders.hash import Hash
from solders.keypair import Keypair
from spl.token.constants import TOKEN_PROGRAM_ID

from core.errors import LedgerOperationError
from core.networks import Network
from execution_adapter.solana.endpoints import ConnectionEndpoint
from execution_adapter.solana.instructions import holding_account_address
from execution_adapter.solana.token_ops import (
    create_mint,
    create_or_fetch_holding_account,
    mint_supply,
)


class TokenClient:
    url = "https://fake"

    def __init__(self, existing=(), fail=False) -> None:
        self.existing = set(existing)
        self.fail = fail
        self.submitted = []

    def get_minimum_balance_for_rent_exemption(self, size: int) -> int:
        return 1_461_600

    def get_latest_blockhash(self) -> Hash:
        return Hash.new_unique()

    def account_exists(self, address) -> bool:
        return address in self.existing

    def send_and_confirm(self, transaction) -> str:
        if self.fail:
            raise LedgerOperationError("sendTransaction", "insufficient lamports")
        self.submitted.append(transaction)
        return f"sig-{len(self.submitted)}"


class TokenOpsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.payer = Keypair()
        self.mint_keypair = Keypair()

    def _endpoint(self, client) -> ConnectionEndpoint:
        return ConnectionEndpoint(url=client.url, network=Network.DEVNET, client=client)

    def test_create_mint_signed_by_payer_and_mint(self) -> None:
        client = TokenClient()
        receipt = create_mint(
            self._endpoint(client),
            self.payer,
            decimals=6,
            freeze_authority=self.payer.pubkey(),
            mint_keypair=self.mint_keypair,
        )
        self.assertEqual(receipt.address, self.mint_keypair.pubkey())
        self.assertEqual(receipt.signature, "sig-1")
        transaction = client.submitted[0]
        transaction.verify()
        self.assertEqual(len(transaction.signatures), 2)
        self.assertIn(TOKEN_PROGRAM_ID, transaction.message.account_keys)

    def test_create_mint_failure_is_wrapped(self) -> None:
        with self.assertRaises(LedgerOperationError) as ctx:
            create_mint(
                self._endpoint(TokenClient(fail=True)),
                self.payer,
                decimals=0,
                freeze_authority=None,
                mint_keypair=self.mint_keypair,
            )
        self.assertEqual(ctx.exception.operation, "Mint creation")
        self.assertEqual(ctx.exception.address, str(self.mint_keypair.pubkey()))

    def test_holding_account_created_when_missing(self) -> None:
        client = TokenClient()
        mint = self.mint_keypair.pubkey()
        receipt = create_or_fetch_holding_account(self._endpoint(client), self.payer, mint)
        self.assertEqual(receipt.address, holding_account_address(self.payer.pubkey(), mint))
        self.assertEqual(receipt.signature, "sig-1")

    def test_existing_holding_account_reused(self) -> None:
        mint = self.mint_keypair.pubkey()
        address = holding_account_address(self.payer.pubkey(), mint)
        client = TokenClient(existing={address})
        receipt = create_or_fetch_holding_account(self._endpoint(client), self.payer, mint)
        self.assertIsNone(receipt.signature)
        self.assertEqual(client.submitted, [])

    def test_mint_supply(self) -> None:
        client = TokenClient()
        mint = self.mint_keypair.pubkey()
        dest = holding_account_address(self.payer.pubkey(), mint)
        receipt = mint_supply(self._endpoint(client), self.payer, mint, dest, 10**12)
        self.assertEqual(receipt.signature, "sig-1")
        client.submitted[0].verify()

    def test_mint_supply_failure_is_wrapped(self) -> None:
        mint = self.mint_keypair.pubkey()
        with self.assertRaises(LedgerOperationError) as ctx:
            mint_supply(self._endpoint(TokenClient(fail=True)), self.payer, mint, mint, 1)
        self.assertEqual(ctx.exception.operation, "Minting")


if __name__ == "__main__":
    unittest.main()
