"""Validation tests for turning raw form values into a CreationRequest."""

import base64
import unittest
from dataclasses import replace

from solders.keypair import Keypair

from core.errors import InvalidKeyFormat, ValidationError
from core.networks import Network
from execution_engine.models import AuthorityDirective, AuthorityKind, CreationRequest, DirectiveKind
from execution_engine.request import TokenForm, parse_directive, parse_request
from wallet_core.codec import encode_key


class ParseRequestTests(unittest.TestCase):
    def setUp(self) -> None:
        self.payer = Keypair()
        self.target = Keypair().pubkey()
        self.form = TokenForm(
            network="dev",
            private_key=encode_key(self.payer),
            name="Demo",
            symbol="DMO",
            total_supply="1000000",
            decimals="6",
            icon="data:image/png;base64," + base64.b64encode(b"\x89PNG").decode("ascii"),
            description="A demo token",
            external_url="https://example.com",
        )

    def test_valid_form_builds_request(self) -> None:
        request = parse_request(self.form)
        self.assertEqual(request.network, Network.DEVNET)
        self.assertEqual(request.payer.pubkey(), self.payer.pubkey())
        self.assertEqual(request.total_supply, 1_000_000)
        self.assertEqual(request.decimals, 6)
        self.assertEqual(request.raw_amount, 1_000_000 * 10**6)
        self.assertIsNone(request.custom_rpc_url)
        for _, directive in request.directives():
            self.assertEqual(directive.kind, DirectiveKind.KEEP)

    def test_decimals_out_of_range(self) -> None:
        for decimals in ("10", "42"):
            with self.subTest(decimals=decimals):
                with self.assertRaises(ValidationError):
                    parse_request(replace(self.form, decimals=decimals))

    def test_non_numeric_supply_and_decimals(self) -> None:
        for field_name, value in (
            ("total_supply", "lots"),
            ("total_supply", "-5"),
            ("decimals", "1.5"),
            ("decimals", "-1"),
        ):
            with self.subTest(field=field_name, value=value):
                with self.assertRaises(ValidationError):
                    parse_request(replace(self.form, **{field_name: value}))

    def test_required_fields(self) -> None:
        for field_name in ("private_key", "name", "symbol", "total_supply", "decimals"):
            with self.subTest(field=field_name):
                with self.assertRaises(ValidationError):
                    parse_request(replace(self.form, **{field_name: " "}))

    def test_icon_required_and_capped(self) -> None:
        with self.assertRaises(ValidationError):
            parse_request(replace(self.form, icon=""))
        big = "data:image/png;base64," + base64.b64encode(b"\x00" * (200 * 1024 + 1)).decode("ascii")
        with self.assertRaises(ValidationError):
            parse_request(replace(self.form, icon=big))

    def test_invalid_private_key(self) -> None:
        with self.assertRaises(InvalidKeyFormat):
            parse_request(replace(self.form, private_key="not!base58"))

    def test_transfer_requires_valid_address(self) -> None:
        with self.assertRaises(ValidationError):
            parse_request(replace(self.form, mint_authority="transfer"))
        with self.assertRaises(ValidationError):
            parse_request(
                replace(self.form, freeze_authority="transfer", freeze_authority_address="nope")
            )

    def test_transfer_to_payer_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            parse_request(
                replace(
                    self.form,
                    update_authority="transfer",
                    update_authority_address=str(self.payer.pubkey()),
                )
            )

    def test_directives_parsed_per_authority(self) -> None:
        request = parse_request(
            replace(
                self.form,
                mint_authority="Revoke",
                freeze_authority="transfer",
                freeze_authority_address=str(self.target),
            )
        )
        self.assertEqual(request.mint_authority, AuthorityDirective.revoke())
        self.assertEqual(request.freeze_authority, AuthorityDirective.transfer(self.target))
        self.assertEqual(request.update_authority, AuthorityDirective.keep())

    def test_unknown_directive(self) -> None:
        with self.assertRaises(ValidationError):
            parse_directive(AuthorityKind.MINT, "burn")

    def test_name_and_symbol_limits(self) -> None:
        with self.assertRaises(ValidationError):
            parse_request(replace(self.form, name="N" * 33))
        with self.assertRaises(ValidationError):
            parse_request(replace(self.form, symbol="S" * 11))

    def test_supply_overflow(self) -> None:
        with self.assertRaises(ValidationError):
            parse_request(replace(self.form, total_supply=str(2**64), decimals="0"))

    def test_invalid_network(self) -> None:
        with self.assertRaises(ValidationError):
            parse_request(replace(self.form, network="testnet"))

    def test_custom_rpc_url_checked(self) -> None:
        request = parse_request(replace(self.form, custom_rpc_url="  https://rpc.example/v1  "))
        self.assertEqual(request.custom_rpc_url, "https://rpc.example/v1")
        for url in ("http://[::1", "ftp://rpc.example", "rpc.example"):
            with self.subTest(url=url):
                with self.assertRaises(ValidationError) as ctx:
                    parse_request(replace(self.form, custom_rpc_url=url))
                self.assertIn("Invalid custom RPC URL", ctx.exception.message)

    def test_private_key_not_in_repr(self) -> None:
        self.assertNotIn(self.form.private_key, repr(self.form))
        self.assertNotIn(str(bytes(self.payer)), repr(parse_request(self.form)))


class AuthorityDirectiveTests(unittest.TestCase):
    def test_transfer_needs_target(self) -> None:
        with self.assertRaises(ValidationError):
            AuthorityDirective(DirectiveKind.TRANSFER)

    def test_keep_rejects_target(self) -> None:
        with self.assertRaises(ValidationError):
            AuthorityDirective(DirectiveKind.KEEP, Keypair().pubkey())

    def test_resulting_holder(self) -> None:
        payer = Keypair().pubkey()
        target = Keypair().pubkey()
        self.assertEqual(AuthorityDirective.keep().resulting_holder(payer), payer)
        self.assertIsNone(AuthorityDirective.revoke().resulting_holder(payer))
        self.assertEqual(AuthorityDirective.transfer(target).resulting_holder(payer), target)

    def test_request_invariants_enforced_directly(self) -> None:
        with self.assertRaises(ValidationError):
            CreationRequest(
                network=Network.DEVNET,
                payer=Keypair(),
                name="Demo",
                symbol="DMO",
                total_supply=1,
                decimals=12,
                icon="x",
            )


if __name__ == "__main__":
    unittest.main()
