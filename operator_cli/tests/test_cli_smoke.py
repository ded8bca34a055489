"""Smoke tests for the operator CLI."""

import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from io import StringIO
from pathlib import Path
from unittest import mock

from solders.keypair import Keypair

from core.config import Settings
from core.errors import InsufficientFunds, NoEndpointAvailable
from core.networks import Network
from execution_controller.result import AuthorityOutcome, CreationResult
from execution_engine.models import AuthorityKind, DirectiveKind
from operator_cli.cli import main
from wallet_core.codec import encode_key


class OperatorCliSmokeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tempdir = tempfile.TemporaryDirectory()
        self.icon = Path(self.tempdir.name) / "icon.png"
        self.icon.write_bytes(b"\x89PNG\r\n\x1a\n")
        self.payer = Keypair()
        self.settings = Settings(_env_file=None, metadata_upload_url="https://store.example")

    def tearDown(self) -> None:
        self.tempdir.cleanup()

    def _run(self, args):
        out, err = StringIO(), StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(args, settings=self.settings)
        return code, out.getvalue(), err.getvalue()

    def _token_args(self, *extra):
        return [
            "--private-key",
            encode_key(self.payer),
            "--name",
            "Demo",
            "--symbol",
            "DMO",
            "--supply",
            "1000000",
            "--decimals",
            "6",
            "--icon",
            str(self.icon),
            *extra,
        ]

    def test_plan_outputs_steps(self) -> None:
        target = str(Keypair().pubkey())
        code, output, _ = self._run(
            ["plan"]
            + self._token_args(
                "--freeze-authority",
                "revoke",
                "--update-authority",
                "transfer",
                "--update-authority-address",
                target,
            )
        )
        self.assertEqual(code, 0)
        payload = json.loads(output)
        self.assertEqual(
            [step["kind"] for step in payload["steps"]],
            ["create-metadata", "set-freeze-authority", "set-update-authority"],
        )
        self.assertEqual(payload["steps"][2]["new_authority"], target)
        self.assertEqual(payload["transaction_count"], 6)
        self.assertEqual(payload["estimated_fees_lamports"], 6 * 50_000)

    def test_plan_reads_key_file(self) -> None:
        key_file = Path(self.tempdir.name) / "payer.key"
        key_file.write_text(encode_key(self.payer) + "\n")
        args = self._token_args()
        args[0:2] = ["--key-file", str(key_file)]
        code, output, _ = self._run(["plan"] + args)
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(output)["payer"], str(self.payer.pubkey()))

    def test_validation_error_exit_code(self) -> None:
        code, _, err = self._run(["plan"] + self._token_args("--mint-authority", "transfer"))
        self.assertEqual(code, 2)
        self.assertIn("mint authority address", err)

    def test_non_image_icon_rejected(self) -> None:
        text_file = Path(self.tempdir.name) / "notes.txt"
        text_file.write_text("hello")
        args = self._token_args()
        args[args.index("--icon") + 1] = str(text_file)
        code, _, _ = self._run(["plan"] + args)
        self.assertEqual(code, 2)

    def test_create_prints_result(self) -> None:
        result = CreationResult(
            network=Network.DEVNET,
            endpoint="https://api.devnet.solana.com",
            mint_address="Mint1111",
            holding_account="Ata1111",
            metadata_account="Meta1111",
            metadata_uri="https://arweave.net/abc",
            name="Demo",
            symbol="DMO",
            decimals=6,
            supply=1_000_000,
            transaction_ids=("sig-0", "sig-1"),
            authorities=(
                AuthorityOutcome(AuthorityKind.MINT, DirectiveKind.KEEP, "Payer1111"),
            ),
        )
        with mock.patch("operator_cli.cli.CreationOrchestrator") as orchestrator_cls:
            orchestrator_cls.return_value.create_token.return_value = result
            code, output, _ = self._run(["create"] + self._token_args())
        self.assertEqual(code, 0)
        payload = json.loads(output)
        self.assertEqual(payload["mint_address"], "Mint1111")
        self.assertEqual(
            payload["transaction_urls"][0], "https://solscan.io/tx/sig-0?cluster=devnet"
        )
        form = orchestrator_cls.return_value.create_token.call_args.args[0]
        self.assertTrue(form.icon.startswith("data:image/png;base64,"))

    def test_create_failure_exit_code(self) -> None:
        with mock.patch("operator_cli.cli.CreationOrchestrator") as orchestrator_cls:
            orchestrator_cls.return_value.create_token.side_effect = InsufficientFunds(10, 5)
            code, _, err = self._run(["create"] + self._token_args())
        self.assertEqual(code, 1)
        self.assertIn("Wallet balance too low", err)

    def test_probe_prints_endpoint(self) -> None:
        endpoint = mock.Mock(url="https://custom", commitment="confirmed", block_height=42)
        with mock.patch("operator_cli.cli.EndpointResolver") as resolver_cls:
            resolver_cls.return_value.resolve.return_value = endpoint
            code, output, _ = self._run(["probe", "--network", "dev", "--rpc-url", "https://custom"])
        self.assertEqual(code, 0)
        self.assertEqual(
            json.loads(output),
            {
                "network": "devnet",
                "url": "https://custom",
                "commitment": "confirmed",
                "block_height": 42,
            },
        )
        args = resolver_cls.return_value.resolve.call_args.args
        self.assertEqual(args[:2], ("https://custom", Network.DEVNET))

    def test_probe_without_endpoint_exit_code(self) -> None:
        with mock.patch("operator_cli.cli.EndpointResolver") as resolver_cls:
            resolver_cls.return_value.resolve.side_effect = NoEndpointAvailable(
                "devnet", ("https://a", "https://b")
            )
            code, _, err = self._run(["probe"])
        self.assertEqual(code, 1)
        self.assertIn("All RPC endpoints failed for devnet", err)


if __name__ == "__main__":
    unittest.main()
