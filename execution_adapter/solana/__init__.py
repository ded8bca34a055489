from .endpoints import ConnectionEndpoint, EndpointResolver, OrderedFailover, ResolutionStrategy
from .executor import TransactionExecutor, sign_and_submit
from .funding import FundingCheck, FundingValidator, format_sol
from .ledger import COMMITMENT, LedgerClient, SolanaLedgerClient
from .token_ops import LedgerReceipt, create_mint, create_or_fetch_holding_account, mint_supply

__all__ = [
    "COMMITMENT",
    "ConnectionEndpoint",
    "EndpointResolver",
    "FundingCheck",
    "FundingValidator",
    "LedgerClient",
    "LedgerReceipt",
    "OrderedFailover",
    "ResolutionStrategy",
    "SolanaLedgerClient",
    "TransactionExecutor",
    "create_mint",
    "create_or_fetch_holding_account",
    "format_sol",
    "mint_supply",
    "sign_and_submit",
]
