"""Endpoint resolution: find a live RPC endpoint by ordered failover."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Sequence, Tuple

from core.errors import LedgerOperationError, NoEndpointAvailable
from core.networks import Network

from .ledger import COMMITMENT, LedgerClient, SolanaLedgerClient

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], LedgerClient]
Note = Callable[[str], None]


@dataclass(frozen=True)
class ConnectionEndpoint:
    """A probed, live RPC handle owned by a single creation run."""

    url: str
    network: Network
    client: LedgerClient
    commitment: str = str(COMMITMENT)
    block_height: Optional[int] = None


class ResolutionStrategy(Protocol):
    def candidates(self, custom_url: Optional[str], network: Network) -> Tuple[str, ...]:
        ...


class OrderedFailover:
    """Custom URL first, then the network's public endpoints in fixed order."""

    def __init__(self, public_endpoints: Callable[[Network], Sequence[str]]) -> None:
        self._public_endpoints = public_endpoints

    def candidates(self, custom_url: Optional[str], network: Network) -> Tuple[str, ...]:
        ordered = []
        if custom_url:
            ordered.append(custom_url)
        for url in self._public_endpoints(network):
            if url not in ordered:
                ordered.append(url)
        return tuple(ordered)


class EndpointResolver:
    def __init__(
        self,
        strategy: ResolutionStrategy,
        client_factory: Optional[ClientFactory] = None,
        timeout: Optional[float] = 10.0,
    ) -> None:
        self._strategy = strategy
        self._client_factory = client_factory or (
            lambda url: SolanaLedgerClient(url, commitment=COMMITMENT, timeout=timeout)
        )

    def resolve(
        self,
        custom_url: Optional[str],
        network: Network,
        note: Note = lambda _: None,
    ) -> ConnectionEndpoint:
        """Probe each candidate once; the first that answers wins."""

        attempted = []
        for url in self._strategy.candidates(custom_url, network):
            attempted.append(url)
            note(f"Testing connection to {url}...")
            try:
                client = self._client_factory(url)
                height = client.get_block_height()
            except LedgerOperationError as exc:
                logger.info("Endpoint %s unavailable: %s", url, exc.cause)
                note(f"Failed to connect to {url}: {exc.cause}")
                continue
            note(f"Connected to {url} (block height: {height})")
            return ConnectionEndpoint(
                url=url,
                network=network,
                client=client,
                block_height=height,
            )

        raise NoEndpointAvailable(network.value, tuple(attempted))
