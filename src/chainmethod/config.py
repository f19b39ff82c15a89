from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .constants import PROVIDER_TIMEOUT_SECONDS

__all__ = ["Network", "ChainConfig", "NETWORKS", "get_chain_config"]


class Network(str, Enum):
    MAINNET = "mainnet"
    SHASTA = "shasta"
    NILE = "nile"


@dataclass(frozen=True)
class ChainConfig:
    name: Network
    full_node: str
    solidity_node: str
    event_server: Optional[str]
    timeout: int = PROVIDER_TIMEOUT_SECONDS


NETWORKS: dict[Network, ChainConfig] = {
    Network.MAINNET: ChainConfig(
        name=Network.MAINNET,
        full_node="https://api.trongrid.io",
        solidity_node="https://api.trongrid.io",
        event_server="https://api.trongrid.io",
    ),
    Network.SHASTA: ChainConfig(
        name=Network.SHASTA,
        full_node="https://api.shasta.trongrid.io",
        solidity_node="https://api.shasta.trongrid.io",
        event_server="https://api.shasta.trongrid.io",
    ),
    Network.NILE: ChainConfig(
        name=Network.NILE,
        full_node="https://nile.trongrid.io",
        solidity_node="https://nile.trongrid.io",
        event_server="https://nile.trongrid.io",
    ),
}


def get_chain_config(
    network: Network,
    full_node: Optional[str] = None,
    solidity_node: Optional[str] = None,
    event_server: Optional[str] = None,
    timeout: Optional[int] = None,
) -> ChainConfig:
    cfg = NETWORKS[Network(network)]
    overrides = {
        key: value
        for key, value in (
            ("full_node", full_node),
            ("solidity_node", solidity_node),
            ("event_server", event_server),
            ("timeout", timeout),
        )
        if value is not None
    }
    if overrides:
        return replace(cfg, **overrides)
    return cfg
