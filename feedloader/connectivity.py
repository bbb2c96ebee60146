"""
Connectivity Oracles
===================

Answer "is the network usable right now?" before a load decides between the
network and the offline cache.
"""

import socket
from typing import Protocol

from .utils.logging import get_logger_for_component


class ConnectivityOracle(Protocol):
    """Capability: report whether the network is usable."""

    def is_connected(self) -> bool:
        ...


class StaticConnectivity:
    """Fixed answer; useful for forced offline mode and tests."""

    def __init__(self, connected: bool = True):
        self.connected = connected

    def is_connected(self) -> bool:
        return self.connected


class HostConnectivity:
    """Probe connectivity by opening a TCP connection to a known host."""

    def __init__(self, host: str = "1.1.1.1", port: int = 53, timeout: float = 3.0):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.logger = get_logger_for_component("connectivity")

    def is_connected(self) -> bool:
        try:
            with socket.create_connection((self.host, self.port), timeout=self.timeout):
                return True
        except OSError as e:
            self.logger.info(f"Network unreachable ({self.host}:{self.port}): {e}")
            return False
