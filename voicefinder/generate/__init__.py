# Generator package

# Makes generate/ importable and exposes key interfaces.

from .generator import JsonOracle, OracleError
from .types import Message, ModelParams
from .clients.echo_dev_client import EchoDevClient

__all__ = ["JsonOracle", "OracleError", "Message", "ModelParams", "EchoDevClient"]
