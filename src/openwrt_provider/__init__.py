"""Declarative read/reconcile provider for OpenWrt devices.

Usage:
    from openwrt_provider import OpenWrtProvider

    provider = OpenWrtProvider(version="1.0.0")
    client, diags = await provider.configure({
        "host": "192.168.1.1",
        "username": "root",
        "password": "secret",
    })
    board, diags = provider.new_data_source("openwrt_board_info")
    state, diags = await board.read({})
"""
from .diagnostics import Diagnostic, Diagnostics, ErrorKind, Severity
from .provider import OpenWrtProvider
from .state import State
from .values import UNKNOWN, Value

__version__ = "0.1.0"

__all__ = [
    "Diagnostic",
    "Diagnostics",
    "ErrorKind",
    "Severity",
    "OpenWrtProvider",
    "State",
    "UNKNOWN",
    "Value",
]
