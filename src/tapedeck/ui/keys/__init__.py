"""Keyboard handling - key tokens, the binding table and the dispatcher."""

from .utils import parse_key, parse_sequence
from .bindings import (
    BindingTable,
    KeyEntry,
    build_binding_table,
    load_key_mapping,
)
from .dispatcher import DispatcherState, KeyDispatcher

__all__ = [
    "parse_key",
    "parse_sequence",
    "BindingTable",
    "KeyEntry",
    "build_binding_table",
    "load_key_mapping",
    "DispatcherState",
    "KeyDispatcher",
]
