"""Ambient values the host supplies for one registry call."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CallContext:
    caller_identity: str
    storage_byte_cost: int
    block_timestamp: int
    attached_deposit: int = 0
