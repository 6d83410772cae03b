"""Runtime helpers for Cardano Probe"""

from .errors import ProbeError, ErrorCode
from .codec import encode_json, encode_log_json, replace_big_int, loads

__all__ = [
    "ProbeError",
    "ErrorCode",
    "encode_json",
    "encode_log_json",
    "replace_big_int",
    "loads"
]
