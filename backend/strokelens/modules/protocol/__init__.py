# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Line Protocol Module
Public API for the tab-separated request/response codec.
"""

from strokelens.modules.protocol.line_codec import (
    INVALID_COORDINATES,
    INVALID_FORMAT,
    LineRequest,
    decode_request,
    encode_candidates,
    encode_error,
)

__all__ = [
    "LineRequest",
    "decode_request",
    "encode_candidates",
    "encode_error",
    "INVALID_FORMAT",
    "INVALID_COORDINATES",
]
