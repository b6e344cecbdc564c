# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Line Protocol Codec
Tab-separated, newline-terminated request/response framing used by
lightweight input-method clients.

Request:   max_width<TAB>max_height<TAB>x0,y0,x1,y1,...<TAB>...<LF>
Response:  label<TAB>label<TAB>...<LF>
Error:     ERROR<TAB>message<LF>

Canvas width and height are parsed (they must be numbers) but not used:
normalisation is derived from the strokes themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from strokelens.api.middleware.error_handler import StrokeInputError
from strokelens.utils.geometry_utils import Stroke

INVALID_FORMAT = "Invalid input format"
INVALID_COORDINATES = "Invalid stroke coordinates"


@dataclass
class LineRequest:
    """One decoded line-protocol request."""
    max_width: float
    max_height: float
    strokes: list[Stroke] = field(default_factory=list)


def decode_request(line: str) -> LineRequest:
    """
    Parse one request line.

    Raises:
        StrokeInputError: fewer than three fields, non-numeric values,
                          or a stroke with an odd or empty coordinate list.
    """
    parts = line.strip().split("\t")
    if len(parts) < 3:
        raise StrokeInputError(INVALID_FORMAT)

    try:
        max_width = float(parts[0])
        max_height = float(parts[1])
    except ValueError as exc:
        raise StrokeInputError(INVALID_FORMAT) from exc

    strokes: list[Stroke] = []
    for stroke_field in parts[2:]:
        if not stroke_field.strip():
            raise StrokeInputError(INVALID_COORDINATES)
        try:
            coords = [float(v) for v in stroke_field.split(",")]
        except ValueError as exc:
            raise StrokeInputError(INVALID_FORMAT) from exc
        if len(coords) % 2 != 0:
            raise StrokeInputError(INVALID_COORDINATES)
        strokes.append(list(zip(coords[0::2], coords[1::2])))

    return LineRequest(max_width=max_width, max_height=max_height, strokes=strokes)


def encode_candidates(labels: list[str]) -> str:
    return "\t".join(labels) + "\n"


def encode_error(message: str) -> str:
    # Tabs or newlines inside the message would break framing
    clean = " ".join(message.split())
    return f"ERROR\t{clean}\n"
