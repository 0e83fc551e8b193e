"""QR codes for batch traceability labels."""
from __future__ import annotations

import segno


def trace_url_for(client_url: str, batch_id: str) -> str:
    return f"{client_url.rstrip('/')}/trace/{batch_id}"


def qr_data_uri(url: str, *, scale: int = 8) -> str:
    """PNG data URI encoding *url* with high error correction."""
    return segno.make(url, error="h", micro=False).png_data_uri(scale=scale, border=2)
