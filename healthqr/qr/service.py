"""
QR Code Generator - Encodes the public profile link as an SVG QR code.

Pure functions of (origin, identifier); no network access and no store.
"""
from dataclasses import dataclass
from typing import Optional
import xml.etree.ElementTree as ET
import qrcode
from qrcode.constants import ERROR_CORRECT_H
from qrcode.image.svg import SvgPathImage

from ..config import settings

@dataclass(frozen=True)
class QRCodeDisplay:
    """The public profile URL and its QR code as an SVG document"""
    url: str
    svg: str

def build_profile_url(origin: str, identifier: str) -> str:
    """
    Public viewer URL for ``identifier``: ``<origin>/profile/<identifier>``.

    Raises:
        ValueError: If origin or identifier is blank
    """
    if not origin or not origin.strip():
        raise ValueError("origin must not be blank")
    if not identifier or not identifier.strip():
        raise ValueError("identifier must not be blank")

    origin = origin.strip()
    if origin.endswith("/"):
        origin = origin[:-1]
    return f"{origin}/profile/{identifier.strip()}"

def render_qr_svg(
    data: str,
    size: Optional[int] = None,
    error_correction: int = ERROR_CORRECT_H,
    border: Optional[int] = None
) -> str:
    """
    Encode ``data`` as a QR code and return it as an SVG string.

    Args:
        data: Text to encode
        size: Rendered width and height in pixels (settings.qr_size by default)
        error_correction: qrcode error correction constant (H by default)
        border: Quiet zone in modules (settings.qr_border by default)
    """
    size = size or settings.qr_size
    qr = qrcode.QRCode(
        error_correction=error_correction,
        border=settings.qr_border if border is None else border,
        image_factory=SvgPathImage,
    )
    qr.add_data(data)
    qr.make(fit=True)

    svg = qr.make_image().get_image()
    # viewBox keeps the module grid; width/height pin the rendered size
    svg.set("width", str(size))
    svg.set("height", str(size))
    return ET.tostring(svg, encoding="unicode")

def generate_profile_qr(origin: str, identifier: str) -> QRCodeDisplay:
    """Build the public profile URL for ``identifier`` and its QR code"""
    url = build_profile_url(origin, identifier)
    return QRCodeDisplay(url=url, svg=render_qr_svg(url))

def resolve_origin(request_origin: str) -> str:
    """The configured public origin, or the origin the request came in on"""
    return settings.public_base_url or request_origin
