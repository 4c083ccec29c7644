"""
QR Router - QR code for the signed-in user's public profile.
"""
from fastapi import APIRouter, Depends, Request, Response

from ..auth.dependencies import get_current_identity
from ..auth.service import Identity
from .service import generate_profile_qr, resolve_origin

router = APIRouter()

def request_origin(request: Request) -> str:
    """``scheme://host[:port]`` the request was addressed to"""
    return f"{request.url.scheme}://{request.url.netloc}"

@router.get("/me")
def get_my_qr_code(request: Request, identity: Identity = Depends(get_current_identity)):
    """
    Get the public profile URL and its QR code as SVG markup
    """
    display = generate_profile_qr(resolve_origin(request_origin(request)), identity.user_id)
    return {"url": display.url, "svg": display.svg}

@router.get("/me.svg")
def get_my_qr_code_image(request: Request, identity: Identity = Depends(get_current_identity)):
    """
    Get the QR code as an SVG image
    """
    display = generate_profile_qr(resolve_origin(request_origin(request)), identity.user_id)
    return Response(content=display.svg, media_type="image/svg+xml")
