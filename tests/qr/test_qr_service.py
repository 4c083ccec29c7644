"""
Tests for QR code generation and the QR endpoints.
"""
import xml.etree.ElementTree as ET

import pytest

from healthqr.config import settings
from healthqr.qr.service import build_profile_url, generate_profile_qr, render_qr_svg


def test_build_profile_url():
    assert build_profile_url("https://h.example", "abc123") == "https://h.example/profile/abc123"


def test_build_profile_url_drops_trailing_slash():
    assert build_profile_url("https://h.example/", "abc123") == "https://h.example/profile/abc123"


@pytest.mark.parametrize("origin, identifier", [("", "abc123"), ("  ", "abc123"), ("https://h.example", "")])
def test_build_profile_url_rejects_blank_input(origin, identifier):
    with pytest.raises(ValueError):
        build_profile_url(origin, identifier)


def test_generate_profile_qr_is_deterministic():
    """
    Test that the same origin and id always give the same link and image.
    """
    first = generate_profile_qr("https://h.example", "abc123")
    second = generate_profile_qr("https://h.example", "abc123")
    assert first == second
    assert first.url == "https://h.example/profile/abc123"


def test_render_qr_svg_size():
    """
    Test that the SVG is a well-formed document with the configured size.
    """
    svg = render_qr_svg("https://h.example/profile/abc123")
    root = ET.fromstring(svg)
    assert root.tag.endswith("svg")
    assert root.get("width") == "256"
    assert root.get("height") == "256"


def test_render_qr_svg_custom_size():
    root = ET.fromstring(render_qr_svg("hello", size=128))
    assert root.get("width") == "128"


def test_qr_endpoint_requires_session(client):
    response = client.get("/api/v1/qr/me")
    assert response.status_code == 401


def test_qr_endpoint_uses_request_origin(client, auth_headers):
    """
    Test that the QR link points at the public viewer on the request's origin.
    """
    headers, user_id = auth_headers
    response = client.get("/api/v1/qr/me", headers=headers)
    assert response.status_code == 200
    data = response.json()
    assert data["url"] == f"http://testserver/profile/{user_id}"
    assert "<svg" in data["svg"]


def test_qr_endpoint_uses_configured_origin(client, auth_headers, monkeypatch):
    monkeypatch.setattr(settings, "public_base_url", "https://h.example/")
    headers, user_id = auth_headers
    response = client.get("/api/v1/qr/me", headers=headers)
    assert response.json()["url"] == f"https://h.example/profile/{user_id}"


def test_qr_svg_endpoint(client, auth_headers):
    headers, _ = auth_headers
    response = client.get("/api/v1/qr/me.svg", headers=headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    ET.fromstring(response.text)
