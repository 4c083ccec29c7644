"""
Health Profile QR - profile editor, public emergency viewer and QR code links.
"""
