from io import BytesIO

import qrcode


def render_png(data: str, box_size: int = 10, border: int = 4) -> bytes:
    """Render data as a black-on-white QR code PNG.

    Args:
        data: Text to encode, usually a table payload
        box_size: Pixels per QR module
        border: Quiet zone width in modules

    Returns:
        PNG image bytes
    """
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    img.save(buffer)
    return buffer.getvalue()
