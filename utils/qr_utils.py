"""
utils/qr_utils.py

Purpose: Gym access codes

- Encodes a gym identifier into a QR code scanned by the mobile app
- Fixed rendering: 400px square PNG, 2-module margin, black on white
- Returned as an embeddable base64 data URL
"""

import base64
import io

import qrcode
from PIL import Image


ACCESS_CODE_PREFIX = "GymID:"
ACCESS_CODE_WIDTH = 400
ACCESS_CODE_MARGIN = 2
ACCESS_CODE_DARK = "#000000"
ACCESS_CODE_LIGHT = "#FFFFFF"


def build_access_payload(gym_id: str) -> str:
    """Text carried by a gym's access code."""
    return f"{ACCESS_CODE_PREFIX}{gym_id}"


def render_access_code_png(gym_id: str) -> bytes:
    """
    Renders the access code for a gym as PNG bytes.

    The same gym id always renders to the same image.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=ACCESS_CODE_MARGIN,
    )
    qr.add_data(build_access_payload(gym_id))
    qr.make(fit=True)

    img = qr.make_image(fill_color=ACCESS_CODE_DARK, back_color=ACCESS_CODE_LIGHT).get_image()
    img = img.convert("RGB").resize(
        (ACCESS_CODE_WIDTH, ACCESS_CODE_WIDTH),
        Image.NEAREST,
    )

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def generate_gym_access_code(gym_id: str) -> str:
    """
    Generates the access code for a gym as a data URL.

    Args:
        gym_id: Gym document id

    Returns:
        "data:image/png;base64,..." string
    """
    if not gym_id:
        raise ValueError("gym_id is required")

    encoded = base64.b64encode(render_access_code_png(gym_id)).decode("ascii")
    return f"data:image/png;base64,{encoded}"
