import base64
import io

from PIL import Image


def image_signature(image: Image.Image) -> str:
    width, height = image.size
    return f"{width}x{height}"


def image_to_data_url(image: Image.Image) -> str:
    output = io.BytesIO()
    image.save(output, format="PNG")
    encoded = base64.b64encode(output.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
