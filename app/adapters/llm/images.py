"""Image helpers shared by the LLM adapters."""
import base64


def detect_image_type(data: bytes) -> str:
    """MIME type from magic bytes; PNG when unknown."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"GIF87a") or data.startswith(b"GIF89a"):
        return "image/gif"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return "image/png"


def to_data_url(data: bytes) -> str:
    encoded = base64.b64encode(data).decode("utf-8")
    return f"data:{detect_image_type(data)};base64,{encoded}"
