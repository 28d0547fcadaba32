import base64
import binascii
import logging

from ticketing.exception_handler.exceptions import ValidationFailed

logger = logging.getLogger(__name__)


class ImageUtils:

    SIGNATURES = (
        (b"\xff\xd8\xff", "image/jpeg", "jpg"),
        (b"\x89PNG\r\n\x1a\n", "image/png", "png"),
    )

    @staticmethod
    def decode_base64_image(payload: str) -> bytes:
        if not payload:
            raise ValidationFailed("photo data is empty")
        # data:image/jpeg;base64,....
        if payload.startswith("data:") and "," in payload:
            payload = payload.split(",", 1)[1]
        payload = "".join(payload.split())
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationFailed(f"invalid photo data: {str(e)}")

    @staticmethod
    def detect_image_type(data: bytes):
        for signature, mime_type, extension in ImageUtils.SIGNATURES:
            if data.startswith(signature):
                return mime_type, extension
        if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
            return "image/webp", "webp"
        return "image/jpeg", "jpg"
