import io
import threading

import cv2
import numpy as np


def to_bgr_array(img):
    """PIL RGB image -> contiguous BGR uint8 array (the layout cv2 and TurboJPEG expect)."""
    rgb = np.asarray(img.convert("RGB"), dtype=np.uint8)
    return np.ascontiguousarray(rgb[:, :, ::-1])


class JPEGEncoder:
    _backend = None
    _local = threading.local()

    @classmethod
    def _get_turbo(cls):
        if not hasattr(cls._local, "turbo"):
            from turbojpeg import TurboJPEG
            cls._local.turbo = TurboJPEG()
        return cls._local.turbo

    @classmethod
    def encode(cls, img, quality: int = 90) -> bytes:
        if not isinstance(img, np.ndarray):
            img = to_bgr_array(img)

        if cls._backend is None:
            try:
                cls._get_turbo()  # Try initializing TurboJPEG
                cls._backend = "turbo"
                print("[JPEGEncoder] Using TurboJPEG")
            except (ImportError, OSError, RuntimeError):
                cls._backend = "cv2"
                print("[JPEGEncoder] Falling back to OpenCV")

        if cls._backend == "turbo":
            return cls._get_turbo().encode(img, quality=quality)

        encode_param = [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)]
        ok, buf = cv2.imencode(".jpg", img, encode_param)
        if not ok:
            raise RuntimeError("OpenCV JPEG encoding failed")
        return buf.tobytes()


def encode_png(img) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf.getvalue()


IMAGE_FORMATS = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
}


def encode_image(img, fmt="png") -> bytes:
    fmt = fmt.lower()
    if fmt == "png":
        return encode_png(img)
    if fmt in ("jpeg", "jpg"):
        return JPEGEncoder.encode(img)
    raise ValueError(f"Unsupported image format {fmt!r}")
