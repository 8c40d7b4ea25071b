from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError
from PIL.Image import DecompressionBombError


class DecodeError(ValueError):
    """Image file is missing or is not a readable raster image."""


def load_image(image: Image.Image | str | Path) -> np.ndarray:
    """Decode an image to a (height, width, 3) uint8 RGB array. Alpha is dropped."""
    if not isinstance(image, Image.Image):
        path = Path(image)
        try:
            with Image.open(path) as opened:
                return np.asarray(opened.convert("RGB"), dtype=np.uint8)
        except FileNotFoundError:
            raise DecodeError(f"File not found: {path}") from None
        except UnidentifiedImageError:
            raise DecodeError(f"Not a recognised image: {path}") from None
        except DecompressionBombError as e:
            raise DecodeError(f"Image too large to decode: {path}: {e}") from e
        except OSError as e:
            raise DecodeError(f"Could not decode {path}: {e}") from e
    return np.asarray(image.convert("RGB"), dtype=np.uint8)
