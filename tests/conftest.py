import numpy as np
import pytest

from blockpic.palette import PALETTE_SIZE, Palette

FILLER = (255, 255, 255)


def make_palette(*colours, filler=FILLER) -> Palette:
    """Palette with the given colours at indices 0.., padded with a filler colour."""
    return Palette(tuple(colours) + (filler,) * (PALETTE_SIZE - len(colours)))


@pytest.fixture
def random_palette():
    rng = np.random.default_rng(7)
    return Palette(tuple(map(tuple, rng.integers(0, 256, (PALETTE_SIZE, 3)))))


@pytest.fixture
def random_image():
    rng = np.random.default_rng(11)
    return rng.integers(0, 256, (13, 17, 3), dtype=np.uint8)
