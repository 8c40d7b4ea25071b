import numpy as np
import pytest
from PIL import Image

from blockpic import cli
from blockpic.palette import xterm_palette
from blockpic.render import format_grid
from blockpic.resample import Resampler


@pytest.fixture(autouse=True)
def no_pause(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    pauses = []
    monkeypatch.setattr(cli.time, "sleep", pauses.append)
    monkeypatch.setattr(cli, "get_terminal_size", lambda: (6, 4))
    return pauses


@pytest.fixture
def image_path(tmp_path):
    rng = np.random.default_rng(5)
    pixels = rng.integers(0, 256, (20, 30, 3), dtype=np.uint8)
    path = tmp_path / "image.png"
    Image.fromarray(pixels).save(path)
    return path


def expected_output(path, rows, cols):
    pixels = np.asarray(Image.open(path).convert("RGB"))
    return format_grid(Resampler(xterm_palette()).resample(pixels, rows, cols)) + "\n"


def test_renders_to_terminal_size(image_path, capsys, no_pause):
    cli.main([str(image_path)])
    out = capsys.readouterr().out
    assert out == expected_output(image_path, 4, 6)
    assert no_pause == [1.0]


def test_rows_and_cols_flags(image_path, capsys):
    cli.main([str(image_path), "-r", "3", "-c", "10", "--pause", "0"])
    out = capsys.readouterr().out
    assert out == expected_output(image_path, 3, 10)
    assert out.count("\n") == 4


def test_custom_palette(image_path, tmp_path, capsys):
    palette_path = tmp_path / "colors.txt"
    palette_path.write_text("".join(f"{i}:000000\n" for i in range(256)))
    cli.main([str(image_path), "--palette", str(palette_path)])
    out = capsys.readouterr().out
    # every entry is black, so index 0 wins everywhere
    assert out == ("\n" + "\033[38;5;0m█" * 6) * 4 + "\n"


def test_no_arguments_prints_usage(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code != 0
    assert "usage" in capsys.readouterr().err


def test_missing_image(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([str(tmp_path / "missing.png")])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert "File not found" in captured.err
    assert captured.out == ""


def test_malformed_palette_stops_before_resampling(image_path, tmp_path, monkeypatch, capsys):
    class ExplodingResampler:
        def __init__(self, palette):
            raise AssertionError("resampler should not be built")

    monkeypatch.setattr(cli, "Resampler", ExplodingResampler)
    palette_path = tmp_path / "colors.txt"
    palette_path.write_text("".join(f"{i} 000000\n" for i in range(256)))
    with pytest.raises(SystemExit) as exc:
        cli.main([str(image_path), "-p", str(palette_path)])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert "missing ':'" in captured.err
    assert captured.out == ""


def test_grid_larger_than_image_fails(image_path, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([str(image_path), "-r", "21"])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert "only shrinking" in captured.err
    assert captured.out == ""


def test_fit_clamps_grid(image_path, capsys):
    cli.main([str(image_path), "-r", "50", "-c", "200", "--fit"])
    assert capsys.readouterr().out == expected_output(image_path, 20, 30)


def test_rejects_non_positive_rows(image_path, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([str(image_path), "-r", "0"])
    assert exc.value.code == 2


@pytest.mark.parametrize("pause", ["nan", "inf", "-1"])
def test_rejects_bad_pause(image_path, capsys, pause):
    with pytest.raises(SystemExit) as exc:
        cli.main([str(image_path), "--pause", pause])
    assert exc.value.code == 2
    assert capsys.readouterr().out == ""


def test_colors_txt_in_working_directory_is_default(image_path, tmp_path, capsys):
    (tmp_path / "colors.txt").write_text("".join(f"{i}:ffffff\n" for i in range(256)))
    cli.main([str(image_path), "-r", "1", "-c", "2"])
    assert capsys.readouterr().out == "\n" + "\033[38;5;0m█" * 2 + "\n"


def test_dump_palette_default(capsys):
    cli.main(["--dump-palette"])
    out = capsys.readouterr().out
    assert out == xterm_palette().dump()
    assert out.splitlines()[196] == "196:ff0000"


def test_dump_palette_from_file(tmp_path, capsys):
    palette_path = tmp_path / "mine.txt"
    palette_path.write_text("".join(f"c{i}:0000{i:02x}\n" for i in range(256)))
    cli.main(["--dump-palette", "-p", str(palette_path)])
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "0:000000"
    assert lines[255] == "255:0000ff"
