import logging
import re
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from PIL import Image

from asciiglyph import converter, fonts
from asciiglyph.config import Configuration
from asciiglyph.converter import convert, generate, generate_async, generate_html
from asciiglyph.errors import DimensionError, SamplingError
from asciiglyph.styled import Colour


@pytest.fixture(autouse=True)
def _no_system_fonts(monkeypatch):
    monkeypatch.setattr(fonts, "_find_system_font", lambda pattern: None)


def test_red_image_styled(red_image):
    styled = generate(red_image, 1.0)
    assert styled is not None
    rows = styled.lines()
    assert len(rows) == 100
    assert all(len(row) == 100 for row in rows)
    assert all(run.colour == Colour(1.0, 0.0, 0.0) for row in rows for run in row)
    assert {run.text for row in rows for run in row} == {"#"}


def test_red_image_html(red_image):
    html = generate_html(red_image, 1.0)
    assert html is not None
    assert html.count("\n") == 100
    spans = re.findall(r'<span style="color: (#[0-9A-F]{6});">(.)</span>', html)
    assert len(spans) == 100 * 100
    assert set(spans) == {("#FF0000", "#")}


def test_styled_and_html_share_grid_shape(gradient_image):
    config = Configuration(character_aspect_ratio=2.0)
    styled = generate(gradient_image, 0.5, config)
    html = generate_html(gradient_image, 0.5, config)
    # 100 columns, 200/100 aspect and 2.0 character ratio leave 25 rows
    assert [len(row) for row in styled.lines()] == [100] * 25
    assert html.count("\n") == 25
    for line in html.split("\n")[:-1]:
        assert line.count("<span") == 100


def test_cross_format_equivalence_grayscale(gradient_image):
    config = Configuration(is_colored=False)
    grid = convert(gradient_image, 0.3, config)
    styled = generate(gradient_image, 0.3, config)
    html = generate_html(gradient_image, 0.3, config)

    html_rows = html[html.index(">") + 1 : -len("</div>")].split("\n")[:-1]
    assert html_rows == grid.chars
    for y, row in enumerate(styled.lines()):
        assert "".join(run.text for run in row) == html_rows[y]
        for x, run in enumerate(row):
            assert run.colour == Colour.gray(grid.luminance[y, x] / 255.0)


def test_gradient_runs_dark_to_light(gradient_image):
    grid = convert(gradient_image, 1.0)
    row = grid.chars[0]
    assert row[0] == "@"
    assert row[-1] == " "


@pytest.mark.parametrize("low,high", [(-2.0, 0.0), (1.0, 5.0)])
def test_precision_is_clamped(gradient_image, low, high):
    assert generate_html(gradient_image, low) == generate_html(gradient_image, high)
    assert generate(gradient_image, low).text == generate(gradient_image, high).text


def test_accepts_file_path(tmp_path, red_image):
    path = tmp_path / "red.png"
    red_image.save(path)
    assert generate_html(path, 0.2) == generate_html(red_image, 0.2)


def test_accepts_rgba_and_palette_images():
    rgba = Image.new("RGBA", (60, 60), (0, 0, 0, 0))
    palette = Image.new("P", (60, 60), 0)
    assert generate(rgba, 1.0).text.strip("\n").replace("\n", "") == "@" * 60 * 60
    assert generate(palette, 1.0) is not None


def test_missing_image_yields_none(tmp_path):
    missing = tmp_path / "missing.png"
    assert generate(missing, 1.0) is None
    assert generate_html(missing, 1.0) is None
    assert generate_async(missing, 1.0).result(timeout=10) is None


def test_none_image_yields_none():
    assert generate(None, 1.0) is None
    assert generate_html(None, 1.0) is None


def test_pathological_dimensions_yield_none():
    panorama = Image.new("RGB", (5000, 1))
    assert generate(panorama, 1.0) is None
    assert generate_html(panorama, 1.0) is None


def test_failure_is_logged(caplog, tmp_path):
    with caplog.at_level(logging.WARNING, logger="asciiglyph"):
        generate(tmp_path / "missing.png", 1.0)
    assert "ASCII conversion failed" in caplog.text


def test_convert_raises_typed_errors(tmp_path):
    with pytest.raises(SamplingError):
        convert(tmp_path / "missing.png", 1.0)
    with pytest.raises(DimensionError):
        convert(Image.new("RGB", (5000, 1)), 1.0)


def test_generate_async_future(red_image):
    future = generate_async(red_image, 0.1)
    styled = future.result(timeout=10)
    assert styled.text == ("#" * 10 + "\n") * 10


def test_generate_async_callback_runs_on_worker(red_image):
    done = threading.Event()
    seen = {}

    def on_complete(result):
        seen["result"] = result
        seen["thread"] = threading.current_thread().name
        done.set()

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="test-worker") as pool:
        generate_async(red_image, 0.1, on_complete=on_complete, executor=pool)
        assert done.wait(timeout=10)
    assert seen["result"].text.startswith("#")
    assert seen["thread"].startswith("test-worker")


def test_generate_async_deliver(red_image):
    delivered = []
    done = threading.Event()

    def deliver(callback, result):
        delivered.append(result)
        callback(result)

    generate_async(red_image, 0.1, Configuration(is_colored=False), on_complete=lambda r: done.set(), deliver=deliver)
    assert done.wait(timeout=10)
    assert len(delivered) == 1
    assert delivered[0].lines()[0][0].colour == Colour.gray(76.245 / 255.0)


def test_generate_async_failure_reaches_callback(tmp_path):
    results = []
    done = threading.Event()

    def on_complete(result):
        results.append(result)
        done.set()

    generate_async(tmp_path / "missing.png", 1.0, on_complete=on_complete)
    assert done.wait(timeout=10)
    assert results == [None]


def test_oversized_image_yields_none(tmp_path, monkeypatch):
    path = tmp_path / "big.png"
    Image.new("RGB", (200, 200), (255, 0, 0)).save(path)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    assert generate(path, 1.0) is None
    assert generate_html(path, 1.0) is None
    with pytest.raises(SamplingError):
        convert(path, 1.0)


def test_oversized_image_reaches_async_callback(tmp_path, monkeypatch):
    path = tmp_path / "big.png"
    Image.new("RGB", (200, 200), (255, 0, 0)).save(path)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    results = []
    done = threading.Event()

    def on_complete(result):
        results.append(result)
        done.set()

    generate_async(path, 1.0, on_complete=on_complete)
    assert done.wait(timeout=10)
    assert results == [None]


def test_unexpected_error_still_reaches_async_callback(monkeypatch, red_image, caplog):
    def crash(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(converter, "generate", crash)
    results = []
    done = threading.Event()

    def on_complete(result):
        results.append(result)
        done.set()

    with caplog.at_level(logging.ERROR, logger="asciiglyph"):
        future = generate_async(red_image, 1.0, on_complete=on_complete)
        assert done.wait(timeout=10)
    assert results == [None]
    assert isinstance(future.exception(), RuntimeError)
    assert "boom" in caplog.text


def test_default_executor_is_shared_across_threads(monkeypatch):
    monkeypatch.setattr(converter, "_executor", None)
    barrier = threading.Barrier(8)
    seen = []

    def first_call():
        barrier.wait()
        seen.append(converter._default_executor())

    threads = [threading.Thread(target=first_call) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)
    assert len(seen) == 8
    assert len({id(e) for e in seen}) == 1
    seen[0].shutdown(wait=False)
