from io import BytesIO
import tracemalloc

import numpy as np
import pytest
import requests
from PIL import Image as PILImage

from image_plotter import (
    Annotation,
    DecodeFailed,
    PlotterConfig,
    Rectangle,
    SourceUnavailable,
    UnsupportedFormat,
    plot_from_bytes,
    plot_from_path,
    plot_from_url,
)
from image_plotter.services.annotation_service import AnnotationService
from image_plotter.services.image_service import ImageService
from tests.conftest import decode_pil, encode_pil

BOX = {"rectangle": {"min": {"x": 5, "y": 5}, "max": {"x": 30, "y": 25}}, "label": ""}


def test_zero_annotations_round_trip(png_bytes, random_rgb):
    out = plot_from_bytes(png_bytes, [])
    assert (np.array(decode_pil(out)) == random_rgb).all()


def test_png_in_png_out(black_png):
    out = plot_from_bytes(black_png(40, 40), [BOX])
    img = decode_pil(out)
    assert img.format == "PNG"
    px = np.array(img)
    assert tuple(px[5, 10]) == (255, 0, 0)
    assert tuple(px[15, 15]) == (0, 0, 0)


def test_jpeg_in_jpeg_out(jpeg_bytes):
    out = plot_from_bytes(jpeg_bytes, [BOX])
    assert out[:2] == b"\xff\xd8"
    img = decode_pil(out)
    assert img.format == "JPEG"
    assert img.size == (64, 48)


def test_annotations_applied_in_order(black_png):
    annotations = [
        Annotation(Rectangle.from_xyxy(2, 2, 20, 20), color=(255, 0, 0, 255)),
        {"rectangle": {"min": {"x": 2, "y": 2}, "max": {"x": 30, "y": 30}}, "color": [0, 0, 255]},
    ]
    px = np.array(decode_pil(plot_from_bytes(black_png(40, 40), annotations)))
    assert tuple(px[2, 10]) == (0, 0, 255)
    assert tuple(px[10, 20]) == (255, 0, 0)


def test_non_image_bytes():
    with pytest.raises(DecodeFailed):
        plot_from_bytes(b"hello world", [BOX])


def test_unsupported_format():
    gif = encode_pil(np.zeros((20, 20, 3), dtype=np.uint8), "GIF")
    with pytest.raises(UnsupportedFormat):
        plot_from_bytes(gif, [BOX])


def test_plot_from_path(tmp_path, black_png):
    path = tmp_path / "in.png"
    path.write_bytes(black_png(40, 40))
    px = np.array(decode_pil(plot_from_path(path, [BOX])))
    assert tuple(px[25, 10]) == (255, 0, 0)


def test_plot_from_missing_path(tmp_path):
    with pytest.raises(SourceUnavailable):
        plot_from_path(tmp_path / "missing.jpg", [BOX])


def test_plot_from_url(monkeypatch, fake_response, black_png):
    data = black_png(40, 40)
    monkeypatch.setattr(requests, "get", lambda url, timeout: fake_response(data))
    img = decode_pil(plot_from_url("http://example.test/in.png", [BOX]))
    assert img.format == "PNG"
    assert tuple(np.array(img)[5, 29]) == (255, 0, 0)


def test_plot_from_url_bad_body(monkeypatch, fake_response):
    monkeypatch.setattr(requests, "get", lambda url, timeout: fake_response(b"<html>not found</html>"))
    with pytest.raises(DecodeFailed):
        plot_from_url("http://example.test/in.png", [BOX])


def test_custom_services(black_png):
    cfg = PlotterConfig(color=(0, 255, 0, 255), max_workers=1, chunk_size=1)
    out = plot_from_bytes(
        black_png(40, 40),
        [BOX],
        annotation_service=AnnotationService(cfg),
        image_service=ImageService(cfg),
    )
    assert tuple(np.array(decode_pil(out))[5, 10]) == (0, 255, 0)


def test_huge_off_image_rectangle_stays_small(black_png):
    data = black_png(10, 10)
    tracemalloc.start()
    try:
        out = plot_from_bytes(data, [Annotation(Rectangle.from_xyxy(-5000, -5000, 5000, 5000))])
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()

    assert peak < 10 * 1024 * 1024
    assert not np.array(decode_pil(out)).any()


def test_annotation_service_config_reaches_encoder(monkeypatch):
    monkeypatch.setenv("PLOT_JPEG_QUALITY", "5")
    rng = np.random.default_rng(7)
    data = encode_pil(rng.integers(0, 256, size=(64, 64, 3), dtype=np.uint8), "JPEG")
    cfg = PlotterConfig(jpeg_quality=95)

    out = plot_from_bytes(data, [BOX], annotation_service=AnnotationService(cfg))
    explicit = plot_from_bytes(data, [BOX], annotation_service=AnnotationService(cfg),
                               image_service=ImageService(cfg))
    from_env = plot_from_bytes(data, [BOX])

    assert out == explicit
    assert len(out) > len(from_env)


def test_transparency_key_survives_round_trip():
    pixels = np.zeros((8, 8, 3), dtype=np.uint8)
    pixels[:4] = 200
    buf = BytesIO()
    PILImage.fromarray(pixels).save(buf, format="PNG", transparency=(0, 0, 0))

    out = decode_pil(plot_from_bytes(buf.getvalue(), []))
    assert out.mode == "RGBA"
    alpha = np.array(out)[..., 3]
    assert (alpha[:4] == 255).all()
    assert (alpha[4:] == 0).all()
