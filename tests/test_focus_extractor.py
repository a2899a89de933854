import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from PIL import Image, ImageDraw

from core.extraction_cache import ExtractionCache
from core.focus_extractor import ExtractionConfiguration, FocusExtractor
from vision import pixel_classifier
from vision.color import RGB
from vision.raster import RasterImage

MAGENTA = RGB(1.0, 0.0, 1.0)
FOCUS_RECT = (150, 440, 450, 760)  # 300x320, centered on a 600x1200 canvas


def _marker_screenshot(size=(600, 1200), rect=FOCUS_RECT, stroke=12):
    image = Image.new("RGBA", size, (26, 26, 26, 255))
    draw = ImageDraw.Draw(image)
    left, top, right, bottom = rect
    draw.rectangle((left, top, right - 1, bottom - 1), outline=(255, 0, 255, 255), width=stroke)
    return RasterImage.from_pil(image)


def _config(**overrides):
    values = {"subject_identifier": "Synthetic", "target_color": MAGENTA, "tolerance": 0.1}
    values.update(overrides)
    return ExtractionConfiguration(**values)


def _pixels_image(points, size=(40, 40)):
    image = Image.new("RGBA", size, (0, 0, 0, 255))
    for point in points:
        image.putpixel(point, (255, 0, 255, 255))
    return RasterImage.from_pil(image)


def test_extract_detects_marker_rectangle():
    image = _marker_screenshot()

    result = FocusExtractor().extract(_config(zoom_scale=1.2), image)

    assert result is not None
    box = result.bounding_box
    assert box.width == pytest.approx(300, abs=30)
    assert box.height == pytest.approx(320, abs=30)
    assert box.min_x == pytest.approx(150, abs=30)
    assert box.min_y == pytest.approx(440, abs=30)
    assert result.normalized_centroid[0] == pytest.approx(0.5, abs=0.1)
    assert result.normalized_centroid[1] == pytest.approx(0.5, abs=0.1)
    assert result.overlay_image.size == image.size


def test_overlay_keeps_inside_and_clears_outside():
    image = _marker_screenshot()

    result = FocusExtractor().extract(_config(), image)
    overlay = result.overlay_image.to_pil()

    assert overlay.getpixel((300, 600)) == (26, 26, 26, 255)
    assert overlay.getpixel((150, 440)) == (255, 0, 255, 255)
    assert overlay.getpixel((10, 10))[3] == 0
    assert overlay.getpixel((599, 1199))[3] == 0


def test_extract_returns_none_when_marker_color_absent():
    result = FocusExtractor().extract(_config(target_color=RGB(0.0, 1.0, 0.0)), _marker_screenshot())

    assert result is None


def test_extract_uses_only_opaque_pixels():
    image = Image.new("RGBA", (100, 100), (255, 0, 255, 0))
    for x in range(40, 45):
        for y in range(60, 64):
            image.putpixel((x, y), (255, 0, 255, 255))

    result = FocusExtractor().extract(_config(subject_identifier="Cluster"), RasterImage.from_pil(image))

    assert result is not None
    box = result.bounding_box
    assert (box.min_x, box.min_y, box.max_x, box.max_y) == (40, 60, 44, 63)
    assert result.normalized_centroid == pytest.approx((0.42, 0.615))


def test_marker_pixel_floor():
    eleven = [(x, 10) for x in range(10, 16)] + [(x, 20) for x in range(10, 15)]
    thirteen = [(x, 10) for x in range(10, 17)] + [(x, 20) for x in range(10, 16)]
    twelve = thirteen[:12]

    extractor = FocusExtractor()

    assert extractor.extract(_config(subject_identifier="eleven"), _pixels_image(eleven)) is None
    assert extractor.extract(_config(subject_identifier="twelve"), _pixels_image(twelve)) is None
    assert extractor.extract(_config(subject_identifier="thirteen"), _pixels_image(thirteen)) is not None


def test_extract_rejects_collinear_marker():
    line = [(x, 5) for x in range(5, 30)]

    assert FocusExtractor().extract(_config(), _pixels_image(line)) is None


def test_extract_rejects_three_byte_pixels():
    image = RasterImage(width=4, height=4, bytes_per_pixel=3, data=bytes(4 * 4 * 3))

    assert FocusExtractor().extract(_config(), image) is None


def test_failures_are_not_cached():
    extractor = FocusExtractor()

    extractor.extract(_config(target_color=RGB(0.0, 1.0, 0.0)), _marker_screenshot())

    assert len(extractor.cache) == 0


def test_extract_is_deterministic():
    image = _marker_screenshot()

    first = FocusExtractor().extract(_config(), image)
    second = FocusExtractor().extract(_config(), image)

    assert first is not second
    assert first == second


def test_second_call_is_served_from_cache(monkeypatch):
    calls = {"classify": 0}
    original = pixel_classifier.classify

    def counting_classify(*args, **kwargs):
        calls["classify"] += 1
        return original(*args, **kwargs)

    monkeypatch.setattr(pixel_classifier, "classify", counting_classify)
    extractor = FocusExtractor()
    image = _marker_screenshot()

    first = extractor.extract(_config(), image)
    second = extractor.extract(_config(), image)

    assert calls["classify"] == 1
    assert second is first


def test_zoom_scale_shares_cache_entry(monkeypatch):
    extractor = FocusExtractor()
    image = _marker_screenshot()
    first = extractor.extract(_config(zoom_scale=1.0), image)

    monkeypatch.setattr(pixel_classifier, "classify", lambda *args, **kwargs: pytest.fail("cache miss"))
    second = extractor.extract(_config(zoom_scale=2.5), image)

    assert second is first


def test_cache_key_distinguishes_locale_color_and_tolerance():
    base = _config()

    assert base.cache_key == _config(localization_identifier="baseline").cache_key
    assert base.cache_key != _config(localization_identifier="de").cache_key
    assert base.cache_key != _config(target_color=RGB(0.0, 1.0, 0.0)).cache_key
    assert base.cache_key != _config(tolerance=0.2).cache_key
    assert base.cache_key != _config(subject_identifier="Other").cache_key


def test_cache_key_ignores_integer_versus_float_tolerance():
    assert _config(tolerance=0).cache_key == _config(tolerance=0.0).cache_key
    assert _config(tolerance=1).cache_key == _config(tolerance=1.0).cache_key


def test_configuration_accepts_host_colors():
    config = _config(target_color="#ff00ff")

    assert config.target_color == MAGENTA


@pytest.mark.parametrize("overrides", [{"tolerance": 1.5}, {"tolerance": -0.1}, {"zoom_scale": 0}])
def test_configuration_rejects_invalid_values(overrides):
    with pytest.raises(ValueError):
        _config(**overrides)


def test_injected_cache_is_shared_between_extractors():
    cache = ExtractionCache()
    image = _marker_screenshot()

    result = FocusExtractor(cache).extract(_config(), image)

    assert cache.get(_config().cache_key) is result
    assert FocusExtractor(cache).extract(_config(), image) is result


def test_concurrent_extract_yields_equal_results():
    extractor = FocusExtractor()
    image = _marker_screenshot()
    barrier = threading.Barrier(2)

    def worker():
        barrier.wait()
        return extractor.extract(_config(), image)

    with ThreadPoolExecutor(max_workers=2) as pool:
        futures = [pool.submit(worker) for _ in range(2)]
        results = [future.result() for future in futures]

    assert results[0] is not None
    assert results[0] == results[1]
    assert len(extractor.cache) == 1
    assert extractor.cache.get(_config().cache_key) == results[0]


def test_centroid_lies_inside_normalized_bounding_box():
    image = Image.new("RGBA", (320, 240), (0, 0, 0, 255))
    ImageDraw.Draw(image).polygon([(20, 30), (300, 60), (120, 220)], outline=(255, 0, 255, 255))
    raster = RasterImage.from_pil(image)

    result = FocusExtractor().extract(_config(subject_identifier="Triangle"), raster)

    assert result is not None
    normalized_box = result.bounding_box.scaled(1 / raster.width, 1 / raster.height)
    assert normalized_box.contains(result.normalized_centroid)
    assert all(0.0 <= c <= 1.0 for c in result.normalized_centroid)
