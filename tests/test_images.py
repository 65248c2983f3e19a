import os

from figma_toolbox.images import css_variables, read_dimensions, write_image


class TestReadDimensions:
    """Тесты чтения размеров изображения"""

    def test_png(self, png_bytes):
        assert read_dimensions(png_bytes, "a.png") == (4, 3)

    def test_svg_width_height(self, svg_bytes):
        assert read_dimensions(svg_bytes, "icon.svg") == (24, 16)

    def test_svg_px_units(self):
        data = b'<svg xmlns="http://www.w3.org/2000/svg" width="10.4px" height="20px"/>'
        assert read_dimensions(data, "icon.SVG") == (10, 20)

    def test_svg_view_box_fallback(self):
        data = b'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 48 32"></svg>'
        assert read_dimensions(data, "icon.svg") == (48, 32)

    def test_unknown_data(self):
        assert read_dimensions(b"not an image", "a.png") == (0, 0)
        assert read_dimensions(b"<svg", "a.svg") == (0, 0)


def test_css_variables():
    assert css_variables(100, 50) == "--original-width: 100px; --original-height: 50px;"


def test_write_image_creates_directory(tmp_path):
    target = tmp_path / "nested" / "images"

    path = write_image(str(target), "a.png", b"data")

    assert path == os.path.join(str(target), "a.png")
    assert (target / "a.png").read_bytes() == b"data"
