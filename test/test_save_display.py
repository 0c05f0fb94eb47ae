import numpy as np
import cv2
import pytest
from climage.models.image import Image
from climage.repositories.image_repository import ImageRepository
from climage.services.image_service import ImageService


@pytest.fixture
def service():
    return ImageService()


def color_image(path):
    arr = np.zeros((5, 7, 3), dtype=np.uint8)
    arr[1, 2] = (50, 60, 70)
    return Image(filename=str(path), pixels=arr)


def test_save_png_and_reload(service, tmp_path):
    p = tmp_path / "out.png"
    result = service.save(color_image(p))
    assert result
    assert result.filename == str(p)
    img = service.create_image(str(p))
    assert service.get_pixel_as_ints(img, 1, 2) == (50, 60, 70)


@pytest.mark.parametrize("name", ["out.jpg", "out.jpeg", "out.ppm"])
def test_save_other_formats(service, tmp_path, name):
    p = tmp_path / name
    assert service.save(color_image(p))
    assert p.is_file()


def test_save_grayscale_pgm(service, tmp_path):
    p = tmp_path / "gray.pgm"
    img = Image(filename=str(p), pixels=np.full((3, 3), 128, dtype=np.uint8))
    assert service.save(img)
    assert service.get_pixel_as_ints(service.create_image(str(p)), 1, 1) == (128,)


@pytest.mark.parametrize("name,expected", [("out.xyz", "out.png"), ("out", "out.png")])
def test_save_substitutes_png(service, tmp_path, name, expected):
    img = color_image(tmp_path / name)
    result = service.save(img)
    assert result
    assert img.filename == str(tmp_path / expected)
    assert result.filename == img.filename
    assert (tmp_path / expected).is_file()
    assert not (tmp_path / name).exists()


def test_save_uses_format_params(service, tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(ImageRepository, "write",
                        staticmethod(lambda path, pixels, params: calls.append(params) or True))
    assert service.save(color_image(tmp_path / "a.jpg"))
    assert service.save(color_image(tmp_path / "a.png"))
    assert calls == [[cv2.IMWRITE_JPEG_QUALITY, 100], [cv2.IMWRITE_PNG_COMPRESSION, 9]]


def test_save_failures(service, tmp_path):
    assert not service.save(Image(filename=str(tmp_path / "a.png")))
    assert not service.save(Image(pixels=np.zeros((2, 2), dtype=np.uint8)))


def test_save_encoder_error_is_caught(service, tmp_path, monkeypatch):
    def boom(path, pixels, params):
        raise cv2.error("encoder exploded")
    monkeypatch.setattr(ImageRepository, "write", staticmethod(boom))
    result = service.save(color_image(tmp_path / "a.png"))
    assert not result
    assert "encoder exploded" in result.message


def test_save_encoder_reports_false(service, tmp_path, monkeypatch):
    monkeypatch.setattr(ImageRepository, "write", staticmethod(lambda *a: False))
    assert not service.save(color_image(tmp_path / "a.png"))


def test_append_default_extension(service):
    img = color_image("photo.bmp")
    assert service.append_default_extension(img)
    assert img.filename == "photo.png"
    assert not service.append_default_extension(Image(filename="photo.bmp"))


def test_display_blocks_on_key(service, monkeypatch):
    calls = []
    monkeypatch.setattr(cv2, "imshow", lambda title, pixels: calls.append(("show", title)))
    monkeypatch.setattr(cv2, "waitKey", lambda delay=0: calls.append(("wait", delay)) or 27)
    monkeypatch.setattr(cv2, "destroyWindow", lambda title: calls.append(("close", title)))
    assert service.display(color_image("shown.png"))
    assert calls == [("show", "shown.png"), ("wait", 0), ("close", "shown.png")]


def test_display_failures(service, monkeypatch):
    assert not service.display(Image(filename="x.png"))

    def no_gui(title, pixels):
        raise cv2.error("The function is not implemented")
    monkeypatch.setattr(cv2, "imshow", no_gui)
    assert not service.display(color_image("x.png"))
