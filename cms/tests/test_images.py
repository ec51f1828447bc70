import io
import unittest

from PIL import Image

from cms import images
from cms.errors import ImageValidationError


def _image_bytes(image_format: str, size=(600, 300), mode="RGB") -> bytes:
    image = Image.effect_noise(size, 60).convert(mode)
    out = io.BytesIO()
    image.save(out, format=image_format)
    return out.getvalue()


class ValidateImageBytesTests(unittest.TestCase):
    def test_known_formats(self):
        self.assertEqual(images.validate_image_bytes(_image_bytes("PNG")), "png")
        self.assertEqual(images.validate_image_bytes(_image_bytes("JPEG")), "jpeg")
        self.assertEqual(images.validate_image_bytes(_image_bytes("WEBP")), "webp")
        self.assertEqual(images.validate_image_bytes(_image_bytes("GIF", mode="P")), "gif")

    def test_too_small(self):
        with self.assertRaises(ImageValidationError) as ctx:
            images.validate_image_bytes(b"\x89PNG" + b"\x00" * 10)
        self.assertEqual(ctx.exception.message, "File too small to be a valid image")

    def test_heic_is_named(self):
        data = b"\x00\x00\x00\x18ftypheic" + b"\x00" * 200
        with self.assertRaises(ImageValidationError) as ctx:
            images.validate_image_bytes(data)
        self.assertIn("HEIC/HEIF format not supported", ctx.exception.message)

    def test_unknown_bytes(self):
        with self.assertRaises(ImageValidationError) as ctx:
            images.validate_image_bytes(b"hello world" * 20)
        self.assertEqual(ctx.exception.message, "Unrecognized image format")


class ConvertTests(unittest.TestCase):
    def test_supported_formats_pass_through(self):
        data = _image_bytes("PNG")
        converted, image_format = images.convert_to_supported_format(data)
        self.assertEqual(image_format, "png")
        self.assertIs(converted, data)

    def test_gif_becomes_jpeg(self):
        converted, image_format = images.convert_to_supported_format(
            _image_bytes("GIF", mode="P")
        )
        self.assertEqual(image_format, "jpeg")
        self.assertEqual(images.sniff_format(converted), "jpeg")

    def test_garbage_with_image_header_fails_cleanly(self):
        with self.assertRaises(ImageValidationError):
            images.convert_to_supported_format(b"\x89PNG\r\n\x1a\n" + b"\x00" * 200)


class OptimizeTests(unittest.TestCase):
    def test_shrinks_to_fit_and_keeps_aspect(self):
        optimized = images.optimize_image(_image_bytes("PNG"), max_width=300, max_height=300)
        with Image.open(io.BytesIO(optimized)) as image:
            self.assertEqual(image.format, "JPEG")
            self.assertEqual(image.size, (300, 150))

    def test_never_enlarges(self):
        optimized = images.optimize_image(
            _image_bytes("JPEG", size=(100, 50)), max_width=400, max_height=400, format="png"
        )
        with Image.open(io.BytesIO(optimized)) as image:
            self.assertEqual(image.format, "PNG")
            self.assertEqual(image.size, (100, 50))

    def test_transparent_png_to_jpeg(self):
        optimized = images.optimize_image(_image_bytes("PNG", mode="RGBA"))
        self.assertEqual(images.sniff_format(optimized), "jpeg")

    def test_unknown_output_format(self):
        with self.assertRaises(ImageValidationError):
            images.optimize_image(_image_bytes("PNG"), format="tiff")


class FileNameTests(unittest.TestCase):
    def test_generated_name_is_sanitized(self):
        name = images.generate_file_name("My Photo (1).PNG", prefix="team")
        self.assertRegex(name, r"^team-\d+-[0-9a-f]{8}-My_Photo__1_\.png$")

    def test_mime_types(self):
        self.assertEqual(images.mime_type_for("png"), "image/png")
        self.assertEqual(images.mime_type_for("webp"), "image/webp")
        self.assertEqual(images.mime_type_for("jpeg"), "image/jpeg")


if __name__ == "__main__":
    unittest.main()
