"""
Type Editor Backend — File Service Unit Tests
==============================================

What:  Tests for the upload validator: sanitizer, extension and magic-number
       checks, size limit, storage, listing and deletion.
How:   Pure helpers are called directly; FileService instances write into
       pytest's tmp_path.

Test Strategy:
    ✅ Sanitizer strips directories and unsafe characters, caps length
    ✅ Allowed extensions (.jpg .jpeg .png .gif .webp), case-insensitive
    ✅ Rejected extensions and extension-less names
    ✅ Content must carry the claimed format's signature
    ✅ Size limit checked before anything else
    ✅ Stored under <unix-seconds>_<sanitized> inside the upload directory, ≤ 255 chars
    ✅ Deletion resolves names inside the upload directory only
"""

import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from type_editor.exceptions import (
    FileStorageError,
    NotFoundError,
    PayloadTooLargeError,
    ValidationError,
)
from type_editor.services.file_service import (
    FileService,
    extract_extension,
    matches_signature,
    sanitize_filename,
)


class TestSanitizeFilename:
    """Tests for sanitize_filename()."""

    def test_plain_name_unchanged(self):
        assert sanitize_filename("figure-1_final.png") == "figure-1_final.png"

    def test_directory_components_dropped(self):
        assert sanitize_filename("../../etc/passwd.png") == "passwd.png"

    def test_backslash_separators_dropped(self):
        assert sanitize_filename("C:\\Users\\me\\photo.jpg") == "photo.jpg"

    def test_unsafe_characters_replaced(self):
        assert sanitize_filename("my photo (1).jpg") == "my_photo__1_.jpg"

    def test_non_ascii_letters_replaced(self):
        assert sanitize_filename("café.png") == "caf_.png"

    def test_long_name_keeps_extension(self):
        name = "a" * 300 + ".png"
        result = sanitize_filename(name)
        assert len(result) == 255
        assert result.endswith(".png")
        assert result == "a" * 251 + ".png"

    def test_long_name_without_extension_hard_truncated(self):
        result = sanitize_filename("b" * 400)
        assert result == "b" * 255

    def test_name_at_limit_untouched(self):
        name = "c" * 251 + ".gif"
        assert sanitize_filename(name) == name


class TestExtractExtension:
    """Tests for extract_extension()."""

    def test_lowercases(self):
        assert extract_extension("Photo.JPG") == ".jpg"

    def test_uses_final_dot(self):
        assert extract_extension("archive.tar.gz") == ".gz"

    def test_no_dot(self):
        assert extract_extension("noextension") is None

    def test_trailing_dot(self):
        assert extract_extension("weird.") is None


class TestMatchesSignature:
    """Tests for matches_signature()."""

    def test_each_format_matches_its_extension(self, image_samples):
        for ext, content in image_samples.items():
            assert matches_signature(content, ext), ext

    def test_jpeg_extension_variants(self, sample_image_bytes):
        assert matches_signature(sample_image_bytes, ".jpeg")

    def test_jpeg_bytes_rejected_as_png(self, sample_image_bytes):
        assert not matches_signature(sample_image_bytes, ".png")

    def test_riff_without_webp_marker_rejected(self):
        # RIFF container holding WAVE audio
        assert not matches_signature(b"RIFF\x24\x00\x00\x00WAVEfmt ", ".webp")

    def test_truncated_webp_rejected(self):
        assert not matches_signature(b"RIFF\x00\x00", ".webp")

    def test_empty_content_rejected(self):
        assert not matches_signature(b"", ".gif")

    def test_unknown_extension_rejected(self, sample_image_bytes):
        assert not matches_signature(sample_image_bytes, ".bmp")


class TestFileValidation:
    """Tests for the validation steps of FileService."""

    def setup_method(self):
        self.service = FileService(upload_dir="/nonexistent", max_upload_size=1024)

    # ── Extension Validation ──────────────────────────────────────────────

    def test_validate_extension_allowed(self):
        for name in ("a.jpg", "a.jpeg", "a.png", "a.gif", "a.webp"):
            assert self.service.validate_extension(name) == name[1:]

    def test_validate_extension_uppercase(self):
        assert self.service.validate_extension("photo.PNG") == ".png"

    def test_validate_extension_pdf_rejected(self):
        with pytest.raises(ValidationError, match="not supported"):
            self.service.validate_extension("document.pdf")

    def test_validate_extension_bmp_rejected(self):
        with pytest.raises(ValidationError, match="not supported"):
            self.service.validate_extension("image.bmp")

    def test_validate_extension_missing_rejected(self):
        with pytest.raises(ValidationError, match="no extension"):
            self.service.validate_extension("noextension")

    # ── Size Validation ───────────────────────────────────────────────────

    def test_validate_size_at_limit(self):
        self.service.validate_size(b"x" * 1024)

    def test_validate_size_over_limit(self):
        with pytest.raises(PayloadTooLargeError) as exc_info:
            self.service.validate_size(b"x" * 1025)
        assert exc_info.value.max_size == 1024
        assert exc_info.value.actual_size == 1025

    # ── Signature Validation ──────────────────────────────────────────────

    def test_validate_signature_mismatch(self, sample_image_bytes):
        with pytest.raises(ValidationError, match="does not match"):
            self.service.validate_signature(sample_image_bytes, ".png")


class TestValidateAndStore:
    """Tests for the full upload pipeline."""

    @pytest.mark.asyncio
    async def test_jpeg_stored_with_timestamp_prefix(self, tmp_path, sample_image_bytes):
        service = FileService(upload_dir=str(tmp_path / "uploads"))

        with patch("type_editor.services.file_service.time.time", return_value=1718000000.7):
            result = await service.validate_and_store("photo.jpg", sample_image_bytes)

        assert result.filename == "1718000000_photo.jpg"
        assert result.url == "/uploads/1718000000_photo.jpg"
        stored = tmp_path / "uploads" / "1718000000_photo.jpg"
        assert stored.read_bytes() == sample_image_bytes

    @pytest.mark.asyncio
    async def test_same_bytes_as_png_rejected(self, tmp_path, sample_image_bytes):
        service = FileService(upload_dir=str(tmp_path))

        with pytest.raises(ValidationError):
            await service.validate_and_store("photo.png", sample_image_bytes)

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_traversal_name_stays_in_upload_dir(self, tmp_path, image_samples):
        upload_root = tmp_path / "uploads"
        service = FileService(upload_dir=str(upload_root))

        result = await service.validate_and_store("../../etc/passwd.png", image_samples[".png"])

        assert "/" not in result.filename
        assert ".." not in result.filename
        assert result.filename.endswith("_passwd.png")
        assert [p.name for p in upload_root.iterdir()] == [result.filename]

    @pytest.mark.asyncio
    async def test_long_name_fits_with_timestamp_prefix(self, tmp_path, image_samples):
        service = FileService(upload_dir=str(tmp_path))

        with patch("type_editor.services.file_service.time.time", return_value=1718000000.0):
            result = await service.validate_and_store("a" * 300 + ".png", image_samples[".png"])

        assert len(result.filename) == 255
        assert result.filename.startswith("1718000000_aaa")
        assert result.filename.endswith("a.png")
        assert (tmp_path / result.filename).read_bytes() == image_samples[".png"]

    @pytest.mark.asyncio
    async def test_oversized_rejected_before_content_checks(self):
        service = FileService(upload_dir="/nonexistent")
        # Valid JPEG signature, but 10 MiB + 1 byte
        content = b"\xff\xd8\xff" + b"\x00" * (10 * 1024 * 1024 - 2)

        with pytest.raises(PayloadTooLargeError):
            await service.validate_and_store("huge.jpg", content)

    @pytest.mark.asyncio
    async def test_oversized_rejected_regardless_of_name(self):
        service = FileService(upload_dir="/nonexistent", max_upload_size=1024)

        with pytest.raises(PayloadTooLargeError):
            await service.validate_and_store("notes.txt", b"x" * 2048)

    @pytest.mark.asyncio
    async def test_write_failure_raises_storage_error(self, tmp_path, sample_image_bytes):
        service = FileService(upload_dir=str(tmp_path))

        with patch("aiofiles.open", new_callable=MagicMock) as mock_open:
            mock_open.return_value.__aenter__ = AsyncMock(side_effect=OSError("disk full"))
            mock_open.return_value.__aexit__ = AsyncMock(return_value=False)

            with pytest.raises(FileStorageError):
                await service.validate_and_store("photo.jpg", sample_image_bytes)


class TestStoredFiles:
    """Tests for listing and deleting stored uploads."""

    def test_list_missing_directory_is_empty(self, tmp_path):
        service = FileService(upload_dir=str(tmp_path / "missing"))
        assert service.list_files() == []

    def test_list_newest_first(self, tmp_path):
        (tmp_path / "1_old.png").write_bytes(b"a")
        (tmp_path / "2_new.png").write_bytes(b"bb")
        os.utime(tmp_path / "1_old.png", (1_000_000, 1_000_000))
        os.utime(tmp_path / "2_new.png", (2_000_000, 2_000_000))
        service = FileService(upload_dir=str(tmp_path))

        files = service.list_files()

        assert [f.filename for f in files] == ["2_new.png", "1_old.png"]
        assert files[0].size == 2
        assert files[0].url == "/uploads/2_new.png"

    def test_delete_removes_file(self, tmp_path):
        target = tmp_path / "1_photo.jpg"
        target.write_bytes(b"x")
        service = FileService(upload_dir=str(tmp_path))

        service.delete_file("1_photo.jpg")

        assert not target.exists()

    def test_delete_missing_file(self, tmp_path):
        service = FileService(upload_dir=str(tmp_path))
        with pytest.raises(NotFoundError):
            service.delete_file("nope.png")

    def test_delete_rejects_unsafe_names(self, tmp_path):
        service = FileService(upload_dir=str(tmp_path))
        for name in ("../secret.png", "a/b.png", "a\\b.png", "..", ".", ""):
            with pytest.raises(ValidationError):
                service.delete_file(name)

    def test_delete_name_with_dot_run(self, tmp_path):
        target = tmp_path / "1718000000_..png"
        target.write_bytes(b"x")
        service = FileService(upload_dir=str(tmp_path))

        service.delete_file("1718000000_..png")

        assert not target.exists()

    def test_delete_dotted_missing_name_is_not_found(self, tmp_path):
        service = FileService(upload_dir=str(tmp_path))
        with pytest.raises(NotFoundError):
            service.delete_file("x..png")
