"""Unit tests for the on-disk attachment store."""

from pathlib import Path

import pytest

from src.app.core.errors import PayloadTooLarge, StorageIOError, UnsupportedMediaType
from src.app.core.storage import AttachmentStore, normalize_mime_type
from src.app.runtime.config.config_data import AttachmentConfig
from tests.fixtures.core import ATTACHMENT_LIMIT
from tests.utils import make_pdf


class TestUploadChecks:
    def test_exact_limit_accepted(self, store: AttachmentStore):
        store.check_upload(ATTACHMENT_LIMIT, "application/pdf")

    def test_one_byte_over_limit_rejected(self, store: AttachmentStore):
        with pytest.raises(PayloadTooLarge) as exc_info:
            store.check_upload(ATTACHMENT_LIMIT + 1, "application/pdf")

        assert exc_info.value.limit_bytes == ATTACHMENT_LIMIT
        assert exc_info.value.size_bytes == ATTACHMENT_LIMIT + 1

    @pytest.mark.parametrize("mime_type", ["image/png", "text/plain", "", None])
    def test_other_types_rejected(self, store: AttachmentStore, mime_type):
        with pytest.raises(UnsupportedMediaType):
            store.check_upload(10, mime_type)

    def test_declared_type_parameters_ignored(self, store: AttachmentStore):
        store.check_upload(10, "Application/PDF; charset=binary")

    def test_normalize_mime_type(self):
        assert normalize_mime_type(" application/pdf ; q=1") == "application/pdf"
        assert normalize_mime_type(None) == ""


class TestStoragePaths:
    def test_paths_are_unique_and_keep_pdf_suffix(self, store: AttachmentStore):
        first = store.new_storage_path("Dune.PDF")
        second = store.new_storage_path("Dune.PDF")

        assert first != second
        assert first.endswith(".pdf")
        assert len(Path(first).stem) == 32

    @pytest.mark.parametrize("filename", [None, "", "notes.exe", "../../etc/passwd"])
    def test_unknown_suffix_falls_back_to_default(self, store: AttachmentStore, filename):
        path = store.new_storage_path(filename)

        assert path.endswith(".pdf")
        assert "/" not in path

    @pytest.mark.parametrize("storage_path", ["", "../escape.pdf", "nested/file.pdf"])
    def test_resolve_rejects_anything_but_bare_names(
        self, store: AttachmentStore, storage_path: str
    ):
        with pytest.raises(StorageIOError):
            store.resolve(storage_path)


class TestFileLifecycle:
    def test_write_then_open_round_trip(self, store: AttachmentStore):
        data = make_pdf(4096)
        storage_path = store.new_storage_path("book.pdf")

        assert store.write(storage_path, data) == len(data)

        stream = store.open_stream(storage_path, len(data))
        assert stream is not None
        assert stream.media_type == "application/pdf"
        assert stream.read() == data
        assert b"".join(stream.iter_chunks(1000)) == data

    def test_open_with_wrong_size_returns_none(self, store: AttachmentStore):
        storage_path = store.new_storage_path()
        store.write(storage_path, make_pdf(100))

        assert store.open_stream(storage_path, 101) is None
        assert store.open_stream("missing.pdf", 100) is None

    def test_stream_of_vanished_file_raises_storage_error(self, store: AttachmentStore):
        storage_path = store.new_storage_path()
        store.write(storage_path, make_pdf(100))
        stream = store.open_stream(storage_path, 100)
        assert stream is not None
        store.resolve(storage_path).unlink()

        with pytest.raises(StorageIOError):
            list(stream.iter_chunks())
        with pytest.raises(StorageIOError):
            stream.read()

    def test_write_never_overwrites(self, store: AttachmentStore):
        storage_path = store.new_storage_path()
        store.write(storage_path, make_pdf(10))

        with pytest.raises(StorageIOError):
            store.write(storage_path, make_pdf(20))
        assert store.size_of(storage_path) == 10

    def test_write_failure_raises_storage_error(self, tmp_path: Path):
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("occupied")
        store = AttachmentStore(AttachmentConfig(directory=str(blocker)))

        with pytest.raises(StorageIOError):
            store.write("abc.pdf", make_pdf(10))

    def test_remove_quietly(self, store: AttachmentStore):
        storage_path = store.new_storage_path()
        store.write(storage_path, make_pdf(10))

        assert store.remove_quietly(storage_path) is True
        assert store.remove_quietly(storage_path) is False
        assert store.remove_quietly("../outside.pdf") is False
        assert store.list_stored() == []

    def test_list_stored_and_writable(self, store: AttachmentStore):
        names = sorted(store.new_storage_path() for _ in range(3))
        for name in names:
            store.write(name, make_pdf(5))

        assert store.list_stored() == names
        assert store.is_writable()
