from __future__ import annotations

import pytest

from src.edutracker.edutracker.core.exceptions import ValidationError
from src.edutracker.edutracker.images.store import ImageStoreError, LocalImageStore


def test_save_and_destroy(tmp_path):
    store = LocalImageStore(tmp_path, base_url="/uploads/")

    ref = store.save(b"png-bytes", filename="Start Photo.PNG", folder="attendance/7")

    assert ref.public_id.startswith("attendance/7/")
    assert ref.public_id.endswith(".png")
    assert ref.url == f"/uploads/{ref.public_id}"
    assert store.open_path(ref.public_id).read_bytes() == b"png-bytes"

    assert store.destroy(ref.public_id) is True
    assert store.open_path(ref.public_id) is None
    assert store.destroy(ref.public_id) is False


@pytest.mark.parametrize("data,filename", [(b"", "a.jpg"), (b"x", "notes.txt"), (b"x", "noext")])
def test_save_rejects_bad_uploads(tmp_path, data, filename):
    with pytest.raises(ValidationError):
        LocalImageStore(tmp_path).save(data, filename=filename, folder="attendance/1")


def test_rejects_path_escape(tmp_path):
    store = LocalImageStore(tmp_path / "uploads")

    with pytest.raises(ImageStoreError):
        store.destroy("../outside.jpg")
