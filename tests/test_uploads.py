import asyncio
import io

import pytest
from starlette.datastructures import Headers, UploadFile

from core.errors import ApiError
from uploads import service

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def make_upload(filename, content, content_type):
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def test_png_is_stored_with_public_url(upload_dir):
    stored = asyncio.run(service.store_upload(make_upload("pago.png", PNG, "image/png")))

    assert stored.url == f"https://monkeyranch.test/uploads/{stored.filename}"
    assert stored.filename.endswith("-pago.png")
    assert (upload_dir / stored.filename).read_bytes() == PNG


@pytest.mark.parametrize("content_type", ["image/jpeg", "image/gif", "application/pdf"])
def test_other_allowed_types(upload_dir, content_type):
    stored = asyncio.run(service.store_upload(make_upload("pago", b"data", content_type)))

    assert stored.content_type == content_type


def test_disallowed_type_writes_nothing(upload_dir):
    with pytest.raises(ApiError) as err:
        asyncio.run(service.store_upload(make_upload("virus.exe", b"MZ", "application/octet-stream")))

    assert err.value.status_code == 400
    assert list(upload_dir.iterdir()) == []


def test_oversized_file_writes_nothing(upload_dir, monkeypatch):
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "16")

    with pytest.raises(ApiError) as err:
        asyncio.run(service.store_upload(make_upload("pago.png", PNG, "image/png")))

    assert err.value.status_code == 400
    assert list(upload_dir.iterdir()) == []


def test_missing_file_is_rejected(upload_dir):
    with pytest.raises(ApiError):
        asyncio.run(service.store_upload(None))


@pytest.mark.parametrize("original, expected", [
    ("pago.png", "1700000000000-pago.png"),
    ("mi pago final.pdf", "1700000000000-mi_pago_final.pdf"),
    ("../../etc/passwd", "1700000000000-passwd"),
    ("C:\\Users\\ana\\recibo.jpg", "1700000000000-recibo.jpg"),
])
def test_stored_filename(original, expected):
    assert service.stored_filename(original, now_ms=1700000000000) == expected


def test_stored_file_is_served(client, upload_dir):
    (upload_dir / "123-pago.png").write_bytes(PNG)

    res = client.get("/uploads/123-pago.png")

    assert res.status_code == 200
    assert res.content == PNG


def test_unknown_upload_is_404(client):
    res = client.get("/uploads/nope.png")

    assert res.status_code == 404
    assert res.json()["success"] is False
