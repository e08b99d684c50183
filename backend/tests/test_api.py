"""Endpoint tests using the FastAPI TestClient.

These exercise every route end to end with small in-memory images and
texts; responses are checked for the JSON envelope, the decoded image
sizes and the rendered diff table.
"""

import base64
import io

from PIL import Image


def decode_image(b64):
    return Image.open(io.BytesIO(base64.b64decode(b64)))


def png_upload(name, data):
    return (name, data, "image/png")


# ---------- health ----------


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["uptime"] >= 0
    assert body["version"]


def test_health_reports_timings(client):
    client.post("/api/file-diff/text", json={"left_text": "a", "right_text": "b"})
    perf = client.get("/api/health").json()["performance"]
    assert perf["text-diff"]["count"] == 1


# ---------- file diff ----------


def test_file_diff(client):
    resp = client.post(
        "/api/file-diff",
        files={
            "file1": ("old.txt", b"a\nb\nc\n", "text/plain"),
            "file2": ("new.txt", b"a\nx\nb\nc\n", "text/plain"),
        },
    )
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert resp.json()["success"] is True
    assert data["statistics"]["file1"] == {
        "name": "old.txt",
        "lines": 4,
        "characters": 6,
        "size": 6,
        "size_display": "6 B",
    }
    assert data["statistics"]["file2"]["lines"] == 5
    assert data["summary"] == {"equal": 4, "insert": 1, "delete": 0, "replace": 0}
    assert "old.txt" in data["diff"] and "diff-insert" in data["diff"]


def test_file_diff_runs_off_the_event_loop(client, monkeypatch):
    import asyncio

    from routers import diff

    seen = []
    original = diff.render_diff_table

    def render(*args):
        try:
            asyncio.get_running_loop()
            seen.append("loop")
        except RuntimeError:
            seen.append("worker")
        return original(*args)

    monkeypatch.setattr(diff, "render_diff_table", render)
    resp = client.post(
        "/api/file-diff",
        files={"file1": ("a.txt", b"x\n", "text/plain"), "file2": ("b.txt", b"y\n", "text/plain")},
    )
    assert resp.status_code == 200, resp.text
    resp = client.post("/api/file-diff/text", json={"left_text": "a", "right_text": "b"})
    assert resp.status_code == 200, resp.text
    assert seen == ["worker", "worker"]


def test_file_diff_escapes_content(client):
    resp = client.post(
        "/api/file-diff",
        files={
            "file1": ("a.html", b"<b>bold</b>", "text/html"),
            "file2": ("b.html", b"<i>it</i>", "text/html"),
        },
    )
    diff = resp.json()["data"]["diff"]
    assert "&lt;b&gt;bold&lt;/b&gt;" in diff
    assert "<b>" not in diff and "<i>" not in diff


def test_file_diff_decodes_latin1(client):
    resp = client.post(
        "/api/file-diff",
        files={
            "file1": ("a.txt", b"caf\xe9", "text/plain"),
            "file2": ("b.txt", "café".encode("utf-8"), "text/plain"),
        },
    )
    data = resp.json()["data"]
    assert data["summary"]["equal"] == 1
    assert data["statistics"]["file1"]["characters"] == 4
    assert data["statistics"]["file2"]["size"] == 5


def test_file_diff_requires_two_files(client):
    resp = client.post("/api/file-diff", files={"file1": ("a.txt", b"a", "text/plain")})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Please provide exactly 2 files for comparison."
    assert "timestamp" in body


def test_file_diff_rejects_long_text(client):
    client.put("/api/config", json={"limits": {"max_diff_characters": 5}})
    resp = client.post(
        "/api/file-diff",
        files={
            "file1": ("a.txt", b"123456", "text/plain"),
            "file2": ("b.txt", b"1", "text/plain"),
        },
    )
    assert resp.status_code == 400
    assert "too large for comparison" in resp.json()["error"]


def test_file_diff_rejects_large_upload(client):
    client.put("/api/config", json={"limits": {"max_file_size": 4}})
    resp = client.post(
        "/api/file-diff",
        files={
            "file1": ("a.txt", b"12345", "text/plain"),
            "file2": ("b.txt", b"1", "text/plain"),
        },
    )
    assert resp.status_code == 400
    assert 'File "a.txt" is too large' in resp.json()["error"]


def test_text_diff_returns_script(client):
    resp = client.post(
        "/api/file-diff/text",
        json={"left_text": "a\nx\nb", "right_text": "a\nb", "left_name": "L", "right_name": "R"},
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert [line["tag"] for line in data["lines"]] == ["equal", "delete", "equal"]
    assert data["lines"][1] == {
        "tag": "delete",
        "left_line": "x",
        "right_line": None,
        "left_line_num": 2,
        "right_line_num": None,
    }
    assert data["summary"]["delete"] == 1


def test_text_diff_missing_field(client):
    resp = client.post("/api/file-diff/text", json={"left_text": "a"})
    assert resp.status_code == 400
    assert "right_text" in resp.json()["error"]


# ---------- dual merge ----------


def test_merge(client, make_image):
    resp = client.post(
        "/api/merge",
        files={
            "file1": png_upload("a.png", make_image(100, 50)),
            "file2": png_upload("b.png", make_image(60, 100)),
        },
    )
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["mime_type"] == "image/png"
    assert data["filename"].startswith("merged_") and data["filename"].endswith(".png")
    assert decode_image(data["image"]).size == (130, 50)


def test_merge_with_labels(client, make_image):
    resp = client.post(
        "/api/merge",
        files={
            "file1": png_upload("a.png", make_image(100, 50)),
            "file2": ("b.jpg", make_image(100, 50, fmt="JPEG"), "image/jpeg"),
        },
        data={"add_text_labels": "true"},
    )
    assert resp.status_code == 200, resp.text
    assert decode_image(resp.json()["data"]["image"]).size == (200, 90)


def test_merge_rejects_unsupported_type(client, make_image):
    resp = client.post(
        "/api/merge",
        files={
            "file1": png_upload("a.png", make_image(10, 10)),
            "file2": ("notes.txt", b"hello", "text/plain"),
        },
    )
    assert resp.status_code == 400
    assert "unsupported format" in resp.json()["error"]


def test_merge_reports_undecodable_image(client, make_image):
    resp = client.post(
        "/api/merge",
        files={
            "file1": png_upload("a.png", make_image(10, 10)),
            "file2": png_upload("broken.png", b"\x89PNG garbage"),
        },
    )
    assert resp.status_code == 422
    assert resp.json()["error"] == "Unable to read image dimensions."


def test_merge_missing_file(client, make_image):
    resp = client.post("/api/merge", files={"file1": png_upload("a.png", make_image(10, 10))})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Please provide exactly 2 image files."


# ---------- multi merge ----------


def test_multi_merge_grid(client, make_image):
    files = {f"file{i}": png_upload(f"{i}.png", make_image(100, 80)) for i in range(4)}
    resp = client.post("/api/multi-merge", files=files, data={"file_count": "4", "add_sequence_numbers": "true"})
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["layout"] == "grid"
    assert data["dimensions"] == "200x160"
    assert data["filename"].startswith("multi_merged_4_")
    assert decode_image(data["image"]).size == (200, 160)


def test_multi_merge_vertical(client, make_image):
    files = {f"file{i}": png_upload(f"{i}.png", make_image(60, 30)) for i in range(3)}
    resp = client.post("/api/multi-merge", files=files, data={"file_count": "3"})
    data = resp.json()["data"]
    assert data["layout"] == "vertical"
    assert data["dimensions"] == "60x90"


def test_multi_merge_sort_by_name(client, make_image):
    files = {
        "file0": png_upload("b.png", make_image(100, 50, (0, 0, 255))),
        "file1": png_upload("A.png", make_image(40, 20, (255, 0, 0))),
    }
    resp = client.post("/api/multi-merge", files=files, data={"file_count": "2", "sort_by_name": "true"})
    merged = decode_image(resp.json()["data"]["image"]).convert("RGB")
    assert resp.json()["data"]["dimensions"] == "80x20"
    red, _, blue = merged.getpixel((5, 10))
    assert red > 200 and blue < 50


def test_multi_merge_bad_count(client):
    resp = client.post("/api/multi-merge", data={"file_count": "7"})
    assert resp.status_code == 400
    assert "between 2 and 6" in resp.json()["error"]


def test_multi_merge_missing_position(client, make_image):
    resp = client.post(
        "/api/multi-merge",
        files={"file0": png_upload("a.png", make_image(10, 10))},
        data={"file_count": "2"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing file at position 1."


# ---------- icon maker ----------


def test_icon_maker(client, make_image):
    resp = client.post(
        "/api/icon-maker",
        files={"image": png_upload("logo.png", make_image(200, 100))},
        data={"x": "10", "y": "10", "size": "80"},
    )
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["size"] == 128
    assert data["crop_area"] == {"x": 10, "y": 10, "size": 80}
    assert data["original_dimensions"] == {"width": 200, "height": 100}
    assert decode_image(data["png"]).size == (128, 128)
    assert decode_image(data["ico"]).format == "ICO"


def test_icon_maker_crop_out_of_bounds(client, make_image):
    resp = client.post(
        "/api/icon-maker",
        files={"image": png_upload("logo.png", make_image(100, 100))},
        data={"x": "-5", "y": "50", "size": "60"},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Crop position cannot be negative., Crop area exceeds image boundaries."
    assert body["details"]["parameters"]["width"] == 100


def test_icon_maker_requires_integer_params(client, make_image):
    resp = client.post(
        "/api/icon-maker",
        files={"image": png_upload("logo.png", make_image(100, 100))},
        data={"x": "abc", "y": "0", "size": "10"},
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_icon_maker_uses_configured_size(client, make_image):
    client.put("/api/config", json={"icon": {"size": 64}})
    resp = client.post(
        "/api/icon-maker",
        files={"image": png_upload("logo.png", make_image(100, 100))},
        data={"x": "0", "y": "0", "size": "100"},
    )
    assert resp.json()["data"]["size"] == 64
    assert decode_image(resp.json()["data"]["png"]).size == (64, 64)


# ---------- config ----------


def test_get_config_defaults(client):
    body = client.get("/api/config").json()
    assert body["limits"]["max_diff_characters"] == 1_000_000
    assert body["merge"]["labels"] == {"before": "Before", "after": "After"}
    assert body["icon"]["size"] == 128


def test_update_config_persists(client, config_dir):
    resp = client.put("/api/config", json={"merge": {"labels": {"before": "Old"}}})
    assert resp.status_code == 200
    labels = client.get("/api/config").json()["merge"]["labels"]
    assert labels == {"before": "Old", "after": "After"}
    assert (config_dir / "config.json").exists()


def test_update_config_rejects_bad_values(client):
    resp = client.put("/api/config", json={"limits": {"max_file_size": -1}})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Setting limits.max_file_size must be a positive integer"

    resp = client.put("/api/config", json={"icon": {"colour": 3}})
    assert resp.status_code == 400
    assert "Unknown setting" in resp.json()["error"]


def test_update_config_rejects_bad_labels(client):
    resp = client.put("/api/config", json={"merge": {"labels": "oops"}})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Setting merge.labels must be an object"

    resp = client.put("/api/config", json={"merge": {"labels": {"before": 5}}})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Setting merge.labels.before must be a string"

    resp = client.put("/api/config", json={"merge": {"labels": {"during": "Mid"}}})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Unknown setting: merge.labels.during"

    assert client.get("/api/config").json()["merge"]["labels"] == {"before": "Before", "after": "After"}


def test_merge_with_labels_after_rejected_update(client, make_image):
    client.put("/api/config", json={"merge": {"labels": "oops"}})
    resp = client.post(
        "/api/merge",
        files={
            "file1": png_upload("a.png", make_image(100, 50)),
            "file2": png_upload("b.png", make_image(100, 50)),
        },
        data={"add_text_labels": "true"},
    )
    assert resp.status_code == 200, resp.text


def test_update_config_caps_icon_size(client):
    resp = client.put("/api/config", json={"icon": {"size": 512}})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Setting icon.size must be at most 256"
    assert client.put("/api/config", json={"icon": {"size": 256}}).status_code == 200


def test_update_config_needs_a_section(client):
    resp = client.put("/api/config", json={})
    assert resp.status_code == 400
