import os
import subprocess

import pytest
from PIL import Image

import photokit.exif_io.metadata as metadata_module
import photokit.log as photokit_log
import photokit.timing as timing
from photokit.exif_io import ExifToolNotFoundError, ImageMetadata, UnsupportedTagError, format_command
from photokit.log import get_logger

FAKE_EXIFTOOL = "/opt/exiftool/exiftool"


class FakeExifTool:
    """Stands in for subprocess.run; records argv and replays canned output."""

    def __init__(self, stdout="", returncode=0, stderr=""):
        self.calls = []
        self.stdout = stdout
        self.returncode = returncode
        self.stderr = stderr

    def __call__(self, argv, **kwargs):
        self.calls.append(argv)
        return subprocess.CompletedProcess(argv, self.returncode, stdout=self.stdout, stderr=self.stderr)

    @property
    def args(self):
        return self.calls[-1][2:-1]


@pytest.fixture
def fake_run(monkeypatch):
    fake = FakeExifTool()
    monkeypatch.setattr(metadata_module.subprocess, "run", fake)
    return fake


@pytest.fixture
def meta():
    return ImageMetadata(backend="exiftool", exiftool_path=FAKE_EXIFTOOL)


@pytest.fixture
def jpeg(tmp_path):
    path = tmp_path / "IMG_0001.jpg"
    Image.new("RGB", (8, 8), (200, 120, 40)).save(path, "JPEG")
    return str(path)


# --- EXIFTOOL BACKEND ---

def test_command_shape(meta, fake_run, tmp_path):
    fn = str(tmp_path / "a b.jpg")

    meta.set_title(fn, "Sunset")

    assert fake_run.calls == [[FAKE_EXIFTOOL, "-overwrite_original", "-title=Sunset", os.path.normpath(fn)]]


def test_format_command_for_log():
    assert format_command(["-title=x"], "a b.jpg") == 'exiftool -overwrite_original -title=x "a b.jpg"'


@pytest.mark.parametrize(
    "call, expected_args",
    [
        (lambda m, fn: m.set_artist(fn, "Jane"), ["-artist=Jane"]),
        (lambda m, fn: m.set_copyright(fn, "(c) Jane"), ["-copyright=(c) Jane"]),
        (lambda m, fn: m.set_image_description(fn, "Lake"), ["-ImageDescription=Lake"]),
        (lambda m, fn: m.set_rating(fn, 4), ["-rating=4"]),
        (lambda m, fn: m.set_user_comment(fn, "hi"), ["-UserComment=hi"]),
        (lambda m, fn: m.set_tag(fn, "beach"), ["-subject=beach"]),
        (lambda m, fn: m.add_tags(fn, "beach"), ["-subject+=beach"]),
        (lambda m, fn: m.add_tags(fn, ["beach", "sun"]), ["-subject+=beach", "-subject+=sun"]),
        (lambda m, fn: m.set_date_time_original(fn, "2020:01:02 03:04:05"), ["-DateTimeOriginal=2020:01:02 03:04:05"]),
        (lambda m, fn: m.add_to_date_time_original(fn, 0, 0, 1, 2, 30), ["-DateTimeOriginal+=0:0:1 2:30:0"]),
        (lambda m, fn: m.set_date_acquired_to_file_creation(fn), ["-DateAcquired<FileCreateDate"]),
        (lambda m, fn: m.set_date_acquired(fn, "2020:01:01"), ["-dateAcquired=2020:01:01"]),
        (lambda m, fn: m.set_file_created(fn, "2020:01:01"), ["-FileCreateDate=2020:01:01"]),
        (lambda m, fn: m.set_image_unique_id(fn, "abc123"), ["-ImageUniqueID=abc123"]),
        (lambda m, fn: m.get_tags(fn), ["-subject"]),
        (lambda m, fn: m.get_date_time_original(fn), ["-DateTimeOriginal"]),
    ],
)
def test_tag_arguments(meta, fake_run, call, expected_args):
    call(meta, "photo.jpg")

    assert fake_run.args == expected_args
    assert fake_run.calls[-1][-1] == "photo.jpg"


def test_get_single_value(meta, fake_run):
    fake_run.stdout = "Title                           : Evening: Lake\n"

    assert meta.get_title("photo.jpg") == "Evening: Lake"
    assert fake_run.args == ["-title"]


def test_get_all_metadata(meta, fake_run):
    fake_run.stdout = (
        "File Name                       : photo.jpg\n"
        "Date/Time Original              : 2021:07:04 18:30:00\n"
        "Subject                         : beach, family\n"
    )

    metadata = meta.get_all_metadata("photo.jpg")

    assert fake_run.args == []
    assert metadata["tags"] == ["beach", "family"]
    assert metadata["date_taken"] == "2021:07:04 18:30:00"
    assert metadata["photoshop"] is False


def test_metadata_search(meta, fake_run):
    fake_run.stdout = "Creator Tool                    : ADOBE PHOTOSHOP CC\n"

    assert meta.has_photoshop_data("photo.jpg") is True
    assert meta.metadata_includes("photo.jpg", "creator", "-CreatorTool") is True
    assert fake_run.args == ["-CreatorTool"]
    assert meta.metadata_includes("photo.jpg", ["gimp", "darktable"]) is False


def test_failed_process_is_returned(meta, fake_run):
    fake_run.returncode = 1
    fake_run.stderr = "Error: File not found - missing.jpg"

    cp = meta.set_title("missing.jpg", "x")

    assert cp.returncode == 1
    assert "File not found" in cp.stderr


def test_exiftool_runs_are_timed(meta, fake_run):
    timing.stat_reset()

    meta.set_title("a.jpg", "x")
    meta.get_title("a.jpg")

    assert timing.stat_totals()["exiftool"][0] == 2


def test_stdout_goes_to_log_file(fake_run, tmp_path, monkeypatch):
    log_file = tmp_path / "run.log"
    monkeypatch.setattr(photokit_log, "LOG_FILE", str(log_file))
    monkeypatch.setattr(photokit_log, "LOG_LEVEL", "INFO")
    fake_run.stdout = "    1 image files updated\n"
    logger = get_logger("rename")

    meta = ImageMetadata(logger, backend="exiftool", exiftool_path=FAKE_EXIFTOOL)
    meta.set_artist("photo.jpg", "Jane")

    text = log_file.read_text(encoding="utf-8")
    assert 'exiftool -overwrite_original -artist=Jane "photo.jpg"' in text
    assert "1 image files updated" in text
    assert meta.logger is not logger
    assert logger.prefix == ""


def test_invalid_backend():
    with pytest.raises(ValueError):
        ImageMetadata(backend="perl")


def test_missing_exiftool_raises_when_required(monkeypatch):
    def not_found():
        raise ExifToolNotFoundError("not found")

    monkeypatch.setattr(metadata_module, "require_exiftool", not_found)

    with pytest.raises(ExifToolNotFoundError):
        ImageMetadata(backend="exiftool").get_title("photo.jpg")


# --- BUILTIN BACKEND (Pillow read / piexif write) ---

def test_builtin_backend_never_runs_exiftool(jpeg, fake_run):
    meta = ImageMetadata(backend="builtin")

    meta.set_artist(jpeg, "Jane Doe")
    meta.set_date_time_original(jpeg, "2020:01:02 03:04:05")

    assert fake_run.calls == []
    assert meta.get_artist(jpeg) == "Jane Doe"
    metadata = meta.get_all_metadata(jpeg)
    assert metadata["Artist"] == "Jane Doe"
    assert metadata["date_taken"] == "2020:01:02 03:04:05"


def test_builtin_date_shift(jpeg):
    meta = ImageMetadata(backend="builtin")
    meta.set_date_time_original(jpeg, "2020:01:31 23:00:00")

    meta.add_to_date_time_original(jpeg, m=1, h=2)

    assert meta.get_date_time_original(jpeg) == "2020:03:01 01:00:00"


def test_builtin_unsupported_tags(jpeg):
    meta = ImageMetadata(backend="builtin")

    with pytest.raises(UnsupportedTagError):
        meta.set_tag(jpeg, "beach")
    with pytest.raises(ExifToolNotFoundError):
        meta.add_tags(jpeg, ["beach"])


def test_auto_backend_falls_back_when_exiftool_missing(jpeg, fake_run, monkeypatch):
    monkeypatch.setattr(metadata_module, "get_exiftool_executable_path", lambda: None)
    meta = ImageMetadata()

    meta.set_copyright(jpeg, "(c) Jane")

    assert meta.uses_exiftool is False
    assert meta.get_copyright(jpeg) == "(c) Jane"
    assert fake_run.calls == []


def test_builtin_read_of_non_image(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("not an image")

    metadata = ImageMetadata(backend="builtin").get_all_metadata(str(path))

    assert metadata == {"tags": "", "date_taken": "", "photoshop": False}
