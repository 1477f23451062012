"""Test reading expression lines from text files and archives."""
import io
from pathlib import Path
import tarfile
import zipfile

import py7zr
import pytest

from equation_parser.batch.reader import archive_kind, read_archive_member, read_expressions

CONTENT = "1+1\n\n  2*(3-1)\n5/0"
LINES = ["1+1", "", "  2*(3-1)", "5/0"]


def make_zip(path: Path, members: dict) -> Path:
    with zipfile.ZipFile(path, "w") as zf:
        for name, text in members.items():
            zf.writestr(name, text)
    return path


def make_tar_xz(path: Path, members: dict) -> Path:
    with tarfile.open(path, "w:xz") as tf:
        for name, text in members.items():
            data = text.encode()
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))
    return path


def make_7z(path: Path, members: dict) -> Path:
    with py7zr.SevenZipFile(path, "w") as archive:
        for name, text in members.items():
            archive.writestr(text, name)
    return path


def test_read_txt_keeps_blank_lines(tmp_path: Path) -> None:
    """Blank lines are kept so that line numbers match the file."""
    input_file = tmp_path / "ops.txt"
    input_file.write_text(CONTENT)

    assert read_expressions(input_file) == LINES


def test_read_txt_windows_line_endings(tmp_path: Path) -> None:
    """CRLF line endings do not leak into expressions."""
    input_file = tmp_path / "ops.txt"
    input_file.write_bytes(b"1+1\r\n2*2\r\n")

    assert read_expressions(input_file) == ["1+1", "2*2"]


@pytest.mark.parametrize("name,builder", [
    ("ops.zip", make_zip),
    ("ops.tar.xz", make_tar_xz),
    ("ops.7z", make_7z),
])
def test_read_archive_lines(tmp_path: Path, name, builder) -> None:
    """Each archive format yields the lines of its first .txt member."""
    archive = builder(tmp_path / name, {"readme.md": "not this", "ops.txt": CONTENT})

    assert read_expressions(archive) == LINES


@pytest.mark.parametrize("name,builder", [
    ("empty.zip", make_zip),
    ("empty.tar.xz", make_tar_xz),
    ("empty.7z", make_7z),
])
def test_archive_without_txt(tmp_path: Path, name, builder) -> None:
    """An archive with no .txt member is refused."""
    archive = builder(tmp_path / name, {"data.csv": "1,2"})

    with pytest.raises(ValueError, match="No .txt file"):
        read_archive_member(archive)


def test_unsupported_format_lists_supported_ones(tmp_path: Path) -> None:
    """The error names the formats that are accepted."""
    file_path = tmp_path / "ops.rar"
    file_path.write_text("1+1")

    with pytest.raises(ValueError, match=r"\.zip, \.tar\.xz, \.7z"):
        read_expressions(file_path)


@pytest.mark.parametrize("name,expected", [
    ("ops.zip", ".zip"),
    ("ops.TAR.XZ", ".tar.xz"),
    ("ops.v2.7z", ".7z"),
    ("ops.xz", ""),
    ("ops.rar", ""),
])
def test_archive_kind(name, expected) -> None:
    """Archive formats are recognised from the file name."""
    assert archive_kind(Path(name)) == expected


def test_first_txt_member_wins(tmp_path: Path) -> None:
    """With several .txt members, the first one in the archive is read."""
    archive = make_zip(tmp_path / "ops.zip", {"a.txt": "1+2", "b.txt": "3+4"})

    assert read_archive_member(archive) == b"1+2"
