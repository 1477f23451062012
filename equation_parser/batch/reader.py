"""Load arithmetic expressions from a text file or an archive."""
from pathlib import Path
import tarfile
from typing import List
import zipfile

import py7zr
from py7zr.io import BytesIOFactory

from equation_parser.common.logger import logger

SUPPORTED_ARCHIVES = (".zip", ".tar.xz", ".7z")

# Upper bound for an expression file unpacked in memory
MAX_MEMBER_BYTES = 64 * 1024 * 1024


def archive_kind(path: Path) -> str:
    """
    Tell which supported archive format a path names, from its suffixes.

    :param Path path: Path to the input file

    :return: One of ``SUPPORTED_ARCHIVES``, or ``""`` when none matches
    :rtype: str
    """
    name = path.name.lower()
    return next((kind for kind in SUPPORTED_ARCHIVES if name.endswith(kind)), "")


def _first_txt(names: List[str], archive_path: Path) -> str:
    """
    Pick the first .txt member of an archive.

    :param List[str] names: Member names, in archive order
    :param Path archive_path: Archive the names come from, for the error message

    :return: Name of the member to read
    :rtype: str
    :raises ValueError: If the archive holds no .txt file
    """
    for name in names:
        if name.endswith(".txt"):
            return name
    raise ValueError(f"📄❌ No .txt file found in {archive_path.name}")


def read_archive_member(archive_path: Path) -> bytes:
    """
    Read the first .txt member of an archive without unpacking it to disk.

    :param Path archive_path: Path to a .zip, .tar.xz or .7z archive

    :return: Raw content of the member
    :rtype: bytes
    :raises ValueError: If no .txt file is found or the format is unsupported
    """
    kind = archive_kind(archive_path)

    if kind == ".zip":
        with zipfile.ZipFile(archive_path) as zf:
            return zf.read(_first_txt(zf.namelist(), archive_path))

    if kind == ".tar.xz":
        with tarfile.open(archive_path, "r:xz") as tf:
            members = {m.name: m for m in tf.getmembers() if m.isfile()}
            return tf.extractfile(members[_first_txt(list(members), archive_path)]).read()

    if kind == ".7z":
        with py7zr.SevenZipFile(archive_path, mode="r") as archive:
            name = _first_txt(archive.getnames(), archive_path)
            factory = BytesIOFactory(limit=MAX_MEMBER_BYTES)
            archive.extract(targets=[name], factory=factory)
        member = factory.get(name)
        member.seek(0)
        return member.read()

    raise ValueError(
        f"📄❌ Unsupported input format: {archive_path.name} "
        f"(expected .txt or one of {', '.join(SUPPORTED_ARCHIVES)})"
    )


def read_expressions(input_file: Path) -> List[str]:
    """
    Read the lines of a plain text file, or of the first .txt file of an archive.

    :param Path input_file: Path to the input file or archive

    :return: One string per line, blank lines included so line numbers stay meaningful
    :rtype: List[str]
    :raises ValueError: If the archive format is unsupported or contains no .txt file
    """
    if input_file.suffix == ".txt":
        raw = input_file.read_bytes()
    else:
        raw = read_archive_member(input_file)

    lines = raw.decode("utf-8").splitlines()
    logger.info(f"📄 Loaded {len(lines)} lines from {input_file.name}")
    return lines
