"""Shared fixtures for mokit tests."""

import os
import shutil
import struct
import tempfile
from pathlib import Path

import pytest
import yaml


CZECH_HEADER = (
    "Project-Id-Version: mokit tests\n"
    "Language: cs\n"
    "MIME-Version: 1.0\n"
    "Content-Type: text/plain; charset=UTF-8\n"
    "Content-Transfer-Encoding: 8bit\n"
    "Plural-Forms: nplurals=3; plural=(n==1) ? 0 : (n>=2 && n<=4) ? 1 : 2;\n"
)

CZECH_ENTRIES = {
    "": CZECH_HEADER,
    "Column": "Pole",
    "%d second\x00%d seconds": "%d sekunda\x00%d sekundy\x00%d sekund",
    "Display format\x04Table": "Tabulka",
    "Display format\x04%d table\x00%d tables": "%d tabulka\x00%d tabulky\x00%d tabulek",
    "Hello %s": "Ahoj %s",
    "Hello %(name)s": "Ahoj %(name)s",
}


def encode_mo(entries, byte_order="<"):
    """Encode entries as a compiled catalog without a hash table.

    Args:
        entries: Mapping of original to translated strings (str or bytes)
        byte_order: "<" for little-endian, ">" for big-endian fields
    """
    pairs = []
    for key, value in entries.items():
        key = key.encode("utf-8") if isinstance(key, str) else key
        value = value.encode("utf-8") if isinstance(value, str) else value
        pairs.append((key, value))
    pairs.sort()

    count = len(pairs)
    originals_at = 28
    translations_at = originals_at + count * 8
    pos = translations_at + count * 8

    original_table = []
    for key, _ in pairs:
        original_table.append((len(key), pos))
        pos += len(key) + 1
    translation_table = []
    for _, value in pairs:
        translation_table.append((len(value), pos))
        pos += len(value) + 1

    data = struct.pack(
        f"{byte_order}7I", 0x950412DE, 0, count, originals_at, translations_at, 0, pos
    )
    for length, offset in original_table + translation_table:
        data += struct.pack(f"{byte_order}2I", length, offset)
    for key, _ in pairs:
        data += key + b"\x00"
    for _, value in pairs:
        data += value + b"\x00"
    return data


# === Path/Directory Fixtures ===

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


# === Catalog Fixtures ===

@pytest.fixture
def build_mo(temp_dir):
    """Factory writing a catalog file and returning its path."""
    def _build(entries, name="messages.mo", byte_order="<"):
        path = temp_dir / name
        path.write_bytes(encode_mo(entries, byte_order))
        return path
    return _build


@pytest.fixture
def czech_mo(build_mo):
    """Little-endian Czech catalog with plural and context entries."""
    return build_mo(CZECH_ENTRIES, name="cs.mo")


@pytest.fixture
def czech_mo_big_endian(build_mo):
    """The Czech catalog with big-endian fields."""
    return build_mo(CZECH_ENTRIES, name="cs-be.mo", byte_order=">")


@pytest.fixture
def bad_magic_mo(temp_dir):
    """A file whose first four bytes match neither magic."""
    path = temp_dir / "magic.mo"
    path.write_bytes(b"\x00\x01\x02\x03" + b"\x00" * 24)
    return path


@pytest.fixture
def truncated_mo(temp_dir):
    """A catalog whose string table points past the end of the file."""
    data = encode_mo(CZECH_ENTRIES)
    path = temp_dir / "truncated.mo"
    path.write_bytes(data[:60])
    return path


# === Config Fixtures ===

@pytest.fixture
def manifest_dict():
    """Manifest listing the Czech catalog under the 'messages' domain."""
    return {
        "version": 1,
        "locale": "cs_CZ",
        "domain": "messages",
        "catalogs": {
            "messages": {
                "cs_CZ": "cs.mo",
            }
        },
    }


@pytest.fixture
def manifest_file(temp_dir, czech_mo, manifest_dict):
    """Write the manifest next to the Czech catalog."""
    config_path = temp_dir / "catalogs.yaml"
    with open(config_path, "w") as f:
        yaml.dump(manifest_dict, f)
    return config_path


# === Subprocess environment ===

@pytest.fixture
def cli_env():
    """Environment that lets `python -m mokit.cli` import from src/."""
    src = str(Path(__file__).resolve().parent.parent / "src")
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [src, env.get("PYTHONPATH")]))
    return env
