"""End-to-end tests for the async and blocking listing functions."""

from __future__ import annotations

import asyncio
import errno
import os
import re
import sys
import threading
from pathlib import Path
from urllib.parse import urlsplit

import pytest

from lsfnd import (
    DirectoryReadError,
    EntryProbeError,
    InvalidArgumentTypeError,
    InvalidEncodingError,
    InvalidTypeFilterError,
    InvalidURLSchemeError,
    ListingOptions,
    TypeFilter,
    ls,
    ls_dirs,
    ls_dirs_sync,
    ls_files,
    ls_files_sync,
    ls_sync,
)
from lsfnd.encoding import encode_to

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX filesystem semantics")


def _abs(d: Path, *names: str) -> list[str]:
    return [str(d / name) for name in names]


def test_scenario_list_all(sample_dir: Path):
    result = ls_sync(sample_dir, {"absolute": True})
    assert result == _abs(sample_dir, "a.txt", "b.txt", "sub")


def test_scenario_list_files_and_dirs(sample_dir: Path):
    assert ls_files_sync(sample_dir, {"absolute": True}) == _abs(sample_dir, "a.txt", "b.txt")
    assert ls_dirs_sync(sample_dir, {"absolute": True}) == _abs(sample_dir, "sub")


def test_scenario_async(sample_dir: Path):
    options = {"absolute": True}
    assert asyncio.run(ls(sample_dir, options)) == _abs(sample_dir, "a.txt", "b.txt", "sub")
    assert asyncio.run(ls_files(sample_dir, options)) == _abs(sample_dir, "a.txt", "b.txt")
    assert asyncio.run(ls_dirs(sample_dir, options)) == _abs(sample_dir, "sub")


def test_relative_to_cwd_by_default(sample_dir: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(sample_dir.parent)
    expected = [os.path.join("d", name) for name in ["a.txt", "b.txt", "sub"]]
    assert ls_sync("d") == expected
    assert asyncio.run(ls("d")) == expected


def test_listing_cwd_gives_bare_names(sample_dir: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(sample_dir)
    assert ls_sync(".") == ["a.txt", "b.txt", "sub"]


def test_relative_to_root_dir(sample_dir: Path):
    result = ls_sync(sample_dir / "sub", {"root_dir": str(sample_dir), "recursive": True})
    assert result == [
        os.path.join("sub", "c.txt"),
        os.path.join("sub", "deep"),
        os.path.join("sub", "deep", "e.md"),
    ]


def test_match_pattern(sample_dir: Path):
    result = ls_sync(sample_dir, {"match": re.compile(r"\.txt$"), "absolute": True})
    assert result == _abs(sample_dir, "a.txt", "b.txt")


def test_bare_pattern_as_options(sample_dir: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(sample_dir)
    assert ls_sync(".", re.compile(r"\.txt$")) == ["a.txt", "b.txt"]


def test_exclude_pattern(sample_dir: Path):
    result = ls_sync(sample_dir, {"exclude": r"b\.txt$", "basename": True})
    assert result == ["a.txt", "sub"]


def test_exclude_wins_over_match(sample_dir: Path):
    options = ListingOptions(match=r"\.txt$", exclude=r"\.txt$", basename=True)
    assert ls_sync(sample_dir, options) == []


def test_recursive_listing(sample_dir: Path):
    result = ls_sync(sample_dir, {"recursive": True, "absolute": True})
    assert result == [
        str(sample_dir / "a.txt"),
        str(sample_dir / "b.txt"),
        str(sample_dir / "sub"),
        str(sample_dir / "sub" / "c.txt"),
        str(sample_dir / "sub" / "deep"),
        str(sample_dir / "sub" / "deep" / "e.md"),
    ]
    assert asyncio.run(ls(sample_dir, {"recursive": True, "absolute": True})) == result


def test_recursive_files_basename(sample_dir: Path):
    result = ls_files_sync(sample_dir, {"recursive": True, "basename": True})
    assert result == ["a.txt", "b.txt", "c.txt", "e.md"]


def test_absolute_beats_basename(sample_dir: Path):
    result = ls_sync(sample_dir, {"absolute": True, "basename": True})
    assert result == _abs(sample_dir, "a.txt", "b.txt", "sub")


def test_empty_directory(tmp_path: Path):
    assert ls_sync(tmp_path) == []
    assert asyncio.run(ls(tmp_path)) == []


def test_file_url_equivalence(sample_dir: Path):
    options = {"absolute": True}
    expected = ls_sync(str(sample_dir), options)
    assert ls_sync(sample_dir.as_uri(), options) == expected
    assert ls_sync(urlsplit(sample_dir.as_uri()), options) == expected
    assert asyncio.run(ls(sample_dir.as_uri(), options)) == expected


def test_relative_file_url(sample_dir: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(sample_dir.parent)
    assert ls_files_sync("file:./d", {"basename": True}) == ["a.txt", "b.txt"]


def test_root_dir_as_file_url(sample_dir: Path):
    result = ls_dirs_sync(sample_dir, {"root_dir": sample_dir.parent.as_uri()})
    assert result == [os.path.join("d", "sub")]


@pytest.mark.parametrize("type_filter", [0, None, 1, "ALL", "LS_A", TypeFilter.ALL])
def test_all_type_filter_forms(sample_dir: Path, type_filter: object):
    result = ls_sync(sample_dir, {"basename": True}, type_filter)  # type: ignore[arg-type]
    assert result == ["a.txt", "b.txt", "sub"]


def test_string_type_filters(sample_dir: Path):
    assert ls_sync(sample_dir, {"basename": True}, "FILE") == ["a.txt", "b.txt"]
    assert ls_sync(sample_dir, {"basename": True}, "LS_D") == ["sub"]
    assert ls_sync(sample_dir, {"basename": True}, 2) == ["sub"]


def test_type_filter_partition(sample_dir: Path):
    options = {"recursive": True, "absolute": True}
    files = set(ls_files_sync(sample_dir, options))
    dirs = set(ls_dirs_sync(sample_dir, options))
    assert files.isdisjoint(dirs)
    assert files | dirs == set(ls_sync(sample_dir, options))


def test_async_and_sync_agree(sample_dir: Path):
    for options in [None, {"recursive": True}, {"basename": True, "exclude": "deep"}]:
        assert asyncio.run(ls(sample_dir, options)) == ls_sync(sample_dir, options)


def test_idempotent(sample_dir: Path):
    options = {"recursive": True, "absolute": True}
    assert ls_sync(sample_dir, options) == ls_sync(sample_dir, options)


def test_output_is_sorted(sample_dir: Path):
    for name in ["Zeta", "alpha", "_under", "10", "9"]:
        (sample_dir / name).write_text("")
    result = ls_sync(sample_dir, {"recursive": True})
    assert result == sorted(result)


def test_hex_encoding(sample_dir: Path):
    result = ls_sync(sample_dir, {"encoding": "hex", "basename": True})
    assert result == ["612e747874", "622e747874", "737562"]


def test_encoding_round_trip(sample_dir: Path):
    plain = ls_sync(sample_dir, {"absolute": True, "recursive": True})
    for encoding in ["hex", "base64", "latin1"]:
        encoded = ls_sync(sample_dir, {"absolute": True, "recursive": True, "encoding": encoding})
        assert sorted(encode_to(e, encoding, "utf8") for e in encoded) == plain


def test_non_ascii_names(tmp_path: Path):
    (tmp_path / "café.txt").write_text("")
    assert ls_sync(tmp_path, {"basename": True}) == ["café.txt"]
    assert ls_sync(tmp_path, {"basename": True, "encoding": "latin1"}) == ["cafÃ©.txt"]


def test_missing_directory(tmp_path: Path):
    missing = tmp_path / "this" / "is" / "not" / "here"
    with pytest.raises(DirectoryReadError) as exc_info:
        ls_sync(missing)
    assert exc_info.value.errno == errno.ENOENT
    assert exc_info.value.filename == str(missing)
    assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    with pytest.raises(DirectoryReadError):
        asyncio.run(ls(missing))


def test_file_is_not_a_directory(sample_dir: Path):
    with pytest.raises(DirectoryReadError) as exc_info:
        ls_sync(sample_dir / "a.txt")
    assert isinstance(exc_info.value, OSError)


def test_http_url_rejected():
    with pytest.raises(InvalidURLSchemeError):
        ls_sync("http://example")
    with pytest.raises(InvalidURLSchemeError):
        asyncio.run(ls("http://example"))


def test_bogus_type_filter(sample_dir: Path):
    with pytest.raises(InvalidTypeFilterError):
        ls_sync(sample_dir, {}, "BOGUS")
    with pytest.raises(InvalidTypeFilterError):
        asyncio.run(ls(sample_dir, {}, "BOGUS"))


def test_bad_arguments_fail_before_reading(tmp_path: Path):
    missing = tmp_path / "missing"
    with pytest.raises(InvalidArgumentTypeError):
        ls_sync(missing, ["not", "options"])  # type: ignore[arg-type]
    with pytest.raises(InvalidEncodingError):
        ls_sync(missing, {"encoding": "nope"})
    with pytest.raises(InvalidTypeFilterError):
        ls_sync(missing, None, 7)
    with pytest.raises(InvalidArgumentTypeError):
        ls_sync(42)  # type: ignore[arg-type]


@posix_only
def test_broken_symlink_raises_probe_error(tmp_path: Path):
    (tmp_path / "dangling").symlink_to(tmp_path / "nowhere")
    with pytest.raises(EntryProbeError):
        ls_sync(tmp_path)
    with pytest.raises(EntryProbeError):
        asyncio.run(ls(tmp_path))


@posix_only
def test_symlinked_directory_is_listed_not_descended(sample_dir: Path):
    (sample_dir / "link").symlink_to(sample_dir / "sub", target_is_directory=True)
    assert "link" in ls_dirs_sync(sample_dir, {"basename": True})
    recursive = ls_sync(sample_dir, {"recursive": True, "basename": True})
    assert recursive.count("c.txt") == 1


@posix_only
@pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root ignores modes")
def test_unreadable_subdirectory_is_skipped(sample_dir: Path):
    locked = sample_dir / "locked"
    locked.mkdir()
    (locked / "hidden.txt").write_text("")
    locked.chmod(0o300)
    try:
        result = ls_sync(sample_dir, {"recursive": True, "basename": True})
        assert "locked" in result
        assert "hidden.txt" not in result
        assert asyncio.run(ls(sample_dir, {"recursive": True, "basename": True})) == result
    finally:
        locked.chmod(0o700)


def test_utf16_output_with_odd_length_name(tmp_path: Path):
    (tmp_path / "abc").write_text("")
    assert ls_sync(tmp_path, {"encoding": "utf16le", "basename": True}) == ["\u6261"]
    assert asyncio.run(ls(tmp_path, {"encoding": "ucs2", "basename": True})) == ["\u6261"]


@pytest.mark.parametrize("encoding", ["rot13", "zlib"])
def test_non_text_codec_fails_before_reading(tmp_path: Path, encoding: str):
    with pytest.raises(InvalidEncodingError):
        ls_sync(tmp_path / "missing", {"encoding": encoding})


@posix_only
def test_colon_in_relative_path_is_not_a_url(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    data = tmp_path / "v2:data"
    data.mkdir()
    (data / "x.txt").write_text("")
    (tmp_path / "my-dir:x").mkdir()
    monkeypatch.chdir(tmp_path)
    assert ls_sync("v2:data") == [os.path.join("v2:data", "x.txt")]
    assert ls_sync("my-dir:x") == []


def test_async_directory_scan_runs_off_the_event_loop(
    sample_dir: Path, monkeypatch: pytest.MonkeyPatch
):
    real_scandir = os.scandir
    iterating_threads: list[int] = []

    class RecordingScan:
        def __init__(self, path: str) -> None:
            self._entries = real_scandir(path)

        def __enter__(self) -> RecordingScan:
            return self

        def __exit__(self, *exc: object) -> None:
            self._entries.close()

        def __iter__(self):  # type: ignore[no-untyped-def]
            iterating_threads.append(threading.get_ident())
            return iter(self._entries)

    async def run() -> tuple[list[str], int]:
        result = await ls(sample_dir, {"recursive": True, "basename": True})
        return result, threading.get_ident()

    with monkeypatch.context() as m:
        m.setattr(os, "scandir", RecordingScan)
        result, loop_thread = asyncio.run(run())

    assert result == ["a.txt", "b.txt", "c.txt", "deep", "e.md", "sub"]
    assert len(iterating_threads) == 3
    assert loop_thread not in iterating_threads
