"""Tests for the local filesystem resolver."""

import pytest
from edon_modules.errors import ErrorKind
from edon_modules.errors import FileReadError
from edon_modules.models import Scheme
from edon_modules.resolvers import LocalResolver


@pytest.mark.asyncio
async def test_reads_relative_path_against_base(tmp_path):
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "math.js").write_text("export const add = (a, b) => a + b;\n")

    module = await LocalResolver(base_path=tmp_path).resolve("./lib/math.js")

    assert module.specifier == "./lib/math.js"
    assert module.scheme == Scheme.LOCAL
    assert "add" in module.content


@pytest.mark.asyncio
async def test_reads_relative_path_against_cwd(tmp_path, monkeypatch):
    (tmp_path / "main.js").write_text("console.log('hi');")
    monkeypatch.chdir(tmp_path)

    module = await LocalResolver().resolve("main.js")

    assert module.content == "console.log('hi');"


@pytest.mark.asyncio
async def test_absolute_path_ignores_base(tmp_path):
    target = tmp_path / "abs.js"
    target.write_text("abs")

    module = await LocalResolver(base_path=tmp_path / "elsewhere").resolve(str(target))

    assert module.content == "abs"


@pytest.mark.asyncio
async def test_file_uri_prefix_is_accepted(tmp_path):
    target = tmp_path / "uri.js"
    target.write_text("uri")

    module = await LocalResolver().resolve(f"file://{target}")

    assert module.content == "uri"
    assert module.specifier == f"file://{target}"


@pytest.mark.asyncio
async def test_missing_file_raises_file_read_error(tmp_path):
    with pytest.raises(FileReadError) as exc_info:
        await LocalResolver(base_path=tmp_path).resolve("./nope.js")

    assert exc_info.value.kind == ErrorKind.FILE_READ_FAILURE
    assert exc_info.value.specifier == "./nope.js"
    assert isinstance(exc_info.value.__cause__, FileNotFoundError)


@pytest.mark.asyncio
async def test_directory_raises_file_read_error(tmp_path):
    (tmp_path / "dir.js").mkdir()

    with pytest.raises(FileReadError):
        await LocalResolver(base_path=tmp_path).resolve("dir.js")


@pytest.mark.asyncio
async def test_undecodable_file_raises_file_read_error(tmp_path):
    (tmp_path / "bin.js").write_bytes(b"\xff\xfe\x00garbage\x80")

    with pytest.raises(FileReadError):
        await LocalResolver(base_path=tmp_path).resolve("bin.js")


def test_absolute_path_does_not_touch_filesystem(tmp_path):
    resolver = LocalResolver(base_path=tmp_path)

    assert resolver.absolute_path("./x/y.js") == tmp_path / "x" / "y.js"
