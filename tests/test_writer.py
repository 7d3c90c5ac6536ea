"""Unit tests for mediatags/processors/writer.py with a stubbed ffmpeg."""

import os
import subprocess
from pathlib import Path

import pytest

from conftest import make_result
from mediatags.errors import IOFailure, MuxFailure
from mediatags.models.tags import EditableTagSet, WriteRequest
from mediatags.processors import writer as writer_module
from mediatags.processors.writer import MetadataWriter


REMUXED = b"remuxed-bytes" * 32


@pytest.fixture
def calls():
    """Argument lists passed to run_tool."""
    return []


@pytest.fixture
def stub_ffmpeg(monkeypatch, calls):
    """Replace run_tool with a fake ffmpeg that writes its output path."""

    def install(returncode=0, stderr="", error=None, output=REMUXED):
        def fake_run_tool(args, timeout=None):
            calls.append((list(args), timeout))
            if error is not None:
                raise error
            if returncode == 0:
                Path(args[-1]).write_bytes(output)
            else:
                # ffmpeg may leave a partial file behind when it fails
                Path(args[-1]).write_bytes(b"partial")
            return make_result(args, returncode=returncode, stderr=stderr)

        monkeypatch.setattr(writer_module, "run_tool", fake_run_tool)

    return install


def metadata_args(args: list[str]) -> list[str]:
    """Values following each -metadata flag."""
    return [args[i + 1] for i, arg in enumerate(args) if arg == "-metadata"]


class TestMetadataWriter:
    """Tests for MetadataWriter.write()."""

    @pytest.fixture
    def writer(self, tool_config):
        return MetadataWriter(tool_config)

    @pytest.fixture
    def request_for(self):
        def build(path, **fields):
            return WriteRequest(path, EditableTagSet(**fields))

        return build

    def test_successful_write_replaces_original(self, writer, media_file, request_for, stub_ffmpeg, scratch_dir):
        """The original gets the remuxed bytes and no temp file is left."""
        stub_ffmpeg()

        writer.write(request_for(media_file, title="A"))

        assert media_file.read_bytes() == REMUXED
        assert list(scratch_dir.iterdir()) == []

    def test_command_uses_stream_copy_and_all_fields(self, writer, media_file, request_for, stub_ffmpeg, calls):
        """Every field is passed, empty ones included, with stream copy."""
        stub_ffmpeg()

        writer.write(request_for(media_file, title="A", album="B"))

        args, _ = calls[0]
        assert args[0] == "ffmpeg"
        assert args[args.index("-i") + 1] == str(media_file)
        assert args[args.index("-c") + 1] == "copy"
        assert args[args.index("-map") + 1] == "0"
        assert "-0:d?" in args
        assert metadata_args(args) == [
            "title=A",
            "artist=",
            "album=B",
            "date=",
            "year=",
            "genre=",
            "comment=",
        ]
        assert args[-2] == "-y"

    def test_temp_file_keeps_extension_and_prefix(self, writer, media_file, request_for, stub_ffmpeg, calls, scratch_dir):
        """The temp output lives in the scratch dir and keeps the extension."""
        stub_ffmpeg()

        writer.write(request_for(media_file))

        output = Path(calls[0][0][-1])
        assert output.parent == scratch_dir
        assert output.suffix == ".flac"
        assert output.name.startswith("ffmpeg-temp-")

    def test_values_with_equals_and_newlines_pass_through(self, writer, media_file, request_for, stub_ffmpeg, calls):
        """Tag values are passed verbatim as single arguments."""
        stub_ffmpeg()

        writer.write(request_for(media_file, comment="a=b\nsecond line"))

        assert "comment=a=b\nsecond line" in metadata_args(calls[0][0])

    def test_mux_failure_leaves_original_untouched(self, writer, media_file, request_for, stub_ffmpeg, scratch_dir):
        """A failing ffmpeg raises MuxFailure without touching the file."""
        before = media_file.read_bytes()
        stub_ffmpeg(returncode=1, stderr="Could not write header for output file\n")

        with pytest.raises(MuxFailure) as excinfo:
            writer.write(request_for(media_file, title="A"))

        assert "Could not write header" in excinfo.value.diagnostic
        assert media_file.read_bytes() == before
        assert list(scratch_dir.iterdir()) == []

    def test_mux_timeout(self, writer, media_file, request_for, stub_ffmpeg, scratch_dir):
        """A hung ffmpeg surfaces as MuxFailure and cleans up."""
        before = media_file.read_bytes()
        stub_ffmpeg(error=subprocess.TimeoutExpired(cmd="ffmpeg", timeout=600))

        with pytest.raises(MuxFailure, match="timed out"):
            writer.write(request_for(media_file))

        assert media_file.read_bytes() == before
        assert list(scratch_dir.iterdir()) == []

    def test_missing_ffmpeg(self, writer, media_file, request_for, stub_ffmpeg, scratch_dir):
        """A spawn failure surfaces as MuxFailure and cleans up."""
        stub_ffmpeg(error=FileNotFoundError("ffmpeg"))

        with pytest.raises(MuxFailure, match="could not be started"):
            writer.write(request_for(media_file))

        assert list(scratch_dir.iterdir()) == []

    def test_empty_output_is_a_mux_failure(self, writer, media_file, request_for, stub_ffmpeg):
        """ffmpeg reporting success without output must not wipe the file."""
        before = media_file.read_bytes()
        stub_ffmpeg(output=b"")

        with pytest.raises(MuxFailure, match="no output"):
            writer.write(request_for(media_file))

        assert media_file.read_bytes() == before

    def test_unreadable_output_is_an_io_failure(self, writer, media_file, request_for, stub_ffmpeg, scratch_dir, monkeypatch):
        """An OSError inspecting the temp output is reported as IOFailure, not as a creation error."""
        before = media_file.read_bytes()
        stub_ffmpeg()
        original_stat = Path.stat

        def failing_stat(self, *args, **kwargs):
            if self.parent == scratch_dir:
                raise PermissionError(13, "Permission denied", str(self))
            return original_stat(self, *args, **kwargs)

        monkeypatch.setattr(Path, "stat", failing_stat)

        with pytest.raises(IOFailure, match="inspect temporary file"):
            writer.write(request_for(media_file))

        monkeypatch.undo()
        assert media_file.read_bytes() == before
        assert list(scratch_dir.iterdir()) == []

    def test_relative_name_starting_with_dash(self, writer, media_file, request_for, stub_ffmpeg, calls, monkeypatch):
        """A relative file name like -song.flac reaches ffmpeg as an absolute path."""
        dashed = media_file.parent / "-song.flac"
        media_file.rename(dashed)
        monkeypatch.chdir(dashed.parent)
        stub_ffmpeg()

        writer.write(request_for(Path("./-song.flac"), title="A"))

        args, _ = calls[0]
        input_arg = args[args.index("-i") + 1]
        assert input_arg == str(dashed)
        assert not input_arg.startswith("-")
        assert dashed.read_bytes() == REMUXED

    def test_copy_failure_raises_io_failure(self, writer, media_file, request_for, stub_ffmpeg, scratch_dir, monkeypatch):
        """A failing copy-back raises IOFailure, leaves no temp file and no changes."""
        before = media_file.read_bytes()
        stub_ffmpeg()

        def failing_copy(src, dst):
            raise PermissionError(13, "Permission denied", str(dst))

        monkeypatch.setattr(writer_module.shutil, "copyfile", failing_copy)

        with pytest.raises(IOFailure) as excinfo:
            writer.write(request_for(media_file, title="A"))

        assert isinstance(excinfo.value.__cause__, PermissionError)
        assert media_file.read_bytes() == before
        assert list(scratch_dir.iterdir()) == []

    def test_missing_scratch_dir_raises_io_failure(self, media_file, request_for, stub_ffmpeg, calls, tmp_path):
        """If the temp file cannot be created, ffmpeg is never run."""
        from mediatags.config import ToolConfig

        writer = MetadataWriter(ToolConfig(scratch_dir=tmp_path / "does-not-exist"))
        stub_ffmpeg()

        with pytest.raises(IOFailure, match="temporary file"):
            writer.write(request_for(media_file))

        assert calls == []

    def test_missing_target_raises_io_failure(self, writer, tmp_path, request_for, stub_ffmpeg, calls):
        """A missing target is rejected before any work is done."""
        stub_ffmpeg()

        with pytest.raises(IOFailure, match="not found"):
            writer.write(request_for(tmp_path / "gone.mp3"))

        assert calls == []

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="root ignores file permission bits",
    )
    def test_read_only_target_raises_io_failure(self, writer, media_file, request_for, stub_ffmpeg, calls, scratch_dir):
        """A read-only file fails without running ffmpeg or leaving temp files."""
        before = media_file.read_bytes()
        media_file.chmod(0o444)
        stub_ffmpeg()

        try:
            with pytest.raises(IOFailure, match="not writable"):
                writer.write(request_for(media_file, title="A"))
        finally:
            media_file.chmod(0o644)

        assert calls == []
        assert media_file.read_bytes() == before
        assert list(scratch_dir.iterdir()) == []

    def test_original_permissions_kept(self, writer, media_file, request_for, stub_ffmpeg):
        """Copying over the original keeps its mode bits."""
        media_file.chmod(0o640)
        stub_ffmpeg()

        writer.write(request_for(media_file))

        assert media_file.stat().st_mode & 0o777 == 0o640
