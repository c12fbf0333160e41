"""
Tests for output sink selection.
"""

import io

import pytest

from bindgen.errors import OutputCreateError
from bindgen.output import FileSink, StdoutSink, select_output


class TestSelectOutput:
    """Test select_output."""

    def test_dash_selects_stdout(self):
        assert isinstance(select_output("-"), StdoutSink)

    def test_path_creates_file(self, tmp_path):
        path = tmp_path / "out.rs"
        sink = select_output(str(path))
        try:
            assert isinstance(sink, FileSink)
            assert path.exists()
        finally:
            sink.close()

    def test_path_truncates_existing_file(self, tmp_path):
        path = tmp_path / "out.rs"
        path.write_text("old contents that are longer")
        with select_output(str(path)) as sink:
            sink.write(b"new")
        assert path.read_bytes() == b"new"

    def test_unwritable_path_raises(self, tmp_path):
        path = tmp_path / "missing" / "out.rs"
        with pytest.raises(OutputCreateError) as exc_info:
            select_output(str(path))
        assert str(path) in str(exc_info.value)
        assert "unwritable" in str(exc_info.value)

    def test_create_error_is_os_error(self, tmp_path):
        with pytest.raises(OSError):
            select_output(str(tmp_path / "missing" / "out.rs"))


class TestSinks:
    """Test sink write/close behavior."""

    def test_file_sink_closed_after_context(self, tmp_path):
        with select_output(str(tmp_path / "out.rs")) as sink:
            sink.write(b"data")
        assert sink.closed

    def test_file_sink_closed_on_error(self, tmp_path):
        with pytest.raises(RuntimeError):
            with select_output(str(tmp_path / "out.rs")) as sink:
                raise RuntimeError("boom")
        assert sink.closed

    def test_stdout_sink_flushes_without_closing(self):
        stream = io.BytesIO()
        with StdoutSink(stream) as sink:
            sink.write(b"abc")
        assert not stream.closed
        assert stream.getvalue() == b"abc"

    def test_stdout_sink_writes_process_stdout(self, capsysbinary):
        with select_output("-") as sink:
            sink.write(b"hello\n")
        assert capsysbinary.readouterr().out == b"hello\n"

    def test_failed_close_reported_once(self):
        class FullDisk(io.BytesIO):
            def close(self):
                if not self.closed:
                    super().close()
                    raise OSError(28, "No space left on device")

        sink = FileSink("out.rs", FullDisk())
        with pytest.raises(OSError):
            sink.close()
        assert sink.closed
        sink.close()

    def test_stdout_sink_flushes_once(self):
        class CountingStream(io.BytesIO):
            flushes = 0

            def flush(self):
                self.flushes += 1

        stream = CountingStream()
        with StdoutSink(stream) as sink:
            sink.close()
        assert stream.flushes == 1
