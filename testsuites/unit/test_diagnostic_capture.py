import pytest

from robust_ui.diagnostic_capture import DiagnosticCapture, SnapshotWriter, sanitize_dom
from robust_ui.errors import PreconditionError

INNER_HTML = "document.documentElement.innerHTML"

PAGE = (
    "<head><title>Checkout</title><script src=\"/app.js\"></script></head>"
    "<body><p>Order failed</p><SCRIPT>\nwindow.track();\n</SCRIPT></body>"
)


class RecordingWriter(SnapshotWriter):
    def __init__(self, error=None):
        self.writes = []
        self.error = error

    def write_text(self, path, content):
        if self.error:
            raise self.error
        self.writes.append((path, content))


def test_sanitize_disables_scripts_and_adds_base():
    html = sanitize_dom(PAGE, "http://app.test/checkout")

    assert html.startswith('<html><head><base href="http://app.test/checkout"/><title>')
    assert html.endswith("</html>")
    assert '<!-- Disabled to preserve page integrity <script src="/app.js"></script> -->' in html
    assert "<!-- Disabled to preserve page integrity <SCRIPT>\nwindow.track();\n</SCRIPT> -->" in html
    assert "<p>Order failed</p>" in html


def test_capture_writes_snapshot(driver, tmp_path):
    driver.script_results[INNER_HTML] = PAGE
    capture = DiagnosticCapture(driver, snapshot_dir=tmp_path)

    path = capture.capture("test_checkout", "submitting the order", AssertionError("boom"))

    assert path.parent == tmp_path
    assert path.name.startswith("test_checkout-")
    assert path.name.endswith("-failure-report-snapshot.html")
    content = path.read_text(encoding="utf-8")
    assert '<base href="http://localhost:3000/page"/>' in content
    assert "Disabled to preserve page integrity" in content


def test_capture_uses_injected_writer(driver, tmp_path):
    driver.script_results[INNER_HTML] = "<head></head><body></body>"
    writer = RecordingWriter()
    capture = DiagnosticCapture(driver, writer=writer, snapshot_dir=tmp_path)

    path = capture.capture("session", None, RuntimeError("x"))

    assert writer.writes == [(path, '<html><head><base href="http://localhost:3000/page"/></head><body></body></html>')]


def test_capture_without_driver_is_a_no_op(tmp_path):
    capture = DiagnosticCapture(None, snapshot_dir=tmp_path)
    assert capture.capture("session", None, RuntimeError("x")) is None
    assert list(tmp_path.iterdir()) == []


def test_capture_without_dom_returns_none(driver, tmp_path):
    writer = RecordingWriter()
    capture = DiagnosticCapture(driver, writer=writer, snapshot_dir=tmp_path)

    assert capture.capture("session", None, RuntimeError("timeout")) is None
    assert writer.writes == []


def test_capture_requires_cause(driver, tmp_path):
    with pytest.raises(PreconditionError):
        DiagnosticCapture(driver, snapshot_dir=tmp_path).capture("session", None, None)


def test_write_failure_propagates(driver, tmp_path):
    driver.script_results[INNER_HTML] = "<head></head>"
    capture = DiagnosticCapture(driver, writer=RecordingWriter(OSError("disk full")), snapshot_dir=tmp_path)

    with pytest.raises(OSError):
        capture.capture("session", None, RuntimeError("x"))


def test_snapshot_writer_is_abstract():
    with pytest.raises(TypeError):
        SnapshotWriter()
