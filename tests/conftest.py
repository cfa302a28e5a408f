import logging

import pytest


@pytest.fixture(autouse=True)
def isolate_working_directory(tmp_path, monkeypatch):
    """Run every test from an empty directory.

    The CLI and the pipeline write ``CHANGELOG.md`` relative to the
    current directory; this keeps stray files out of the source tree.
    """
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Drop root handlers installed by the CLI during a test.

    ``CliRunner`` closes the stream a handler was bound to when the
    invocation ends; leaving the handler in place makes later log calls
    write to a closed file.
    """
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
