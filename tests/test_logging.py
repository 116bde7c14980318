from __future__ import annotations

import logging

from querygraph.logging import add_file_handler, get_logger


def test_file_handler_added_once(tmp_path):
    pkg = logging.getLogger("querygraph")
    log_file = tmp_path / "run.log"
    first = add_file_handler(log_file)
    try:
        assert add_file_handler(log_file) is first
        get_logger("querygraph.test").warning("hello file")
        assert "querygraph.test | WARNING | hello file" in log_file.read_text(encoding="utf-8")
    finally:
        pkg.removeHandler(first)
        first.close()
