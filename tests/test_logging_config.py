import importlib
import logging

import pytest


def test_import_leaves_host_logging_alone():
    root = logging.getLogger()
    handler = logging.NullHandler()
    previous_level = root.level
    root.addHandler(handler)
    root.setLevel(logging.ERROR)
    try:
        import core.logging_config

        importlib.reload(core.logging_config)

        assert handler in root.handlers
        assert root.level == logging.ERROR
    finally:
        root.removeHandler(handler)
        root.setLevel(previous_level)


def test_demo_entry_point_configures_logging(monkeypatch):
    from examples import paynow_demo

    calls = []

    async def fake_run(args):
        return 0

    monkeypatch.setattr(paynow_demo, "configure_logging", lambda: calls.append("configured"))
    monkeypatch.setattr(paynow_demo, "parse_args", lambda: None)
    monkeypatch.setattr(paynow_demo, "run", fake_run)

    with pytest.raises(SystemExit) as ei:
        paynow_demo.main()
    assert ei.value.code == 0
    assert calls == ["configured"]
