from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from types import ModuleType

import pytest

_SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "watch_json.py"


def _load_script() -> ModuleType:
    spec = importlib.util.spec_from_file_location("watch_json", _SCRIPT)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.mark.parametrize(
    ("argv", "env"),
    [
        (["--probes", "0"], {}),
        ([], {"STALE_PROBE_COUNT": "many"}),
    ],
)
def test_invalid_configuration_is_a_usage_error(
    argv: list[str],
    env: dict[str, str],
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    watch_json = _load_script()
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setattr(sys, "argv", ["watch_json.py", "https://replica.example/state", *argv])

    with pytest.raises(SystemExit) as excinfo:
        watch_json.main()

    assert excinfo.value.code == 2
    err = capsys.readouterr().err
    assert "probe_count" in err or "STALE_PROBE_COUNT" in err
