import io
import json
from pathlib import Path

import pytest

import runtestwithfeedback
import zpoly

TESTCASES = Path(__file__).resolve().parent.parent / "testcases" / "zpoly.json"


def test_dispatch_unknown_action():
    assert zpoly.dispatch_action("gf_mul", {}) == {"error": "Unknown action"}


def test_dispatch_reports_failures():
    reply = zpoly.dispatch_action("zpoly_divrem", {"A": [1], "B": []})
    assert reply == {"error": "Action failed: Division by zero polynomial"}


def test_dispatch_reports_bad_input():
    reply = zpoly.dispatch_action("zpoly_mul", {"A": ["x1"], "B": [1]})
    assert reply == {"error": "Action failed: Invalid number format for A[0]: x1"}


def test_invalid_algorithm():
    reply = zpoly.dispatch_action("zpoly_divrem", {"A": [1], "B": [1], "algorithm": "fft"})
    assert reply == {"error": "Action failed: Invalid algorithm fft"}


@pytest.mark.parametrize("algorithm", ["divconquer", "basecase", "auto"])
def test_divrem_algorithms_agree(algorithm):
    arguments = {"A": [7, -3, 0, 5, 1, "0x123456789abcdef"], "B": [2, 0, -1], "algorithm": algorithm}
    reply = zpoly.dispatch_action("zpoly_divrem", arguments)
    assert reply == zpoly.dispatch_action("zpoly_divrem", {"A": arguments["A"], "B": arguments["B"]})


def test_large_coefficients_are_hex():
    reply = zpoly.dispatch_action("zpoly_mul", {"A": [1 << 31, -(1 << 31)], "B": [1]})
    assert reply == {"P": ["0x80000000", -(1 << 31)]}


def test_testcase_file_passes():
    data = json.loads(TESTCASES.read_text(encoding="utf-8"))
    out, err = io.StringIO(), io.StringIO()
    correct, total, failed = runtestwithfeedback.run(data, out=out, err=err)
    assert failed == []
    assert correct == total == len(data["testcases"])
    assert "korrekt: {0}/{0}".format(total) in err.getvalue()


def test_main_prints_one_line_per_case(capsys):
    zpoly.main(["zpoly.py", str(TESTCASES)])
    lines = capsys.readouterr().out.splitlines()
    replies = [json.loads(line) for line in lines]
    assert replies[0] == {"id": "divrem-exact", "reply": {"Q": [3, 2], "R": []}}
    assert len(replies) == 14


def test_main_bare_mapping(tmp_path, capsys):
    path = tmp_path / "cases.json"
    path.write_text(json.dumps({"a": {"action": "zpoly_add", "arguments": {"A": [1], "B": [2]}}}))
    zpoly.main(["zpoly.py", str(path)])
    assert json.loads(capsys.readouterr().out) == {"id": "a", "reply": {"S": [3]}}


def test_main_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        zpoly.main(["zpoly.py", str(tmp_path / "missing.json")])
    assert exc.value.code == 1
    assert "not found" in capsys.readouterr().err


def test_main_usage(capsys):
    with pytest.raises(SystemExit):
        zpoly.main(["zpoly.py"])
    assert "Syntax" in capsys.readouterr().err
