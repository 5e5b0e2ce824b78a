#!/usr/bin/env python3

import json
import sys

from polyops import fmpz_poly
from polyops import mat

ACTION_LUT = {
    "zpoly_add": fmpz_poly.zpoly_add,
    "zpoly_sub": fmpz_poly.zpoly_sub,
    "zpoly_mul": fmpz_poly.zpoly_mul,
    "zpoly_divrem": fmpz_poly.zpoly_divrem,
    "zpoly_div": fmpz_poly.zpoly_div,
    "zpoly_rem": fmpz_poly.zpoly_rem,
    "mat_solve_triu": mat.mat_solve_triu,
}

def dispatch_action(action, arguments, action_lut=ACTION_LUT):
    """
    Mappt die action auf die korrespondierende Funktion.
    """
    mapped_action = action_lut.get(action)
    if mapped_action is None:
        return {"error": "Unknown action"}
    try:
        return mapped_action(arguments)
    except Exception as e:
        return {"error": f"Action failed: {e}"}

def load_testcases(json_testcase):
    """
    Liest die JSON-Datei ein, bei Fehlern Meldung auf stderr und Exit-Code 1.
    """
    try:
        with open(json_testcase, 'r', encoding='utf-8') as file:
            return json.load(file)
    except FileNotFoundError:
        print(f"File {json_testcase} not found", file=sys.stderr)
        sys.exit(1)
    except json.decoder.JSONDecodeError as e:
        print(f"Invalid JSON: {e}", file=sys.stderr)
        sys.exit(1)

def iter_testcases(data):
    """
    Liefert (id, action, arguments), egal ob die Testcases unter "testcases" liegen oder direkt.
    """
    testcases = data["testcases"] if "testcases" in data else data
    for uuid, content in testcases.items():
        yield uuid, content.get("action"), content.get("arguments", {})

def main(argv=None):
    """
    Liest eine JSON-Datei ein, interpretiert die action und die arguments
    und gibt als Ergebnis eine JSON im Einzeilenformat aus.
    """
    argv = sys.argv if argv is None else argv
    if len(argv) != 2:
        print(f"Syntax: python3 {argv[0]} <json_filename>", file=sys.stderr)
        sys.exit(1)

    data = load_testcases(argv[1])
    for uuid, action, arguments in iter_testcases(data):
        response = dispatch_action(action, arguments)
        print(json.dumps({"id": uuid, "reply": response}))

if __name__ == '__main__':
    main()
