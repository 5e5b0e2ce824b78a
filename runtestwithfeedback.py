import json
import sys

from zpoly import ACTION_LUT, dispatch_action, load_testcases

def compare_results(actual: dict, expected: dict) -> bool:
    return actual == expected

def run(data, out=None, err=None):
    """
    Führt alle Testcases aus und vergleicht sofort mit expectedResults, falls vorhanden.
    Rückgabe: (korrekt, gesamt, Liste der fehlgeschlagenen IDs).
    """
    out = sys.stdout if out is None else out
    err = sys.stderr if err is None else err
    total = 0
    correct = 0
    incorrect = 0
    mismatches = []
    missing_expected = []
    missing_action = []

    def process_one(uuid, content, expected_results):
        nonlocal total, correct, incorrect
        total += 1

        action = content.get("action")
        arguments = content.get("arguments", {})

        # Unbekannte Action
        if action not in ACTION_LUT:
            missing_action.append(uuid)
            incorrect += 1
            print(json.dumps({"id": uuid, "reply": {"error": "Unknown action"}}), file=out)
            return

        response = dispatch_action(action, arguments)
        print(json.dumps({"id": uuid, "reply": response}), file=out)

        if expected_results is not None:
            exp = expected_results.get(uuid)
            if exp is None:
                missing_expected.append(uuid)
                incorrect += 1
            elif compare_results(response, exp):
                correct += 1
            else:
                incorrect += 1
                mismatches.append({
                    "id": uuid,
                    "action": action,
                    "expected": exp,
                    "actual": response
                })

    if "testcases" in data:
        expected_results = data.get("expectedResults", None)
        for uuid, content in data["testcases"].items():
            process_one(uuid, content, expected_results)

        if expected_results is not None:
            print(f"korrekt: {correct}/{total}, inkorrekt: {incorrect}/{total}", file=err)
            if missing_expected:
                print(f"Fehlende expectedResults für Cases: {len(missing_expected)}", file=err)
            if missing_action:
                print(f"Unbekannte Actions in Cases: {len(missing_action)}", file=err)
            if mismatches:
                ids = [m["id"] for m in mismatches]
                print("Fehlgeschlagene Testcases (IDs): " + ", ".join(ids), file=err)
    else:
        for uuid, content in data.items():
            process_one(uuid, content, None)

    failed = [m["id"] for m in mismatches] + missing_expected + missing_action
    return correct, total, failed

def main():
    if len(sys.argv) != 2:
        print(f"Syntax: python3 {sys.argv[0]} <json_filename>", file=sys.stderr)
        sys.exit(1)
    data = load_testcases(sys.argv[1])
    _, _, failed = run(data)
    sys.exit(1 if failed else 0)

if __name__ == '__main__':
    main()
