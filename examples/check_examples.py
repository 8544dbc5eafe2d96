#!/usr/bin/env python3

import os
import subprocess
import sys


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def _run_example(path: str, *, args: list, input_data: bytes, timeout_s: float = 60.0) -> dict:
    env = dict(os.environ)
    env['PYTHONPATH'] = os.path.join(ROOT, 'src') + os.pathsep + env.get('PYTHONPATH', '')
    cmd = [sys.executable, "-m", "bfvm", path, *args]
    try:
        p = subprocess.run(
            cmd,
            input=input_data,
            capture_output=True,
            cwd=ROOT,
            env=env,
            timeout=timeout_s,
        )
        return {
            "ok": p.returncode == 0,
            "returncode": p.returncode,
            "stdout": p.stdout,
            "stderr": p.stderr.decode(errors="replace"),
            "timeout": False,
        }
    except subprocess.TimeoutExpired as e:
        return {
            "ok": False,
            "returncode": None,
            "stdout": e.stdout or b"",
            "stderr": (e.stderr or b"").decode(errors="replace") + "\n[TIMEOUT]",
            "timeout": True,
        }


def main() -> int:
    examples = [
        {
            "file": "examples/hello_world.bf",
            "args": [],
            "input": b"",
            "check": lambda out: out == b"Hello World!\n",
            "expect": "exactly equals 'Hello World!\\n'",
        },
        {
            "file": "examples/cat.bf",
            "args": ["--eof", "zero"],
            "input": b"copy me",
            "check": lambda out: out == b"copy me",
            "expect": "exactly equals 'copy me'",
        },
        {
            "file": "examples/reverse.bf",
            "args": ["--eof", "zero"],
            "input": b"stressed",
            "check": lambda out: out == b"desserts",
            "expect": "exactly equals 'desserts'",
        },
    ]

    print("=== bfvm Examples Verification ===")

    any_fail = False
    for ex in examples:
        r = _run_example(ex["file"], args=ex["args"], input_data=ex["input"])

        passed = r["ok"] and ex["check"](r["stdout"])
        status = "PASS" if passed else "FAIL"
        print(f"\n[{status}] {ex['file']}")

        if passed:
            continue

        any_fail = True
        print(f"Expected: {ex['expect']}")
        print(f"Return code: {r['returncode']}  Timeout: {r['timeout']}")
        print("--- program output ---")
        print(r["stdout"][:2000])
        print("--- stderr ---")
        print(r["stderr"][:2000])

    if any_fail:
        print("\nSome examples FAILED.")
        return 1

    print("\nAll examples passed (output checks).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
