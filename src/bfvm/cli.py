from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .api import ExecutionOptions, compile_file, execute
from .compiler import Compiler
from .instructions import format_program
from .vm import EOF_KEEP, EOF_POLICIES, MEMORY_ERROR, STEP_LIMIT


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="bfvm",
        description="Compile and run a tape-language program.",
    )
    parser.add_argument("file", nargs="?", default="-", help="source file, or - for standard input (default)")
    parser.add_argument("--dump", action="store_true", help="print the compiled instructions to stderr")
    parser.add_argument("--compile-only", action="store_true", help="stop after compiling")
    parser.add_argument("--max-steps", type=int, default=None, help="stop after this many instructions")
    parser.add_argument("--eof", choices=EOF_POLICIES, default=EOF_KEEP,
                        help="what INPUT stores at end of input (default: keep)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        options = ExecutionOptions(max_steps=args.max_steps, eof=args.eof)
    except ValueError as e:
        parser.error(str(e))

    if args.file == "-":
        compiled = Compiler().compile(sys.stdin.buffer)
    else:
        try:
            compiled = compile_file(args.file)
        except OSError as e:
            print(f"Error: couldn't read {args.file}: {e.strerror or e}", file=sys.stderr)
            return 1

    if not compiled.ok:
        print(compiled.error, file=sys.stderr)
        return 1

    program = compiled.program
    if args.dump:
        print(format_program(program), file=sys.stderr)
    if args.compile_only:
        return 0

    # with file "-" the source consumed stdin, so INPUT sees end of input
    result = execute(program, sys.stdin.buffer, sys.stdout.buffer, options=options)
    if result.status == MEMORY_ERROR:
        print(result.error, file=sys.stderr)
        return 1
    if result.status == STEP_LIMIT:
        print(f"Error: step limit reached after {result.steps} steps (instruction {result.pc})", file=sys.stderr)
        return 1
    return 0
