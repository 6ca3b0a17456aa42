"""CLI entry point for the playlang interpreter.

Usage:
    python -m playlang [-v|-vv|-vvv] [--mode MODE] <program_file>
    python -m playlang [-v...] --emit-ast <program_file>
    python -m playlang [-v...] --ast <ast_json_file>
    python -m playlang

Options:
  -v            Increase debug verbosity (can be repeated)
  --mode        scan, parse, validate, execute (default) or console
  --emit-ast    Parse the given program file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file the interactive console is started. Debug
information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import ast_to_obj, ast_from_obj
from .console import Console
from .errors import PlaylangError
from .interpreter import Interpreter
from .parser import parse_program
from .processor import MODES, process


DEBUG_FILE = 'debug.txt'


def _read(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="playlang language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--mode', choices=MODES, default='execute', help='processing phases to run')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='PROGRAM_FILE', help='emit AST JSON for the given program file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='program file to process')
    args = parser.parse_args(argv)
    debug_file = DEBUG_FILE if args.v > 0 else None

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = _read(program_file)
        try:
            ast_program = parse_program(source)
        except PlaylangError as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)
        obj = ast_to_obj(ast_program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        data = json.loads(_read(ast_path))
        ast_program = ast_from_obj(data)
        interpreter = Interpreter(script_mode=args.mode == 'console', debug_level=args.v, debug_file=debug_file)
        try:
            interpreter.run(ast_program)
        except PlaylangError as e:
            for line in interpreter.output:
                print(line)
            print(str(e), file=sys.stderr)
            sys.exit(1)
        for line in interpreter.output:
            print(line)
        return

    # No file: interactive console
    if not args.program:
        Console(debug_level=args.v, debug_file=debug_file).repl()
        return

    source = _read(Path(args.program))
    result = process(source, args.mode, debug_level=args.v, debug_file=debug_file)
    if args.mode == 'scan':
        for token in result.tokens:
            print(f"{token.type} {token.value!r} [{token.start_pos}, {token.end_pos}]")
    for line in result.output:
        print(line)
    if not result.ok:
        print(f"{result.error_kind}: {result.error_message} at location {list(result.location)}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
