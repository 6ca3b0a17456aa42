"""Interactive console for playlang.

Code is typed line by line and submitted with an empty line. Each
submission is appended to the code committed so far and the whole buffer
is run again in script mode, so only the last statement of the new code
prints. A submission that fails is discarded and the buffer is left as it
was.
"""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from .errors import PlaylangError
from .interpreter import Interpreter
from .parser import parse_program


PROMPT = '>  '
HELP = """\
Type playlang statements and submit them with an empty line.
  -h    show this help
  -q    quit the console
"""


class Console:
    def __init__(self, **options):
        self.committed = ''
        self.debug_fp = None
        debug_file = options.get('debug_file')
        if isinstance(debug_file, str) and options.get('debug_level', 0) > 0:
            # one trace for the whole session instead of one per submission
            self.debug_fp = open(debug_file, 'w', encoding='utf-8')
            options['debug_file'] = self.debug_fp
        self.options = options

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def submit(self, text: str) -> List[str]:
        """Run the committed code plus `text`; commit it when the run succeeds."""
        code = self.committed + text
        if not code.endswith('\n'):
            code += '\n'
        interpreter = Interpreter(script_mode=True, **self.options)
        output = interpreter.run(parse_program(code))
        self.committed = code
        return output

    def reset(self):
        self.committed = ''

    def repl(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        """Read submissions from `stdin` until ``-q`` or end of input."""
        stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout
        print('(type -h for help or -q to quit)', file=stdout)
        pending: List[str] = []
        while True:
            print(PROMPT, end='', file=stdout, flush=True)
            line = stdin.readline()
            if not line:
                break
            stripped = line.strip()
            if stripped.startswith('-q'):
                break
            if stripped.startswith('-h'):
                print(HELP, end='', file=stdout)
                continue
            if stripped:
                if not stripped.startswith('//'):
                    pending.append(line)
                continue
            if not pending:
                continue
            text = ''.join(pending)
            pending = []
            try:
                for out in self.submit(text):
                    print(out, file=stdout)
            except PlaylangError as err:
                print(str(err), file=sys.stderr)
        self.close()
