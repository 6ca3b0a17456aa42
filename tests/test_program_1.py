from pathlib import Path

from playlang.__main__ import main


EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_1_hello_world(capsys):
    main([str(EXAMPLES / 'program_1.play')])
    out = capsys.readouterr().out.strip()
    assert out == 'Hello World!!'
