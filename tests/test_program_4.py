from pathlib import Path

from playlang.__main__ import main


EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_4_break_leaves_loop(capsys):
    main([str(EXAMPLES / 'program_4.play')])
    out = capsys.readouterr().out.strip()
    assert out == '5'
