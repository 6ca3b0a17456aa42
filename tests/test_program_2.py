from pathlib import Path

from playlang.__main__ import main


EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_2_fibonacci(capsys):
    main([str(EXAMPLES / 'program_2.play')])
    out = capsys.readouterr().out.strip()
    assert out.splitlines() == ['0', '1', '1', '2', '3', '5', '8', '13', '21', '34']
