from pathlib import Path

from playlang.__main__ import main


EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_3_strings_and_numbers(capsys):
    main([str(EXAMPLES / 'program_3.play')])
    out = capsys.readouterr().out.strip()
    # integral numbers print without a fraction
    assert out.splitlines() == ['Hello, world', 'n = 42', 'half: 3.5', 'true']
