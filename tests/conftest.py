from pytest import fixture

from infix.cli import CLI


@fixture
def run(capsys):
    '''
    Run CLI on given command line, return (stdout lines, stderr lines).
    '''
    def runner(*args):
        CLI().run(args=list(args))
        captured = capsys.readouterr()
        return captured.out.splitlines(), captured.err.splitlines()
    return runner
