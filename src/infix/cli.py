from os import isatty, path
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import traceback
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory, InMemoryHistory

from .util import CalcError
from .scanner import Scanner
from .parser import parse
from .evaluator import evaluate


class InteractiveInput:
    def __init__(self, prompt, history=None):
        self.prompt = prompt
        self.history = history

    def __iter__(self):
        if self.history is None:
            history = InMemoryHistory()
        else:
            history = FileHistory(path.expanduser(self.history))
        try:
            session = PromptSession(message=self.prompt,
                                    history=history,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    # Certainly not! But be explicit.
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the infix calculator.
    '''

    DEFAULT_PROMPT = '> '
    # Line that ends the session, compared exactly
    EXIT = 'exit'

    def lines(self):
        '''
        Yield input lines, without terminators, up to the exit line.

        Blank lines are skipped.
        '''
        for line in self.args.expressions:
            line = line.rstrip('\r\n')
            if line == type(self).EXIT:
                return
            if line.strip():
                yield line

    def report(self, error):
        if self.args.verbose:
            traceback.print_exc(file=sys.stderr)
        else:
            print(error.args[0], file=sys.stderr)

    def dumper(self):
        '''
        Dump every lexeme of each line, then its AST.
        '''
        scanner = Scanner()
        print('[group]\t<repr(lexeme)>\t<token>')
        for line in self.lines():
            try:
                tokens = []
                for match in scanner.lex(line):
                    token = scanner.token(match)
                    if token is not None:
                        tokens.append(token)
                    print(*scanner.matchedgroups(match).keys(),
                          repr(match.group(0)),
                          repr(token),
                          sep='\t')
                print('ast', repr(parse(tokens)), sep='\t')
            except CalcError as e:
                self.report(e)

    def executor(self):
        '''
        Evaluate each line, printing its result.
        '''
        scanner = Scanner()
        for line in self.lines():
            try:
                result = evaluate(parse(scanner.tokenize(line)))
            # Abort this line only; the session goes on.
            except CalcError as e:
                self.report(e)
            else:
                print(repr(result))

    def raw_grammar(self):
        '''
        Print current internally defined token grammar.
        '''
        print(Scanner.GRAMMAR)

    def _interactive(self):
        '''
        Return True if lines should be prompted for.

        That is, a prompt was asked for, or we're talking to a terminal both
        ways.
        '''
        return bool(self.args.prompt) or \
            isatty(sys.stdin.fileno()) and isatty(sys.stdout.fileno())

    def _input(self):
        '''
        Return where lines come from when none were given with -e.
        '''
        if not self._interactive():
            return sys.stdin
        return InteractiveInput(prompt=self.args.prompt or
                                type(self).DEFAULT_PROMPT,
                                history=self.args.history)

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        parser = ArgumentParser(description='Infix calculator')
        parser.add_argument('-v', '--verbose',
                            action='store_true',
                            help='show tracebacks of bad lines')

        source = parser.add_argument_group('input')
        source.add_argument('--history',
                            metavar='FILE',
                            help='persist interactive history to FILE')
        lines = source.add_mutually_exclusive_group()
        lines.add_argument('-e', '--expression',
                           nargs=REMAINDER,
                           dest='expressions',
                           help='evaluate these lines instead of stdin')
        lines.add_argument('-p', '--prompt',
                           nargs=OPTIONAL,
                           const=type(self).DEFAULT_PROMPT,
                           help='prompt for lines, even off a terminal')

        actions = parser.add_argument_group('actions')
        action = actions.add_mutually_exclusive_group()
        action.add_argument('-G', '--raw-grammar',
                            action='store_const',
                            const=self.raw_grammar,
                            dest='action',
                            help='print the token pattern')
        action.add_argument('-D', '--dump',
                            action='store_const',
                            const=self.dumper,
                            dest='action',
                            help='print tokens and AST of each line')

        parser.set_defaults(action=self.executor, expressions=None)
        self.argument_parser = parser

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        if self.args.expressions is None:
            self.args.expressions = self._input()
        try:
            self.args.action()
        except KeyboardInterrupt:
            sys.exit(1)


def main():
    CLI().run()
