import os
import sys
import logging
import time

from .token import TokenError
from .lexer import Lexer
from .parser import Parser
from .scope import resolve
from .formatter import Formatter
from .transform import TransformMinifyScope, TransformBeautifyScope

log = logging.getLogger("luaminify.cli")

class Clock(object):
    def __init__(self, text):
        super(Clock, self).__init__()
        self.text = text

    def __enter__(self):
        self.ts = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.te = time.perf_counter()
        log.debug("%s: %.6f", self.text, self.te - self.ts)

        return False

def read_input(path):
    if path == "-":
        return sys.stdin.read()

    with open(os.path.abspath(path), "r") as rf:
        return rf.read()

def write_output(path, text):
    if path == "-":
        sys.stdout.write(text)
        sys.stdout.write("\n")
    else:
        with open(os.path.abspath(path), "w") as wf:
            wf.write(text)
            wf.write("\n")

class CLI(object):
    def __init__(self):
        super(CLI, self).__init__()

    def register(self, parser):
        pass

    def execute(self, args):
        pass

    def parse(self, args):
        """ read and parse the input named by args.input """

        text = read_input(args.input)

        with Clock("lex"):
            tokens = Lexer().lex(text)

        parser = Parser()
        parser.module_name = args.input
        parser.disable_all_warnings = getattr(args, 'no_warnings', False)

        with Clock("parse"):
            return parser.parse(tokens)

class RenameCLI(CLI):

    command = None
    mode = None
    transform = None

    def register(self, parser):
        subparser = parser.add_parser(self.command,
            description=self.__doc__,
            help=self.__doc__.strip().split("\n")[0])
        subparser.set_defaults(func=self.execute, cli=self)

        subparser.add_argument('--indent', default="\t",
            help="indentation used by the expanded output")
        subparser.add_argument('--no-warnings', action='store_true')
        subparser.add_argument('input', help="lua source file, or - for stdin")
        subparser.add_argument('output', nargs='?', default="-",
            help="output file, or - for stdout (default)")

    def execute(self, args):

        try:
            ast = self.parse(args)
        except TokenError as e:
            log.error("%s: %s", args.input, e)
            return 1

        with Clock("resolve"):
            scopes = resolve(ast)

        with Clock("rename"):
            names = self.transform().transform(*scopes)

        with Clock("format"):
            formatter = Formatter({'mode': self.mode, 'indent': args.indent})
            out_text = formatter.format(ast, names)

        write_output(args.output, out_text)

        return 0

class MinifyCLI(RenameCLI):
    """ minify a lua file

    whitespace and comments are removed and local variables
    are given the shortest available names
    """

    command = 'minify'
    mode = Formatter.MODE_COMPACT
    transform = TransformMinifyScope

class BeautifyCLI(RenameCLI):
    """ beautify a lua file

    the output is indented with one statement per line and
    variables are given descriptive names
    """

    command = 'beautify'
    mode = Formatter.MODE_EXPANDED
    transform = TransformBeautifyScope

class TokensCLI(CLI):
    """ print the tokens of a lua file
    """

    def register(self, parser):
        subparser = parser.add_parser('tokens',
            description=self.__doc__,
            help=self.__doc__.strip().split("\n")[0])
        subparser.set_defaults(func=self.execute, cli=self)

        subparser.add_argument('input')

    def execute(self, args):

        text = read_input(args.input)

        try:
            tokens = Lexer().lex(text)
        except TokenError as e:
            log.error("%s: %s", args.input, e)
            return 1

        for token in tokens:
            sys.stdout.write(token.toString())

        return 0

class AstCLI(CLI):
    """ print the syntax tree of a lua file
    """

    def register(self, parser):
        subparser = parser.add_parser('ast',
            description=self.__doc__,
            help=self.__doc__.strip().split("\n")[0])
        subparser.set_defaults(func=self.execute, cli=self)

        subparser.add_argument('input')

    def execute(self, args):

        try:
            ast = self.parse(args)
        except TokenError as e:
            log.error("%s: %s", args.input, e)
            return 1

        sys.stdout.write(ast.toString())

        return 0

class ScopesCLI(CLI):
    """ print the scopes and variables of a lua file
    """

    def register(self, parser):
        subparser = parser.add_parser('scopes',
            description=self.__doc__,
            help=self.__doc__.strip().split("\n")[0])
        subparser.set_defaults(func=self.execute, cli=self)

        subparser.add_argument('input')

    def execute(self, args):

        try:
            ast = self.parse(args)
        except TokenError as e:
            log.error("%s: %s", args.input, e)
            return 1

        global_scope, root_scope = resolve(ast)

        sys.stdout.write(global_scope.toString())

        return 0

def register_parsers(parser):

    MinifyCLI().register(parser)
    BeautifyCLI().register(parser)
    TokensCLI().register(parser)
    AstCLI().register(parser)
    ScopesCLI().register(parser)
