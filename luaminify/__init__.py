from .token import Token, TokenError
from .lexer import Lexer, LexError
from .parser import Parser, ParseError
from .node import Node
from .scope import Scope, Variable, resolve
from .formatter import Formatter
from .transform import TransformMinifyScope, TransformBeautifyScope
from .util import format_table, count_table

def tokenize(text: str) -> list:
    """ Split Lua source into a list of tokens

    :param text: the Lua source to tokenize

    The last token is always of type Eof
    """
    return Lexer().lex(text)

def parse(source) -> Node:
    """ Parse Lua source into an AST

    :param source: the Lua source to parse, or a list of tokens
    """
    parser = Parser()
    parser.disable_all_warnings = True

    return parser.parse(source)

createTokenStream = tokenize
createParser = parse

def minify(ast: Node, scopes=None) -> str:
    """ Format an AST as compact Lua, with the shortest variable names

    :param ast: the AST to minify
    :param scopes: the (global_scope, root_scope) pair returned by resolve,
                   the AST is resolved when not given
    """

    if scopes is None:
        scopes = resolve(ast)

    names = TransformMinifyScope().transform(*scopes)

    return Formatter({'mode': Formatter.MODE_COMPACT}).format(ast, names)

def beautify(ast: Node, scopes=None, indent="\t") -> str:
    """ Format an AST as indented Lua, with descriptive variable names

    :param ast: the AST to beautify
    :param scopes: the (global_scope, root_scope) pair returned by resolve,
                   the AST is resolved when not given
    :param indent: the string used for one level of indentation
    """

    if scopes is None:
        scopes = resolve(ast)

    names = TransformBeautifyScope().transform(*scopes)

    formatter = Formatter({'mode': Formatter.MODE_EXPANDED, 'indent': indent})

    return formatter.format(ast, names)

def to_string(ast: Node, mode=Formatter.MODE_PRESERVE, names=None) -> str:
    """ Format an AST without renaming

    :param ast: the AST to format
    :param mode: one of 'preserve', 'compact' or 'expanded'
    :param names: an optional mapping of Variable -> name
    """
    return Formatter({'mode': mode}).format(ast, names)
