#! cd .. && python3 -m luaminify.formatter

import io

from .token import Token, TokenError
from .node import Node

class FormatError(TokenError):
    pass

# roles given to each emitted item, used by the writers to choose
# the whitespace between two items
R_TEXT = "R_TEXT"
R_KEYWORD = "R_KEYWORD"
R_OPERATOR = "R_OPERATOR"
R_COMMA = "R_COMMA"
R_NEWLINE = "R_NEWLINE"
# written only when preserving the original source
R_OPTIONAL = "R_OPTIONAL"
# a statement separator which is required in every mode
R_SEPARATOR = "R_SEPARATOR"

def isidentchar(c):
    return c.isalnum() or c == '_'

def isnumber(text):
    return text[:1].isdigit() or (text[:1] == '.' and text[1:2].isdigit())

def isalphanum(a, b):
    """
    return true if a space is required between a and b

    that is when the concatenation a+b would lex differently than
    a followed by b
    """
    if not a or not b:
        return False

    c1 = a[-1]
    c2 = b[0]

    if isidentchar(c1) and isidentchar(c2):
        return True
    # would begin a comment
    if c1 == '-' and c2 == '-':
        return True
    # would begin a long bracket
    if c1 == '[' and c2 in '[=':
        return True
    # would form a comparison
    if c1 in '=<>~' and c2 == '=':
        return True
    # would extend a number or a dot operator
    if c2 == '.' and (c1 == '.' or isnumber(a)):
        return True
    if c1 == '.' and c2.isdigit():
        return True

    return False

def isseparatorneeded(node):
    """
    returns true when the statement must be preceded by a separator

    a statement which begins with '(' would otherwise continue the
    expression which ends the previous statement
    """
    token = node.first_token()
    return token is not None and token.type == Token.T_SYMBOL and token.value == '('

class Formatter(object):
    """
    convert a syntax tree back into source text

    modes:
        preserve: reproduce the original text, including comments
        compact: remove all optional whitespace
        expanded: one statement per line, indented with opts['indent']
    """

    MODE_PRESERVE = "preserve"
    MODE_COMPACT = "compact"
    MODE_EXPANDED = "expanded"

    def __init__(self, opts=None):
        super(Formatter, self).__init__()

        if not opts:
            opts = {}

        self.mode = opts.get('mode', Formatter.MODE_COMPACT)
        self.indent = opts.get('indent', '\t')

        self.writers = {
            Formatter.MODE_PRESERVE: self._write_preserve,
            Formatter.MODE_COMPACT: self._write_minified,
            Formatter.MODE_EXPANDED: self._write_pretty,
        }

        if self.mode not in self.writers:
            raise ValueError("unknown mode: %s" % self.mode)

    def format(self, ast, names=None):
        """
        :param ast: the chunk to format
        :param names: a mapping of Variable -> name, produced by a renamer
        """

        # id of each identifier token -> new name
        self.names = {}
        for var, name in (names or {}).items():
            for token in var.references:
                self.names[id(token)] = name
        self.stream = io.StringIO()

        self.tokens = self._format(ast)

        return self.writers[self.mode]()

    def _text(self, item):
        if isinstance(item, str):
            return item
        return self.names.get(id(item), item.value)

    def _write_preserve(self):

        for depth, role, item in self.tokens:
            if isinstance(item, Token):
                self.stream.write(item.leading)
                self.stream.write(self._text(item))

        return self.stream.getvalue()

    def _write_minified(self):

        prev_text = ""
        for depth, role, item in self.tokens:

            if role == R_NEWLINE or role == R_OPTIONAL:
                continue

            text = self._text(item)
            if not text:
                continue

            if isalphanum(prev_text, text):
                self.stream.write(" ")
            self.stream.write(text)

            prev_text = text

        return self.stream.getvalue()

    def _write_pretty(self):

        prev_role = R_NEWLINE
        prev_text = ""
        for depth, role, item in self.tokens:

            if role == R_OPTIONAL:
                continue

            if role == R_NEWLINE:
                self.stream.write("\n")
                self.stream.write(self.indent * depth)
                prev_role = R_NEWLINE
                prev_text = ""
                continue

            text = self._text(item)
            if not text:
                continue

            if prev_role != R_NEWLINE and \
                    self._pretty_space(prev_role, prev_text, role, text):
                self.stream.write(" ")
            self.stream.write(text)

            prev_role = role
            prev_text = text

        return self.stream.getvalue()

    def _pretty_space(self, prev_role, prev_text, role, text):

        if role in (R_COMMA, R_SEPARATOR):
            return False

        if prev_role == R_COMMA:
            return True

        if role == R_OPERATOR or prev_role == R_OPERATOR:
            return True

        if role == R_KEYWORD or prev_role == R_KEYWORD:
            if text in (')', ']', '}') or prev_text in ('(', '[', '{'):
                return False
            if prev_text == 'function' and text == '(':
                return False
            return True

        return isalphanum(prev_text, text)

    def _role(self, node, token):

        if token.type == Token.T_KEYWORD:
            if node.type == Node.T_BINOP:
                return R_OPERATOR
            return R_KEYWORD

        if token.type == Token.T_SYMBOL:
            if token.value == ',':
                return R_COMMA
            if token.value == '=':
                return R_OPERATOR
            if node.type == Node.T_BINOP and token is node.op:
                return R_OPERATOR

        return R_TEXT

    def _format(self, token):
        """ non-recursive implementation of _format

        for each node process the children in reverse order
        """

        seq = [(0, None, token)]
        out = []

        while seq:
            depth, role, token = seq.pop()

            if role is not None:
                out.append((depth, role, token))
            elif token.type == Node.T_CHUNK:
                seq.append((depth, R_OPTIONAL, token.eof))
                seq.append((depth, None, token.body))
            elif token.type == Node.T_BLOCK:
                seq.extend(reversed(self._format_block(depth, token)))
            elif token.type == Node.T_TABLE:
                seq.extend(reversed(self._format_table(depth, token)))
            elif isinstance(token, Node):
                seq.extend(reversed(self._format_node(depth, token)))
            else:
                raise FormatError(token, "token not supported: %s" % token.type)

        return out

    def _format_node(self, depth, node):

        items = []
        after_block = False
        for child in node.children:
            if isinstance(child, Token):
                if after_block:
                    # end, else, elseif, until
                    items.append((depth, R_NEWLINE, None))
                items.append((depth, self._role(node, child), child))
                after_block = False
            elif child.type == Node.T_BLOCK:
                items.append((depth + 1, None, child))
                after_block = True
            else:
                items.append((depth, None, child))
                after_block = False
        return items

    def _format_block(self, depth, node):
        """
        each statement begins a new line. a semicolon is kept only when
        the following statement would otherwise continue the previous one
        """

        items = []
        statements = node.statements
        index = 0
        pending = False
        for child in node.children:
            if isinstance(child, Node):
                if pending:
                    items.append((depth, R_SEPARATOR, ";"))
                items.append((depth, R_NEWLINE, None))
                items.append((depth, None, child))
                index += 1
                pending = index < len(statements) and \
                    isseparatorneeded(statements[index])
            elif pending:
                items.append((depth, R_SEPARATOR, child))
                pending = False
            else:
                items.append((depth, R_OPTIONAL, child))

        return items

    def _format_table(self, depth, node):

        items = []
        entries = 0
        for child in node.children:
            if isinstance(child, Node):
                items.append((depth + 1, R_NEWLINE, None))
                items.append((depth + 1, None, child))
                entries += 1
            elif child.value in (',', ';'):
                if entries == len(node.entries):
                    # trailing separator
                    items.append((depth + 1, R_OPTIONAL, child))
                else:
                    items.append((depth + 1, R_COMMA, child))
            elif child.value == '}':
                if entries:
                    items.append((depth, R_NEWLINE, None))
                items.append((depth, R_TEXT, child))
            else:
                items.append((depth, R_TEXT, child))
        return items

def main():  # pragma: no cover

    from .parser import Parser

    text1 = """
    local t = {1, 2, x = 3, [4] = {}}
    function t.f(a, ...)
        if a then return - -a else return ... end
    end
    print();   ("a"):len()
    """

    ast = Parser().parse(text1)

    for mode in (Formatter.MODE_PRESERVE, Formatter.MODE_COMPACT, Formatter.MODE_EXPANDED):
        print("-" * 79)
        print(Formatter({'mode': mode}).format(ast))

if __name__ == '__main__':  # pragma: no cover
    main()
