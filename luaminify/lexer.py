#! cd .. && python3 -m luaminify.lexer

import logging

from .token import Token, TokenError

log = logging.getLogger("luaminify.lexer")

class LexError(TokenError):
    pass

chset_whitespace = " \t\r\n\v\f"
chset_ident_start = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_"
chset_ident = chset_ident_start + "0123456789"
chset_number_base = "0123456789"
chset_number_hex = "0123456789abcdefABCDEF"

# characters that may follow a backslash inside a short string
# decimal escapes and line continuations are handled separately
chset_escape = "abfnrtv\\\"'"

reserved_words = {
    'and', 'break', 'do', 'else', 'elseif', 'end', 'false', 'for',
    'function', 'goto', 'if', 'in', 'local', 'nil', 'not', 'or',
    'repeat', 'return', 'then', 'true', 'until', 'while',
}

# symbols which never combine with the following character
operators1 = set("+-*/%^#,;(){}]")

# symbols which may be followed by '=' to form a two character operator
operators_eq = set("~=<>")

class LexerBase(object):
    """
    base class for a look-ahead-by-N lexer over an in-memory string

    the position of the next character to be consumed is tracked as
    both an offset and a (line, column) pair so that tokens and errors
    can be reported without rescanning the input
    """

    def __init__(self):
        super(LexerBase, self).__init__()

    def _init(self, text):

        self.text = text
        self._len = len(text)
        # offset of the next character to consume
        self._pos = 0
        # line and column of the next character to consume
        self._line = 1
        self._column = 1
        # line and column of the most recently consumed character
        self._last_line = 1
        self._last_column = 1

        self.tokens = []

    def _getch(self):
        """ return the next character, or '' at the end of the input """
        if self._pos >= self._len:
            return ''

        c = self.text[self._pos]
        self._pos += 1
        self._last_line = self._line
        self._last_column = self._column
        if c == '\n':
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return c

    def _peekch(self, n=0):
        """ return the character n places ahead, do not advance """
        idx = self._pos + n
        if idx < self._len:
            return self.text[idx]
        return ''

    def _peekstr(self, n):
        """ return the next N characters, do not advance """
        return self.text[self._pos:self._pos + n]

    def _skip(self, n):
        for i in range(n):
            self._getch()

    def _push(self, type, start, line, column, leading):
        """ push a new token spanning from start to the current position """
        token = Token(type, line, column, self.text[start:self._pos], leading)
        self.tokens.append(token)
        return token

    def _error(self, message, line, column):
        token = Token("", line, column, self._peekch())
        return LexError(token, message)

    def _error_here(self, message):
        """
        build an error at the next unconsumed character, or the
        last character of the input when everything has been consumed
        """
        if self._pos < self._len:
            return self._error(message, self._line, self._column)
        return self._error(message, self._last_line, self._last_column)

class Lexer(LexerBase):
    """
    split Lua source into a list of tokens

    every token keeps the whitespace and comments which precede it,
    the final token is always Eof and holds any trailing trivia
    """

    def __init__(self, opts=None):
        super(Lexer, self).__init__()

        if not opts:
            opts = {}
        self.opts = opts

    def lex(self, text):

        self._init(text)

        while True:
            leading = self._lex_trivia()

            start = self._pos
            line = self._line
            column = self._column

            c = self._getch()

            if c == '':
                self._push(Token.T_EOF, start, line, column, leading)
                break
            elif c == '"' or c == "'":
                self._lex_string(c)
                self._push(Token.T_STRING, start, line, column, leading)
            elif c in chset_ident_start:
                while self._peekch() and self._peekch() in chset_ident:
                    self._getch()
                if self.text[start:self._pos] in reserved_words:
                    type = Token.T_KEYWORD
                else:
                    type = Token.T_IDENT
                self._push(type, start, line, column, leading)
            elif c in chset_number_base or \
                    (c == '.' and self._peekch() and self._peekch() in chset_number_base):
                self._lex_number(c, line, column)
                self._push(Token.T_NUMBER, start, line, column, leading)
            elif c == '[':
                level = self._lex_long_open()
                if level is None:
                    self._push(Token.T_SYMBOL, start, line, column, leading)
                else:
                    self._lex_long_body(level)
                    self._push(Token.T_STRING, start, line, column, leading)
            elif c == '.':
                # greedily consume up to 3 dots for . .. ...
                if self._peekch() == '.':
                    self._getch()
                    if self._peekch() == '.':
                        self._getch()
                self._push(Token.T_SYMBOL, start, line, column, leading)
            elif c == ':':
                if self._peekch() == ':':
                    self._getch()
                self._push(Token.T_SYMBOL, start, line, column, leading)
            elif c in operators_eq:
                if self._peekch() == '=':
                    self._getch()
                self._push(Token.T_SYMBOL, start, line, column, leading)
            elif c in operators1:
                self._push(Token.T_SYMBOL, start, line, column, leading)
            else:
                raise self._error("Bad symbol `%s` in source." % c, line, column)

        log.debug("lexed %d tokens", len(self.tokens))

        return self.tokens

    def _lex_trivia(self):
        """ consume whitespace and comments, returning the consumed text """

        start = self._pos
        while True:
            c = self._peekch()
            if c == '':
                break
            elif c == '-' and self._peekch(1) == '-':
                self._skip(2)
                if self._peekch() == '[':
                    self._getch()
                    level = self._lex_long_open()
                    if level is not None:
                        self._lex_long_body(level)
                        continue
                self._lex_line_comment()
            elif c in chset_whitespace:
                self._getch()
            else:
                break

        return self.text[start:self._pos]

    def _lex_line_comment(self):
        while True:
            c = self._getch()
            if c == '' or c == '\n':
                break

    def _lex_long_open(self):
        """
        consume the remainder of a long bracket opener

        the first '[' must already be consumed. returns the level of the
        bracket (the number of '=') or None if this is not an opener, in
        which case nothing is consumed.
        """

        level = 0
        while self._peekch(level) == '=':
            level += 1

        if self._peekch(level) != '[':
            return None

        self._skip(level + 1)
        return level

    def _lex_long_body(self, level):
        """ consume up to and including the closer for the given level """

        closer = "]" + "=" * level + "]"
        index = self.text.find(closer, self._pos)
        if index < 0:
            self._skip(self._len - self._pos)
            raise self._error_here("Unfinished long string.")

        self._skip(index + len(closer) - self._pos)

    def _lex_string(self, quote):

        while True:
            c = self._getch()

            if c == '':
                raise self._error_here("Unfinished string.")

            elif c == '\\':
                c = self._getch()
                if c == '':
                    raise self._error_here("Unfinished string.")
                elif c in chset_escape or c == '\n':
                    pass
                elif c == '\r':
                    if self._peekch() == '\n':
                        self._getch()
                elif c in chset_number_base:
                    # decimal escape, up to three digits
                    for i in range(2):
                        if self._peekch() and self._peekch() in chset_number_base:
                            self._getch()
                        else:
                            break
                else:
                    raise self._error_here("Invalid Escape Sequence `%s`." % c)

            elif c == quote:
                break

            elif c == '\n':
                raise self._error_here("Unfinished string.")

    def _lex_number(self, c, line, column):

        if c == '0' and self._peekch() in ('x', 'X'):
            self._getch()
            start = self._pos
            while self._peekch() and self._peekch() in chset_number_hex:
                self._getch()
            if self._pos == start:
                raise self._error("Malformed number.", line, column)
        else:
            self._lex_decimal(c)

        # a number may not run into an identifier, as in 3abc
        if self._peekch() and self._peekch() in chset_ident:
            raise self._error("Malformed number.", line, column)

    def _lex_decimal(self, c):

        if c != '.':
            self._lex_digits()
            # a second dot starts the concatenation operator
            if self._peekch() == '.' and self._peekch(1) != '.':
                self._getch()
                self._lex_digits()
        else:
            self._lex_digits()

        if self._peekch() in ('e', 'E'):
            self._getch()
            if self._peekch() in ('-', '+'):
                self._getch()
            self._lex_digits()

    def _lex_digits(self):
        while self._peekch() and self._peekch() in chset_number_base:
            self._getch()

def main():  # pragma: no cover

    text1 = """
    -- comment
    local x = 0x7b + 4e-3 .. [==[ long
    string ]==]
    """

    for token in Lexer().lex(text1):
        print(repr(token), repr(token.leading))

if __name__ == '__main__':  # pragma: no cover
    main()
