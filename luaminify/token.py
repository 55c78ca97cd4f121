class TokenError(Exception):
    def __init__(self, token, message):
        self.original_message = message
        message = "%d:%d: %s" % (token.line, token.column, message)
        super(TokenError, self).__init__(message)

        self.token = token
        self.line = token.line
        self.column = token.column

class Token(object):

    # tokens produced by the lexer
    T_KEYWORD = "Keyword"
    T_IDENT = "Ident"
    T_NUMBER = "Number"
    T_STRING = "String"
    T_SYMBOL = "Symbol"
    T_EOF = "Eof"

    def __init__(self, type, line=0, column=0, value="", leading=""):
        super(Token, self).__init__()
        self.type = type
        self.line = line
        self.column = column
        self.value = value
        # whitespace and comments preceding this token
        self.leading = leading
        # the Variable this identifier names, assigned by the scope resolver
        self.ref = None

    def __str__(self):

        return self.toString(False, 0)

    def __repr__(self):
        return "Token(%r, %r, %r, %r)" % (
            self.type, self.line, self.column, self.value)

    def toString(self, pretty=True, depth=0, pad="  "):

        if pretty:
            return "%s%s<%s,%s,%r>\n" % (
                pad * depth, self.type, self.line, self.column, self.value)
        else:
            return "%s<%r>" % (self.type, self.value)

    def flatten(self, depth=0):
        return [(depth, self)]

    def leaves(self):
        return [self]
