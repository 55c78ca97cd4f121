#! cd .. && python3 -m luaminify.parser

import logging

from .token import Token, TokenError
from .lexer import Lexer
from .node import Node, isassignable

log = logging.getLogger("luaminify.parser")

class ParseError(TokenError):
    pass

# left and right binding power of each binary operator
binary_priority = {
    'or': (1, 1),
    'and': (2, 2),
    '<': (3, 3), '>': (3, 3), '<=': (3, 3), '>=': (3, 3),
    '~=': (3, 3), '==': (3, 3),
    '..': (5, 4),
    '+': (6, 6), '-': (6, 6),
    '*': (7, 7), '/': (7, 7), '%': (7, 7),
    '^': (10, 9),
}

unary_operators = {'-', 'not', '#'}

unary_priority = 8

# keywords which end a block
block_follow = {'else', 'elseif', 'end', 'until'}

class Parser(object):
    """
    recursive descent parser for Lua

    produces a Chunk node, see luaminify.node for the tree layout
    """

    W_AMBIGUOUS_CALL = 1

    def __init__(self):
        super(Parser, self).__init__()

        self.warnings = {
            Parser.W_AMBIGUOUS_CALL: "ambiguous syntax, function call or new statement",
        }
        self.warnings_count = {}

        self.disabled_warnings = set()
        self.disable_all_warnings = False

        self.module_name = "<string>"

        self.statement_mapping = {
            'if': self.collect_keyword_if,
            'while': self.collect_keyword_while,
            'do': self.collect_keyword_do,
            'for': self.collect_keyword_for,
            'repeat': self.collect_keyword_repeat,
            'function': self.collect_keyword_function,
            'local': self.collect_keyword_local,
            'return': self.collect_keyword_return,
            'break': self.collect_keyword_break,
            'goto': self.collect_keyword_goto,
        }

    def parse(self, source):
        """
        parse a chunk from either source text or a list of tokens
        """

        if isinstance(source, str):
            tokens = Lexer().lex(source)
        else:
            tokens = list(source)

        if not tokens or tokens[-1].type != Token.T_EOF:
            if tokens:
                last = tokens[-1]
                eof = Token(Token.T_EOF, last.line, last.column + len(last.value), "")
            else:
                eof = Token(Token.T_EOF, 1, 1, "")
            tokens.append(eof)

        self.tokens = tokens
        self.index = 0

        try:
            body = self.block()
        except RecursionError:
            raise ParseError(self.peek(), "Nesting too deep.")

        eof = self.expect(Token.T_EOF)

        log.debug("parsed %d top level statements", len(body.statements))

        return Node(Node.T_CHUNK, [body, eof], body=body, eof=eof)

    def warn(self, token, type, message=None):
        """
        log a warning message, up to N of each type, as long as
        warnings are not disabled
        """

        if type not in self.warnings_count:
            self.warnings_count[type] = 0
        else:
            self.warnings_count[type] += 1

        if self.warnings_count[type] > 5:
            return

        if self.disable_all_warnings:
            return

        if type in self.disabled_warnings:
            return

        text = self.warnings[type]
        if message:
            text += ": " + message

        log.warning("module: %s line: %d column: %d value: %s : %s",
            self.module_name, token.line, token.column, token.value, text)

    # -------------------------------------------------------------------------
    # token stream

    def peek(self, n=0):
        index = min(self.index + n, len(self.tokens) - 1)
        return self.tokens[index]

    def get(self):
        token = self.tokens[self.index]
        if self.index < len(self.tokens) - 1:
            self.index += 1
        return token

    def check(self, type, value=None):
        token = self.peek()
        return token.type == type and (value is None or token.value == value)

    def check_symbol(self, value):
        return self.check(Token.T_SYMBOL, value)

    def check_keyword(self, value):
        return self.check(Token.T_KEYWORD, value)

    def expect(self, type, value=None):
        if self.check(type, value):
            return self.get()
        if value is not None:
            self.error("`%s` expected." % value)
        self.error("%s expected." % type)

    def expect_terminator(self, keyword):
        if self.check_keyword(keyword):
            return self.get()
        self.error("%s expected." % keyword)

    def error(self, message, token=None):
        if token is None:
            token = self.peek()
        raise ParseError(token, message)

    def is_block_follow(self):
        token = self.peek()
        if token.type == Token.T_EOF:
            return True
        return token.type == Token.T_KEYWORD and token.value in block_follow

    # -------------------------------------------------------------------------
    # blocks and statements

    def block(self):

        children = []
        statements = []

        while not self.is_block_follow():

            if self.check_symbol(';'):
                # empty statement
                children.append(self.get())
                continue

            stat = self.statement()
            children.append(stat)
            statements.append(stat)

            while self.check_symbol(';'):
                children.append(self.get())

            if stat.type in (Node.T_RETURN, Node.T_BREAK):
                break

        return Node(Node.T_BLOCK, children, statements=statements)

    def block_body(self, children, terminator='end'):
        """ parse a block followed by a terminating keyword """
        body = self.block()
        children.append(body)
        children.append(self.expect_terminator(terminator))
        return body

    def statement(self):

        token = self.peek()

        if token.type == Token.T_KEYWORD and token.value in self.statement_mapping:
            return self.statement_mapping[token.value]()

        if token.type == Token.T_SYMBOL and token.value == '::':
            return self.collect_label()

        return self.collect_expression_statement()

    def collect_keyword_if(self):

        children = [self.get()]
        clauses = []
        else_body = None

        condition = self.expression()
        children.append(condition)
        children.append(self.expect(Token.T_KEYWORD, 'then'))
        body = self.block()
        children.append(body)
        clauses.append((condition, body))

        while True:
            if self.check_keyword('elseif'):
                children.append(self.get())
                condition = self.expression()
                children.append(condition)
                children.append(self.expect(Token.T_KEYWORD, 'then'))
                body = self.block()
                children.append(body)
                clauses.append((condition, body))
            elif self.check_keyword('else'):
                children.append(self.get())
                else_body = self.block()
                children.append(else_body)
                children.append(self.expect_terminator('end'))
                break
            else:
                children.append(self.expect_terminator('end'))
                break

        return Node(Node.T_IF, children, clauses=clauses, else_body=else_body)

    def collect_keyword_while(self):

        children = [self.get()]
        condition = self.expression()
        children.append(condition)
        children.append(self.expect(Token.T_KEYWORD, 'do'))
        body = self.block_body(children)

        return Node(Node.T_WHILE, children, condition=condition, body=body)

    def collect_keyword_do(self):

        children = [self.get()]
        body = self.block_body(children)

        return Node(Node.T_DO, children, body=body)

    def collect_keyword_repeat(self):

        children = [self.get()]
        body = self.block_body(children, 'until')
        condition = self.expression()
        children.append(condition)

        return Node(Node.T_REPEAT, children, body=body, condition=condition)

    def collect_keyword_for(self):

        children = [self.get()]
        first = self.expect(Token.T_IDENT)
        children.append(first)

        if self.check_symbol('='):
            children.append(self.get())
            bounds = self.expression_list(children)
            if len(bounds) < 2 or len(bounds) > 3:
                self.error("expected 2 or 3 values for range bounds")
            children.append(self.expect(Token.T_KEYWORD, 'do'))
            body = self.block_body(children)
            return Node(Node.T_NUMERIC_FOR, children,
                variable=first, range=bounds, body=body)

        elif self.check_symbol(',') or self.check_keyword('in'):
            variables = [first]
            while self.check_symbol(','):
                children.append(self.get())
                name = self.expect(Token.T_IDENT)
                children.append(name)
                variables.append(name)
            children.append(self.expect(Token.T_KEYWORD, 'in'))
            generators = self.expression_list(children)
            children.append(self.expect(Token.T_KEYWORD, 'do'))
            body = self.block_body(children)
            return Node(Node.T_GENERIC_FOR, children,
                variables=variables, generators=generators, body=body)

        self.error("`=` or in expected")

    def collect_keyword_function(self):

        children = [self.get()]
        name = self.expect(Token.T_IDENT)
        children.append(name)
        name_chain = [name]
        is_method = False

        while self.check_symbol('.'):
            children.append(self.get())
            name = self.expect(Token.T_IDENT)
            children.append(name)
            name_chain.append(name)

        if self.check_symbol(':'):
            children.append(self.get())
            name = self.expect(Token.T_IDENT)
            children.append(name)
            name_chain.append(name)
            is_method = True

        params, vararg, body = self.function_body(children)

        return Node(Node.T_FUNCTION_STAT, children,
            name_chain=name_chain, is_method=is_method,
            params=params, vararg=vararg, body=body)

    def collect_keyword_local(self):

        children = [self.get()]

        if self.check_keyword('function'):
            children.append(self.get())
            name = self.expect(Token.T_IDENT)
            children.append(name)
            params, vararg, body = self.function_body(children)
            return Node(Node.T_LOCAL_FUNCTION, children,
                name=name, params=params, vararg=vararg, body=body)

        if not self.check(Token.T_IDENT):
            self.error("`function` or ident expected")

        names = [self.get()]
        children.append(names[0])
        while self.check_symbol(','):
            children.append(self.get())
            name = self.expect(Token.T_IDENT)
            children.append(name)
            names.append(name)

        values = []
        if self.check_symbol('='):
            children.append(self.get())
            values = self.expression_list(children)

        return Node(Node.T_LOCAL_VAR, children, names=names, values=values)

    def collect_keyword_return(self):

        children = [self.get()]
        values = []
        if not self.is_block_follow() and not self.check_symbol(';'):
            values = self.expression_list(children)

        return Node(Node.T_RETURN, children, values=values)

    def collect_keyword_break(self):

        return Node(Node.T_BREAK, [self.get()])

    def collect_keyword_goto(self):

        children = [self.get()]
        label = self.expect(Token.T_IDENT)
        children.append(label)

        return Node(Node.T_GOTO, children, label=label)

    def collect_label(self):

        children = [self.get()]
        label = self.expect(Token.T_IDENT)
        children.append(label)
        children.append(self.expect(Token.T_SYMBOL, '::'))

        return Node(Node.T_LABEL, children, label=label)

    def collect_expression_statement(self):

        expr = self.suffixed_expression()

        if expr.type == Node.T_CALL:
            return Node(Node.T_CALL_STAT, [expr], expression=expr)

        if not self.check_symbol(',') and not self.check_symbol('='):
            self.expect(Token.T_SYMBOL, '=')

        if not isassignable(expr):
            self.error("Bad left hand side of assignment")

        children = [expr]
        targets = [expr]
        while self.check_symbol(','):
            children.append(self.get())
            expr = self.suffixed_expression()
            if not isassignable(expr):
                self.error("Bad left hand side of assignment")
            children.append(expr)
            targets.append(expr)

        children.append(self.expect(Token.T_SYMBOL, '='))
        values = self.expression_list(children)

        return Node(Node.T_ASSIGNMENT, children, targets=targets, values=values)

    # -------------------------------------------------------------------------
    # functions

    def function_body(self, children):
        """
        parse a parameter list and body, appending the tokens to children

        returns the parameter name tokens, the vararg token (or None)
        and the body block
        """

        children.append(self.expect(Token.T_SYMBOL, '('))

        params = []
        vararg = None
        # after a comma another name or ... is required
        while params or not self.check_symbol(')'):
            if self.check_symbol('...'):
                vararg = self.get()
                children.append(vararg)
                break

            name = self.expect(Token.T_IDENT)
            children.append(name)
            params.append(name)

            if self.check_symbol(','):
                children.append(self.get())
            else:
                break

        children.append(self.expect(Token.T_SYMBOL, ')'))
        body = self.block_body(children)

        return params, vararg, body

    # -------------------------------------------------------------------------
    # expressions

    def expression_list(self, children):
        """ parse expr {',' expr}, appending to children """

        exprs = [self.expression()]
        children.append(exprs[0])
        while self.check_symbol(','):
            children.append(self.get())
            expr = self.expression()
            children.append(expr)
            exprs.append(expr)
        return exprs

    def expression(self, limit=0):

        token = self.peek()
        if token.type in (Token.T_SYMBOL, Token.T_KEYWORD) and \
                token.value in unary_operators:
            op = self.get()
            operand = self.expression(unary_priority)
            node = Node(Node.T_UNOP, [op, operand], op=op, operand=operand)
        else:
            node = self.simple_expression()

        while True:
            token = self.peek()
            if token.type not in (Token.T_SYMBOL, Token.T_KEYWORD):
                break
            priority = binary_priority.get(token.value, None)
            if priority is None or priority[0] <= limit:
                break
            op = self.get()
            rhs = self.expression(priority[1])
            node = Node(Node.T_BINOP, [node, op, rhs], op=op, lhs=node, rhs=rhs)

        return node

    def simple_expression(self):

        token = self.peek()

        if token.type == Token.T_NUMBER:
            return Node(Node.T_NUMBER, [self.get()], token=token)
        elif token.type == Token.T_STRING:
            return Node(Node.T_STRING, [self.get()], token=token)
        elif token.type == Token.T_KEYWORD:
            if token.value == 'nil':
                return Node(Node.T_NIL, [self.get()], token=token)
            elif token.value in ('true', 'false'):
                return Node(Node.T_BOOLEAN, [self.get()], token=token)
            elif token.value == 'function':
                children = [self.get()]
                params, vararg, body = self.function_body(children)
                return Node(Node.T_FUNCTION, children,
                    params=params, vararg=vararg, body=body)
        elif token.type == Token.T_SYMBOL:
            if token.value == '...':
                return Node(Node.T_VARARG, [self.get()], token=token)
            elif token.value == '{':
                return self.table_constructor()

        return self.suffixed_expression()

    def primary_expression(self):

        token = self.peek()

        if token.type == Token.T_SYMBOL and token.value == '(':
            children = [self.get()]
            inner = self.expression()
            children.append(inner)
            children.append(self.expect(Token.T_SYMBOL, ')'))
            return Node(Node.T_PAREN, children, expression=inner)

        if token.type == Token.T_IDENT:
            return Node(Node.T_VARIABLE, [self.get()], token=token)

        self.error("Unexpected symbol")

    def suffixed_expression(self):

        base = self.primary_expression()

        while True:
            token = self.peek()

            if token.type == Token.T_SYMBOL:
                if token.value == '.':
                    children = [base, self.get()]
                    name = self.expect(Token.T_IDENT)
                    children.append(name)
                    base = Node(Node.T_MEMBER, children, base=base, name=name)
                    continue
                elif token.value == ':':
                    children = [base, self.get()]
                    name = self.expect(Token.T_IDENT)
                    children.append(name)
                    base = self.call_arguments(base, children, name)
                    continue
                elif token.value == '[':
                    children = [base, self.get()]
                    index = self.expression()
                    children.append(index)
                    children.append(self.expect(Token.T_SYMBOL, ']'))
                    base = Node(Node.T_INDEX, children, base=base, index=index)
                    continue
                elif token.value == '(':
                    previous = self.tokens[self.index - 1]
                    if previous.line != token.line:
                        self.warn(token, Parser.W_AMBIGUOUS_CALL)
                    base = self.call_arguments(base, [base])
                    continue
                elif token.value == '{':
                    base = self.call_arguments(base, [base])
                    continue
            elif token.type == Token.T_STRING:
                base = self.call_arguments(base, [base])
                continue

            return base

    def call_arguments(self, base, children, method=None):

        token = self.peek()

        if token.type == Token.T_SYMBOL and token.value == '(':
            children.append(self.get())
            arguments = []
            if not self.check_symbol(')'):
                arguments = self.expression_list(children)
            children.append(self.expect(Token.T_SYMBOL, ')'))
            call_type = Node.ARG_CALL

        elif token.type == Token.T_SYMBOL and token.value == '{':
            table = self.table_constructor()
            children.append(table)
            arguments = [table]
            call_type = Node.TABLE_CALL

        elif token.type == Token.T_STRING:
            string = Node(Node.T_STRING, [self.get()], token=token)
            children.append(string)
            arguments = [string]
            call_type = Node.STRING_CALL

        else:
            self.error("Function arguments expected.")

        return Node(Node.T_CALL, children, base=base, method=method,
            arguments=arguments, call_type=call_type)

    def table_constructor(self):

        children = [self.expect(Token.T_SYMBOL, '{')]
        entries = []

        while not self.check_symbol('}'):

            if self.check_symbol('['):
                parts = [self.get()]
                key = self.expression()
                parts.append(key)
                parts.append(self.expect(Token.T_SYMBOL, ']'))
                parts.append(self.expect(Token.T_SYMBOL, '='))
                value = self.expression()
                parts.append(value)
                entry = Node(Node.T_ENTRY_INDEX, parts, key=key, value=value)

            elif self.check(Token.T_IDENT) and \
                    self.peek(1).type == Token.T_SYMBOL and self.peek(1).value == '=':
                key = self.get()
                parts = [key, self.get()]
                value = self.expression()
                parts.append(value)
                entry = Node(Node.T_ENTRY_FIELD, parts, key=key, value=value)

            else:
                value = self.expression()
                entry = Node(Node.T_ENTRY_VALUE, [value], value=value)

            children.append(entry)
            entries.append(entry)

            if self.check_symbol(',') or self.check_symbol(';'):
                children.append(self.get())
            else:
                break

        children.append(self.expect(Token.T_SYMBOL, '}'))

        return Node(Node.T_TABLE, children, entries=entries)

def main():  # pragma: no cover

    text1 = """
    local function foo(a, b, ...)
        return a + b * 2 ^ -3, {x = 1, [2] = "two"; 3}
    end
    print "hello" ; ("a"):len()
    """

    ast = Parser().parse(text1)

    print(ast.toString())

if __name__ == '__main__':  # pragma: no cover
    main()
