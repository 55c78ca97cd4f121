#! cd .. && python3 -m tests.lexer_test

import unittest

from luaminify.token import Token, TokenError
from luaminify.lexer import LexerBase, Lexer, LexError
from tests.util import lexcmp, TOKEN

class TokenTestCase(unittest.TestCase):

    def test_001_toString(self):
        token = Token(Token.T_NUMBER, 1, 0, '3.14')
        self.assertEqual(token.toString(), "Number<1,0,'3.14'>\n")

    def test_002_str(self):
        token = Token(Token.T_IDENT, 1, 0, 'foo')
        self.assertEqual(str(token), "Ident<'foo'>")

    def test_003_error_message(self):
        token = Token(Token.T_IDENT, 3, 7, 'foo')
        error = TokenError(token, "bad thing")
        self.assertEqual(str(error), "3:7: bad thing")
        self.assertEqual(error.original_message, "bad thing")
        self.assertEqual(error.line, 3)
        self.assertEqual(error.column, 7)
        self.assertIs(error.token, token)

class LexerBaseTestCase(unittest.TestCase):

    def test_001_getch_position(self):

        lexer = LexerBase()
        lexer._init("ab\ncd")
        self.assertEqual(lexer._getch(), "a")
        self.assertEqual(lexer._getch(), "b")
        self.assertEqual(lexer._getch(), "\n")
        self.assertEqual((lexer._line, lexer._column), (2, 1))
        self.assertEqual((lexer._last_line, lexer._last_column), (1, 3))

    def test_002_getch_eof(self):

        lexer = LexerBase()
        lexer._init("a")
        self.assertEqual(lexer._getch(), "a")
        self.assertEqual(lexer._getch(), "")
        self.assertEqual(lexer._peekch(), "")

    def test_003_peekstr(self):

        lexer = LexerBase()
        lexer._init("1234567890")
        self.assertEqual(lexer._peekstr(3), "123")
        self.assertEqual(lexer._getch(), "1")

class LexerTestCase(unittest.TestCase):

    def _chklex(self, text, expected):
        tokens = Lexer().lex(text)
        self.assertFalse(lexcmp(expected, tokens))
        # the trivia and text of every token reproduce the input
        self.assertEqual(text, ''.join(t.leading + t.value for t in tokens))

    def _chkerr(self, text, message):
        with self.assertRaises(LexError) as ctx:
            Lexer().lex(text)
        self.assertEqual(str(ctx.exception), message)

    def test_001_empty(self):
        tokens = Lexer().lex("")
        self.assertEqual(len(tokens), 1)
        self.assertEqual(tokens[0].type, Token.T_EOF)
        self.assertEqual((tokens[0].line, tokens[0].column), (1, 1))

    def test_001_eof_position(self):
        tokens = Lexer().lex("foo\n  ")
        self.assertEqual(tokens[-1].type, Token.T_EOF)
        self.assertEqual(tokens[-1].leading, "\n  ")
        self.assertEqual((tokens[-1].line, tokens[-1].column), (2, 3))

    def test_002_local_assign(self):
        self._chklex("local x = 0x7b + 4e-3 .. \"s\"", [
            TOKEN('T_KEYWORD', 'local'),
            TOKEN('T_IDENT', 'x'),
            TOKEN('T_SYMBOL', '='),
            TOKEN('T_NUMBER', '0x7b'),
            TOKEN('T_SYMBOL', '+'),
            TOKEN('T_NUMBER', '4e-3'),
            TOKEN('T_SYMBOL', '..'),
            TOKEN('T_STRING', '"s"'),
            TOKEN('T_EOF', ''),
        ])

    def test_002_token_position(self):
        tokens = Lexer().lex("a =\n  b")
        self.assertEqual([(t.line, t.column) for t in tokens],
            [(1, 1), (1, 3), (2, 3), (2, 4)])

    def test_003_numbers(self):
        self._chklex("3 3.0 .5 3e10 1E+5 0xff 0XA", [
            TOKEN('T_NUMBER', '3'),
            TOKEN('T_NUMBER', '3.0'),
            TOKEN('T_NUMBER', '.5'),
            TOKEN('T_NUMBER', '3e10'),
            TOKEN('T_NUMBER', '1E+5'),
            TOKEN('T_NUMBER', '0xff'),
            TOKEN('T_NUMBER', '0XA'),
            TOKEN('T_EOF', ''),
        ])

    def test_003_number_concat(self):
        self._chklex("1..2", [
            TOKEN('T_NUMBER', '1'),
            TOKEN('T_SYMBOL', '..'),
            TOKEN('T_NUMBER', '2'),
            TOKEN('T_EOF', ''),
        ])

    def test_004_symbols(self):
        self._chklex("a.b:c(...) ~= == <= >= < > = # % ^", [
            TOKEN('T_IDENT', 'a'),
            TOKEN('T_SYMBOL', '.'),
            TOKEN('T_IDENT', 'b'),
            TOKEN('T_SYMBOL', ':'),
            TOKEN('T_IDENT', 'c'),
            TOKEN('T_SYMBOL', '('),
            TOKEN('T_SYMBOL', '...'),
            TOKEN('T_SYMBOL', ')'),
            TOKEN('T_SYMBOL', '~='),
            TOKEN('T_SYMBOL', '=='),
            TOKEN('T_SYMBOL', '<='),
            TOKEN('T_SYMBOL', '>='),
            TOKEN('T_SYMBOL', '<'),
            TOKEN('T_SYMBOL', '>'),
            TOKEN('T_SYMBOL', '='),
            TOKEN('T_SYMBOL', '#'),
            TOKEN('T_SYMBOL', '%'),
            TOKEN('T_SYMBOL', '^'),
            TOKEN('T_EOF', ''),
        ])

    def test_004_label(self):
        self._chklex("::top:: goto top", [
            TOKEN('T_SYMBOL', '::'),
            TOKEN('T_IDENT', 'top'),
            TOKEN('T_SYMBOL', '::'),
            TOKEN('T_KEYWORD', 'goto'),
            TOKEN('T_IDENT', 'top'),
            TOKEN('T_EOF', ''),
        ])

    def test_005_index_bracket(self):
        self._chklex("t[1] t[=", [
            TOKEN('T_IDENT', 't'),
            TOKEN('T_SYMBOL', '['),
            TOKEN('T_NUMBER', '1'),
            TOKEN('T_SYMBOL', ']'),
            TOKEN('T_IDENT', 't'),
            TOKEN('T_SYMBOL', '['),
            TOKEN('T_SYMBOL', '='),
            TOKEN('T_EOF', ''),
        ])

    def test_006_keywords(self):
        tokens = Lexer().lex("and break do else elseif end false for "
            "function goto if in local nil not or repeat return then "
            "true until while")
        self.assertTrue(all(t.type == Token.T_KEYWORD for t in tokens[:-1]))

        tokens = Lexer().lex("_ENV self ands")
        self.assertTrue(all(t.type == Token.T_IDENT for t in tokens[:-1]))

    def test_007_strings(self):
        self._chklex("'a' \"b\" 'it''s' \"q\\\"q\"", [
            TOKEN('T_STRING', "'a'"),
            TOKEN('T_STRING', '"b"'),
            TOKEN('T_STRING', "'it'"),
            TOKEN('T_STRING', "'s'"),
            TOKEN('T_STRING', '"q\\"q"'),
            TOKEN('T_EOF', ''),
        ])

    def test_007_string_escapes(self):
        text = "\"\\a\\b\\f\\n\\r\\t\\v\\\\\\'\\65\\0\\255\\\nx\""
        tokens = Lexer().lex(text)
        self.assertEqual(tokens[0].type, Token.T_STRING)
        self.assertEqual(tokens[0].value, text)

    def test_008_long_string(self):
        self._chklex("x = [==[ a ]] b ]=] ]==]", [
            TOKEN('T_IDENT', 'x'),
            TOKEN('T_SYMBOL', '='),
            TOKEN('T_STRING', '[==[ a ]] b ]=] ]==]'),
            TOKEN('T_EOF', ''),
        ])

    def test_008_long_string_multiline(self):
        tokens = Lexer().lex("[[\nline\n]] x")
        self.assertEqual(tokens[0].value, "[[\nline\n]]")
        self.assertEqual((tokens[1].line, tokens[1].column), (3, 4))

    def test_009_comment(self):
        tokens = Lexer().lex("-- comment\nx -- trailing")
        self.assertEqual(tokens[0].value, "x")
        self.assertEqual(tokens[0].leading, "-- comment\n")
        self.assertEqual(tokens[1].type, Token.T_EOF)
        self.assertEqual(tokens[1].leading, " -- trailing")

    def test_009_long_comment(self):
        text = "--[==[ one\n]] two ]==] z"
        tokens = Lexer().lex(text)
        self.assertEqual(tokens[0].value, "z")
        self.assertEqual(tokens[0].leading, "--[==[ one\n]] two ]==] ")

    def test_009_long_comment_unmatched(self):
        # not a long bracket, the comment ends at the newline
        text = "--[=== x\nfoo"
        tokens = Lexer().lex(text)
        self.assertEqual(tokens[0].value, "foo")
        self.assertEqual(tokens[0].leading, "--[=== x\n")

    def test_009_comment_at_eof(self):
        tokens = Lexer().lex("x --[[ y ]]")
        self.assertEqual(len(tokens), 2)
        self.assertEqual(tokens[1].leading, " --[[ y ]]")

    def test_010_error_bad_symbol(self):
        self._chkerr("$", "1:1: Bad symbol `$` in source.")
        self._chkerr("x = 1\n  @", "2:3: Bad symbol `@` in source.")

    def test_010_error_escape(self):
        self._chkerr("\"\\?\"", "1:4: Invalid Escape Sequence `?`.")

    def test_010_error_unfinished_string(self):
        self._chkerr("foobar = \"", "1:10: Unfinished string.")
        self._chkerr("x = 'abc\ny'", "2:1: Unfinished string.")

    def test_010_error_unfinished_long_string(self):
        self._chkerr("\n[[", "2:2: Unfinished long string.")
        self._chkerr("foo = [==[ bar ]===]", "1:20: Unfinished long string.")

    def test_010_error_malformed_number(self):
        self._chkerr("x = 0x", "1:5: Malformed number.")
        self._chkerr("x = 0xg", "1:5: Malformed number.")
        self._chkerr("x = 3abc", "1:5: Malformed number.")
        self._chkerr("x = 1.5e3_", "1:5: Malformed number.")

    def test_010_error_is_token_error(self):
        with self.assertRaises(TokenError) as ctx:
            Lexer().lex("$")
        self.assertEqual(ctx.exception.original_message, "Bad symbol `$` in source.")
        self.assertEqual((ctx.exception.line, ctx.exception.column), (1, 1))

def main():
    unittest.main()

if __name__ == '__main__':
    main()
