import math

from .lexer import reserved_words, chset_ident_start, chset_ident

# escapes used when writing a python string as a lua string literal
char_escape = {
    '\\': '\\\\',
    '"': '\\"',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    '\a': '\\a',
    '\b': '\\b',
    '\f': '\\f',
    '\v': '\\v',
}

def isidentifier(text):
    """
    returns true if text can be written as a bare table key
    """
    if not text or text[0] not in chset_ident_start:
        return False
    if any(c not in chset_ident for c in text):
        return False
    return text not in reserved_words

def quoteString(text):
    """
    Quote a python string as a lua string literal
    """
    parts = ['"']
    for c in text:
        if c in char_escape:
            parts.append(char_escape[c])
        elif ord(c) < 32 or ord(c) == 127:
            # three digits so that a following digit is not consumed
            parts.append("\\%03d" % ord(c))
        else:
            parts.append(c)
    parts.append('"')
    return ''.join(parts)

def formatNumber(value):
    if isinstance(value, float):
        if math.isnan(value):
            return "0/0"
        if math.isinf(value):
            return "1/0" if value > 0 else "-1/0"
    return repr(value)

def format_table(value, indent=None):
    """ format a python value as a lua literal

    :param value: a dict, list, tuple, str, int, float, bool or None.
                  containers may be nested.
    :param indent: if given, each table entry is written on a new line
                   indented by this string. otherwise the literal is
                   written on a single line.

    raises ValueError for a value which contains itself, and TypeError
    for a value which has no lua representation.
    """
    return _format_value(value, indent, 0, set())

def _format_key(key, indent, level, active):
    if isinstance(key, str):
        if isidentifier(key):
            return key
        return "[%s]" % quoteString(key)
    if key is None:
        raise TypeError("nil can not be used as a table key")
    if isinstance(key, float) and math.isnan(key):
        raise TypeError("nan can not be used as a table key")
    return "[%s]" % _format_value(key, indent, level, active)

def _format_value(value, indent, level, active):

    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return formatNumber(value)
    if isinstance(value, str):
        return quoteString(value)

    if isinstance(value, dict):
        items = list(value.items())
    elif isinstance(value, (list, tuple)):
        items = [(None, item) for item in value]
    else:
        raise TypeError("can not format type %s" % type(value).__name__)

    if id(value) in active:
        raise ValueError("can not format a table which contains itself")
    active.add(id(value))

    sep = "=" if indent is None else " = "
    entries = []
    for key, item in items:
        text = _format_value(item, indent, level + 1, active)
        if isinstance(value, dict):
            text = _format_key(key, indent, level + 1, active) + sep + text
        entries.append(text)

    active.discard(id(value))

    if not entries:
        return "{}"

    if indent is None:
        return "{%s}" % ','.join(entries)

    inner = indent * (level + 1)
    body = ',\n'.join(inner + entry for entry in entries)
    return "{\n%s\n%s}" % (body, indent * level)

def count_table(value, limit=None):
    """ return the number of entries in a container

    :param value: any iterable container, a dict counts its keys
    :param limit: stop counting once this many entries have been seen
    """
    count = 0
    for _ in value:
        if limit is not None and count >= limit:
            break
        count += 1
    return count
