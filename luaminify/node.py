from .token import Token

class Node(object):
    """
    a node of the syntax tree

    The type tag selects the grammar production. children holds every
    child node and every lexical token belonging to this node, in
    source order, so that the leaves of a Chunk reproduce the input.
    Each production also sets named fields for semantic access:

        Chunk               body, eof
        StatList            statements
        LocalVarStat        names, values
        LocalFunctionStat   name, params, vararg, body
        FunctionStat        name_chain, is_method, params, vararg, body
        AssignmentStat      targets, values
        CallExprStat        expression
        IfStat              clauses [(condition, body)...], else_body
        WhileStat           condition, body
        RepeatStat          body, condition
        NumericForStat      variable, range, body
        GenericForStat      variables, generators, body
        DoStat              body
        ReturnStat          values
        BreakStat
        GotoStat            label
        LabelStat           label
        FunctionLiteral     params, vararg, body
        VariableExpr        token
        *Literal            token
        BinopExpr           op, lhs, rhs
        UnopExpr            op, operand
        ParenExpr           expression
        TableLiteral        entries
        ValueEntry          value
        FieldEntry          key (a name token), value
        IndexEntry          key (an expression), value
        MemberExpr          base, name
        IndexExpr           base, index
        CallExpr            base, method, arguments, call_type
    """

    T_CHUNK = "Chunk"
    T_BLOCK = "StatList"

    # statements
    T_LOCAL_VAR = "LocalVarStat"
    T_LOCAL_FUNCTION = "LocalFunctionStat"
    T_FUNCTION_STAT = "FunctionStat"
    T_ASSIGNMENT = "AssignmentStat"
    T_CALL_STAT = "CallExprStat"
    T_IF = "IfStat"
    T_WHILE = "WhileStat"
    T_REPEAT = "RepeatStat"
    T_NUMERIC_FOR = "NumericForStat"
    T_GENERIC_FOR = "GenericForStat"
    T_DO = "DoStat"
    T_RETURN = "ReturnStat"
    T_BREAK = "BreakStat"
    T_GOTO = "GotoStat"
    T_LABEL = "LabelStat"

    # expressions
    T_NUMBER = "NumberLiteral"
    T_STRING = "StringLiteral"
    T_NIL = "NilLiteral"
    T_BOOLEAN = "BooleanLiteral"
    T_VARARG = "VargLiteral"
    T_VARIABLE = "VariableExpr"
    T_BINOP = "BinopExpr"
    T_UNOP = "UnopExpr"
    T_PAREN = "ParenExpr"
    T_FUNCTION = "FunctionLiteral"
    T_TABLE = "TableLiteral"
    T_MEMBER = "MemberExpr"
    T_INDEX = "IndexExpr"
    T_CALL = "CallExpr"

    # table constructor entries
    T_ENTRY_VALUE = "ValueEntry"
    T_ENTRY_FIELD = "FieldEntry"
    T_ENTRY_INDEX = "IndexEntry"

    # call argument styles
    ARG_CALL = "ArgCall"
    STRING_CALL = "StringCall"
    TABLE_CALL = "TableCall"

    def __init__(self, type, children=None, **fields):
        super(Node, self).__init__()
        self.type = type
        self.children = list(children) if children is not None else []
        self.__dict__.update(fields)

    @property
    def line(self):
        token = self.first_token()
        return token.line if token is not None else 0

    @property
    def column(self):
        token = self.first_token()
        return token.column if token is not None else 0

    def first_token(self):
        node = self
        while isinstance(node, Node):
            if not node.children:
                return None
            node = node.children[0]
        return node

    def leaves(self):
        """ return the lexical tokens of this subtree in source order """
        out = []
        seq = [self]
        while seq:
            item = seq.pop()
            if isinstance(item, Token):
                out.append(item)
            else:
                seq.extend(reversed(item.children))
        return out

    def nodes(self):
        """ return the child nodes, skipping lexical tokens """
        return [child for child in self.children if isinstance(child, Node)]

    def __str__(self):

        return self.toString(False, 0)

    def __repr__(self):
        return "Node(%r, %r, %r)" % (self.type, self.line, self.column)

    def toString(self, pretty=True, depth=0, pad="  "):

        if pretty:
            s = "%s%s<%s,%s>\n" % (pad * depth, self.type, self.line, self.column)
            parts = [s]
            for child in self.children:
                parts.append(child.toString(pretty, depth + 1, pad))
            return ''.join(parts)

        t = ','.join(child.toString(False) for child in self.children)
        return "%s{%s}" % (self.type, t)

    def flatten(self, depth=0):
        items = [(depth, self)]
        for child in self.children:
            items.extend(child.flatten(depth + 1))
        return items

def isassignable(node):
    return node.type in (Node.T_VARIABLE, Node.T_MEMBER, Node.T_INDEX)
