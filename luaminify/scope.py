#! cd .. && python3 -m luaminify.scope

import logging

from .node import Node

log = logging.getLogger("luaminify.scope")

class Variable(object):

    LOCAL = "Local"
    GLOBAL = "Global"
    PARAM = "FunctionParam"
    VARARG = "VarargParam"

    def __init__(self, name, kind, scope, token=None, index=0, implicit=False):
        super(Variable, self).__init__()
        self.name = name
        self.kind = kind
        self.scope = scope
        # 1-based position in the parameter list
        self.index = index
        # declared by the language rather than by the program (_ENV, self)
        self.implicit = implicit
        # true when a global is assigned by the program
        self.assigned = False
        # identifier tokens which name this variable, declaration first
        self.references = []
        if token is not None:
            self.reference(token)

    def reference(self, token):
        token.ref = self
        self.references.append(token)

    @property
    def renamable(self):
        """ true for variables whose name may be changed by a renamer """
        if self.kind in (Variable.GLOBAL, Variable.VARARG):
            return False
        return not self.implicit and self.name != "_ENV"

    @property
    def external(self):
        """ true for globals which are only read """
        return self.kind == Variable.GLOBAL and not self.assigned

    def __repr__(self):
        return "Variable(%r, %r)" % (self.name, self.kind)

class Scope(object):

    def __init__(self, parent=None, node=None):
        super(Scope, self).__init__()
        self.parent = parent
        self.node = node
        self.children = []
        # variables in declaration order
        self.variables = []
        # name -> most recently declared variable
        self.names = {}
        self.depth = 0

        if parent is not None:
            self.depth = parent.depth + 1
            parent.children.append(self)

    def newChild(self, node=None):
        return Scope(self, node)

    def declare(self, name, kind, token=None, **kwargs):
        var = Variable(name, kind, self, token, **kwargs)
        self.variables.append(var)
        self.names[name] = var
        return var

    def lookup(self, name):
        scope = self
        while scope is not None:
            var = scope.names.get(name, None)
            if var is not None:
                return var
            scope = scope.parent
        return None

    def walk(self):
        """ yield this scope and all descendants in pre-order """
        seq = [self]
        while seq:
            scope = seq.pop()
            yield scope
            seq.extend(reversed(scope.children))

    def toString(self, depth=0, pad="  "):
        lines = []
        for scope in self.walk():
            indent = pad * (depth + scope.depth - self.depth)
            lines.append("%sscope<%d>\n" % (indent, scope.depth))
            for var in scope.variables:
                lines.append("%s%s%s %s refs: %d\n" % (
                    indent, pad, var.kind, var.name, len(var.references)))
        return ''.join(lines)

ST_VISIT    = 0x001
ST_FINALIZE = 0x002

class ScopeResolver(object):
    """
    bind every identifier in a chunk to a Variable

    The tree is walked in lexical order using an explicit stack of
    (state, scope, node, parent) tuples. Visit handlers push the work
    for the children of a node, finalize handlers run after all work
    pushed before them has completed.
    """

    def __init__(self):
        super(ScopeResolver, self).__init__()

        self.visit_mapping = {
            Node.T_CHUNK: self.visit_chunk,
            Node.T_BLOCK: self.visit_block,
            Node.T_VARIABLE: self.visit_variable,
            Node.T_LOCAL_VAR: self.visit_local_var,
            Node.T_LOCAL_FUNCTION: self.visit_local_function,
            Node.T_FUNCTION_STAT: self.visit_function_stat,
            Node.T_FUNCTION: self.visit_function,
            Node.T_ASSIGNMENT: self.visit_assignment,
            Node.T_REPEAT: self.visit_repeat,
            Node.T_NUMERIC_FOR: self.visit_for,
            Node.T_GENERIC_FOR: self.visit_for,
        }

        self.finalize_mapping = {
            Node.T_LOCAL_VAR: self.finalize_local_var,
            Node.T_ASSIGNMENT: self.finalize_assignment,
            Node.T_NUMERIC_FOR: self.finalize_numeric_for,
            Node.T_GENERIC_FOR: self.finalize_generic_for,
        }

        self.states = {
            ST_VISIT: self.visit_mapping,
            ST_FINALIZE: self.finalize_mapping,
        }

        self.state_defaults = {
            ST_VISIT: self.visit_default,
            ST_FINALIZE: self.finalize_default,
        }

    def resolve(self, ast):
        """
        returns a pair (global_scope, root_scope)

        the global scope holds a Variable for every global referenced
        by the chunk. the root scope is the scope of the chunk itself.
        """

        self.global_scope = Scope()
        self.root_scope = None
        self.seq = [(ST_VISIT, self.global_scope, ast, None)]

        while self.seq:
            # process nodes in the order they are discovered. (DFS)
            state, scope, node, parent = self.seq.pop()

            fn = self.states[state].get(node.type, None)

            if not fn:
                fn = self.state_defaults[state]

            fn(state, scope, node, parent)

        self._diag()

        return self.global_scope, self.root_scope

    def _push_finalize(self, scope, node, parent):
        self.seq.append((ST_FINALIZE, scope, node, parent))

    def _push_children(self, scope, node, children=None):
        if children is None:
            children = node.children
        for child in reversed(children):
            if isinstance(child, Node):
                self.seq.append((ST_VISIT, scope, child, node))

    def _reference(self, scope, token):
        var = scope.lookup(token.value)
        if var is None:
            var = self.global_scope.declare(token.value, Variable.GLOBAL)
        var.reference(token)
        return var

    def _declare_function(self, scope, node, method=False):
        """ create the scope of a function and declare its parameters """

        inner = scope.newChild(node)
        if method:
            inner.declare("self", Variable.PARAM, implicit=True)
        for index, token in enumerate(node.params):
            inner.declare(token.value, Variable.PARAM, token, index=index + 1)
        if node.vararg is not None:
            inner.declare("...", Variable.VARARG)

        # the body shares the scope of the parameters
        self._push_children(inner, node.body)

    # -------------------------------------------------------------------------

    def visit_default(self, state, scope, node, parent):
        self._push_children(scope, node)

    def finalize_default(self, state, scope, node, parent):
        pass

    def visit_chunk(self, state, scope, node, parent):

        self.root_scope = scope.newChild(node)
        self.root_scope.declare("_ENV", Variable.LOCAL, implicit=True)
        self._push_children(self.root_scope, node.body)

    def visit_block(self, state, scope, node, parent):
        self._push_children(scope.newChild(node), node)

    def visit_variable(self, state, scope, node, parent):
        self._reference(scope, node.token)

    def visit_local_var(self, state, scope, node, parent):
        # the new names are not visible to the values being assigned
        self._push_finalize(scope, node, parent)
        self._push_children(scope, node, node.values)

    def finalize_local_var(self, state, scope, node, parent):
        for token in node.names:
            scope.declare(token.value, Variable.LOCAL, token)

    def visit_local_function(self, state, scope, node, parent):
        # the name is visible inside the body to allow recursion
        scope.declare(node.name.value, Variable.LOCAL, node.name)
        self._declare_function(scope, node)

    def visit_function_stat(self, state, scope, node, parent):

        var = self._reference(scope, node.name_chain[0])
        if len(node.name_chain) == 1:
            var.assigned = True

        self._declare_function(scope, node, node.is_method)

    def visit_function(self, state, scope, node, parent):
        self._declare_function(scope, node)

    def visit_assignment(self, state, scope, node, parent):
        self._push_finalize(scope, node, parent)
        self._push_children(scope, node)

    def finalize_assignment(self, state, scope, node, parent):
        for target in node.targets:
            if target.type == Node.T_VARIABLE:
                target.token.ref.assigned = True

    def visit_repeat(self, state, scope, node, parent):
        # the condition can see the locals of the body
        inner = scope.newChild(node.body)
        self.seq.append((ST_VISIT, inner, node.condition, node))
        self._push_children(inner, node.body)

    def visit_for(self, state, scope, node, parent):
        # loop variables are not visible to the range or generators
        self._push_finalize(scope, node, parent)
        if node.type == Node.T_NUMERIC_FOR:
            self._push_children(scope, node, node.range)
        else:
            self._push_children(scope, node, node.generators)

    def finalize_numeric_for(self, state, scope, node, parent):
        inner = scope.newChild(node.body)
        inner.declare(node.variable.value, Variable.LOCAL, node.variable)
        self._push_children(inner, node.body)

    def finalize_generic_for(self, state, scope, node, parent):
        inner = scope.newChild(node.body)
        for token in node.variables:
            inner.declare(token.value, Variable.LOCAL, token)
        self._push_children(inner, node.body)

    # -------------------------------------------------------------------------

    def _diag(self):

        nscopes = 0
        nvars = 0
        for scope in self.root_scope.walk():
            nscopes += 1
            for var in scope.variables:
                nvars += 1
                if var.renamable and len(var.references) == 1:
                    token = var.references[0]
                    log.debug("variable defined but never used: %s line: %d column: %d",
                        var.name, token.line, token.column)

        log.debug("resolved %d scopes, %d variables, %d globals",
            nscopes, nvars, len(self.global_scope.variables))

def resolve(ast):
    """ bind the identifiers of an AST, returns (global_scope, root_scope) """
    return ScopeResolver().resolve(ast)

def main():  # pragma: no cover

    from .parser import Parser

    text1 = """
    local x = 1
    function foo(a, ...)
        local x = x + a
        return bar(x)
    end
    """

    ast = Parser().parse(text1)
    global_scope, root_scope = resolve(ast)
    print(global_scope.toString())

if __name__ == '__main__':  # pragma: no cover
    main()
