#! cd .. && python3 -m luaminify.transform

import logging

from .lexer import reserved_words
from .scope import Variable

log = logging.getLogger("luaminify.transform")

alphabet = "abcdefghijklmnopqrstuvwxyz"

def encode_identifier(n):
    """
    map an index to a name: 0 -> a, 25 -> z, 26 -> aa, 27 -> ab, ...

    names are ordered by length and then alphabetically, with the
    last character varying fastest
    """
    c = ""
    n += 1
    while n > 0:
        n, r = divmod(n - 1, len(alphabet))
        c = alphabet[r] + c
    return c

def fixed_names(global_scope, root_scope):
    """
    return the set of names a renamer must never produce

    keywords, globals which are read but not assigned, and variables
    which can not be renamed (_ENV, self)
    """
    names = set(reserved_words)
    for var in global_scope.variables:
        if var.external:
            names.add(var.name)
    for scope in root_scope.walk():
        for var in scope.variables:
            if not var.renamable:
                names.add(var.name)
    return names

class TransformBase(object):
    def __init__(self):
        super(TransformBase, self).__init__()

    def transform(self, global_scope, root_scope):
        """
        returns a mapping of Variable -> new name

        variables which keep their name are not included
        """
        raise NotImplementedError()

class TransformMinifyScope(TransformBase):
    """
    assign the shortest available names

    assigned globals are named first. each scope then names its own
    variables, starting from the first index not used by an enclosing
    scope, so that sibling scopes share the same short names.
    """

    def transform(self, global_scope, root_scope):

        self.fixed = fixed_names(global_scope, root_scope)
        self.names = {}

        index = 0
        for var in global_scope.variables:
            if var.assigned:
                index = self._assign(var, index)

        seq = [(root_scope, index)]
        while seq:
            scope, index = seq.pop()

            for var in scope.variables:
                if var.renamable:
                    index = self._assign(var, index)

            for child in reversed(scope.children):
                seq.append((child, index))

        log.debug("minify assigned %d names", len(self.names))

        return self.names

    def nextLabel(self, index):
        """ return the first usable name at or after index, and its index """
        while True:
            label = encode_identifier(index)
            if label not in self.fixed:
                return label, index
            index += 1

    def _assign(self, var, index):
        label, index = self.nextLabel(index)
        self.names[var] = label
        return index + 1

class TransformBeautifyScope(TransformBase):
    """
    assign descriptive names

    assigned globals become G_1, G_2, ... and every scope which declares
    a renamable variable is given a number n. parameters become
    L_n_argK and other locals L_n_1, L_n_2, ...
    """

    def transform(self, global_scope, root_scope):

        self.fixed = fixed_names(global_scope, root_scope)
        self.names = {}

        counter = 0
        for var in global_scope.variables:
            if var.assigned:
                while True:
                    counter += 1
                    label = "G_%d" % counter
                    if label not in self.fixed:
                        break
                self.names[var] = label

        scope_counter = 0
        for scope in root_scope.walk():

            variables = [var for var in scope.variables if var.renamable]
            if not variables:
                continue

            scope_counter += 1
            counter = 0
            for var in variables:
                if var.kind == Variable.PARAM:
                    label = "L_%d_arg%d" % (scope_counter, var.index)
                    while label in self.fixed:
                        label += "_"
                else:
                    while True:
                        counter += 1
                        label = "L_%d_%d" % (scope_counter, counter)
                        if label not in self.fixed:
                            break
                self.names[var] = label

        log.debug("beautify assigned %d names", len(self.names))

        return self.names

def main():  # pragma: no cover

    from .parser import Parser
    from .scope import resolve

    text1 = """
    function foo(bar)
        local baz = bar
        do local x = 1 end
        do local y = 2 end
        return baz
    end
    """

    ast = Parser().parse(text1)
    scopes = resolve(ast)

    for var, name in TransformMinifyScope().transform(*scopes).items():
        print(var, name)

    for var, name in TransformBeautifyScope().transform(*scopes).items():
        print(var, name)

if __name__ == '__main__':  # pragma: no cover
    main()
