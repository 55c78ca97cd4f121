from luaminify.token import Token

def edit_distance(hyp, ref, eq=None):
    """
    given: two sequences hyp and ref (str, list, or bytes)

    solve E(i,j) -> E(m,n)
    """

    if len(hyp) == 0:
        return [(None, elem) for elem in ref], 0, 0, 0, len(ref)

    if len(ref) == 0:
        return [(elem, None) for elem in hyp], 0, 0, len(hyp), 0

    if eq is None:
        eq = lambda a, b: a == b

    e = [0, ] * (len(hyp) * len(ref))
    s = lambda i, j: i * len(ref) + j
    d = lambda i, j: 0 if eq(hyp[i], ref[j]) else 1
    E = lambda i, j: e[s(i, j)]

    e[s(0, 0)] = d(0, 0)

    # build the error table using dynamic programming
    # first build the top and left edge
    for i in range(1, len(hyp)):
        e[s(i, 0)] = min([1 + i, d(i, 0) + i])

    for j in range(1, len(ref)):
        e[s(0, j)] = min([1 + j, d(0, j) + j])

    # fill in remaining squares
    for i in range(1, len(hyp)):
        for j in range(1, len(ref)):
            e[s(i, j)] = min([1 + E(i - 1, j), 1 + E(i, j - 1), d(i, j) + E(i - 1, j - 1)])

    # reverse walk
    # find number of substitutions/insertions/deletions
    i = len(hyp) - 1
    j = len(ref) - 1
    seq = []
    cor = sub = del_ = ins = 0
    while i > 0 and j > 0:
        _a = E(i, j)            # current cost
        _b = E(i - 1, j)        # cost of insertion
        _c = E(i, j - 1)        # cost of deletion
        _d = E(i - 1, j - 1)    # cost of a substitution

        if _d <= _a and _d < _b and _d < _c:
            seq.append((hyp[i], ref[j]))
            if eq(hyp[i], ref[j]):
                cor += 1
            else:
                sub += 1
            i, j = i - 1, j - 1
        elif _b <= _c:
            seq.append((hyp[i], None))
            i = i - 1
            ins += 1
        else:
            seq.append((None, ref[j]))
            j = j - 1
            del_ += 1

    while i >= 0 and j >= 0:
        seq.append((hyp[i], ref[j]))
        if eq(hyp[i], ref[j]):
            cor += 1
        else:
            sub += 1
        i = i - 1
        j = j - 1

    while i >= 0:
        seq.append((hyp[i], None))
        i = i - 1
        ins += 1

    while j >= 0:
        seq.append((None, ref[j]))
        j = j - 1
        del_ += 1

    if sub + ins + del_ == 0:
        assert cor == len(hyp), (cor, len(hyp))

    return reversed(seq), cor, sub, ins, del_

def tokcmp(a, b):
    if a is None:
        return False
    if b is None:
        return False
    return a.type == b.type and a.value == b.value

def lexcmp(expected, actual, debug=False):
    """ return the number of tokens which differ between two token lists """

    seq, cor, sub, ins, del_ = edit_distance(actual, expected, tokcmp)
    error_count = sub + ins + del_
    if error_count > 0 or debug:
        print("\ncor: %d sub: %d ins: %d del: %d" % (cor, sub, ins, del_))
        print("\n%-50s | %-.50s" % ("    HYP", "    REF"))
        for a, b in seq:
            c = ' ' if tokcmp(a, b) else '|'
            print("%-50r %s %-.50r" % (a, c, b))
    return error_count

def TOKEN(t, v):
    return Token(getattr(Token, t), 1, 0, v)
