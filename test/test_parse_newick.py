import pytest

from nwktree.exceptions import NewickFormatError, UnbalancedStructureError
from nwktree.parser import build_tree, parse_length, parse_newick, tokenize
from nwktree.parser.lexer import Token, TokenKind
from nwktree.tree import NodeFactory


def get_child(node, *path):
    for index in path:
        node = node.children[index]
    return node


def test_parse_newick_1():
    root = parse_newick("(,,(,));")
    assert len(root.children) == 3
    assert len(get_child(root, 2).children) == 2


def test_parse_newick_2():
    root = parse_newick("(A,B,(C,D));")
    assert len(root.children) == 3
    assert get_child(root, 0).label == "A"
    assert get_child(root, 1).label == "B"
    assert get_child(root, 2, 0).label == "C"
    assert get_child(root, 2, 1).label == "D"


def test_parse_newick_internal_labels():
    root = parse_newick("(A,B,(C,D)E)F;")
    assert get_child(root, 2).label == "E"
    assert root.label == "F"
    assert root.parent is None


def test_parse_newick_lengths():
    root = parse_newick("(:0.1,:0.2,(:0.3,:0.4):0.5):0.0;")
    assert get_child(root, 0).length == 0.1
    assert get_child(root, 1).length == 0.2
    assert get_child(root, 2, 0).length == 0.3
    assert get_child(root, 2, 1).length == 0.4
    assert get_child(root, 2).length == 0.5
    assert root.length == 0.0
    assert root.has_length


def test_missing_length_is_distinct_from_zero():
    root = parse_newick("(A,B:0);")
    a, b = root.children
    assert not a.has_length
    assert b.has_length and b.length == 0.0


def test_ids_follow_creation_order():
    root = parse_newick("((A,B),C);", factory=NodeFactory(start=1))
    assert root.id == 1
    assert [node.id for node in root.traverse()] == [1, 2, 3, 4, 5]
    assert get_child(root, 1).id == 5


def test_parent_links():
    root = parse_newick("((A,B)X,C);")
    x = get_child(root, 0)
    for leaf in x.children:
        assert leaf.parent is x
    assert x.parent is root
    assert get_child(root, 1).parent is root


def test_underscores_become_blanks():
    root = parse_newick("(Homo_sapiens,Pan_troglodytes);")
    assert [leaf.label for leaf in root.children] == ["Homo sapiens", "Pan troglodytes"]


def test_quoted_labels_keep_underscores_and_punctuation():
    root = parse_newick("('a_b','x (y), z':1.5);")
    a, x = root.children
    assert a.label == "a_b"
    assert x.label == "x (y), z"
    assert x.length == 1.5


def test_doubled_quote_is_literal_apostrophe():
    root = parse_newick("('It''s',B);")
    assert get_child(root, 0).label == "It's"


def test_colon_inside_quoted_label_is_not_a_length():
    root = parse_newick("('a:b':2,C);")
    assert get_child(root, 0).label == "a:b"
    assert get_child(root, 0).length == 2.0


def test_comments_are_ignored():
    root = parse_newick("(A[first]:0.1,B:0.2[&&NHX:S=x])[root comment];")
    a, b = root.children
    assert a.label == "A"
    assert a.length == pytest.approx(0.1)
    assert b.length == pytest.approx(0.2)
    assert root.label == ""


def test_whitespace_between_tokens_is_insignificant():
    root = parse_newick(" ( A:1 ,\n B:2 ) ;")
    assert [leaf.label for leaf in root.children] == ["A", "B"]
    assert [leaf.length for leaf in root.children] == [1.0, 2.0]


def test_label_fragments_concatenate():
    root = parse_newick("(A.b,'x'y);")
    assert get_child(root, 0).label == "A.b"
    assert get_child(root, 1).label == "xy"


def test_signed_and_exponent_lengths():
    root = parse_newick("(A:-1.5,B:2e-3,C:+.5);")
    assert [leaf.length for leaf in root.children] == [-1.5, 0.002, 0.5]


def test_record_without_parenthesis_holds_no_tree():
    assert parse_newick("A;") is None
    assert parse_newick(";") is None


def test_tokens_after_semicolon_are_ignored():
    root = parse_newick("(A,B);(C,D);")
    assert [leaf.label for leaf in root.children] == ["A", "B"]


def test_unbalanced_close_raises():
    with pytest.raises(UnbalancedStructureError):
        parse_newick("(A,B));")


def test_comma_outside_parentheses_raises():
    with pytest.raises(UnbalancedStructureError):
        parse_newick("(A,B),C;")


def test_close_without_open_raises():
    with pytest.raises(UnbalancedStructureError):
        parse_newick(")A;")


def test_non_numeric_length_raises():
    with pytest.raises(NewickFormatError) as excinfo:
        parse_newick("(A:abc,B);")
    assert excinfo.value.token == ":abc"


def test_unterminated_quote_raises():
    with pytest.raises(NewickFormatError):
        parse_newick("('abc,B);")


def test_malformed_escape_raises():
    with pytest.raises(NewickFormatError):
        parse_newick(r"('a\x',B);")


def test_parse_length():
    assert parse_length(":0.25") == 0.25
    assert parse_length(":-3") == -3.0
    with pytest.raises(NewickFormatError):
        parse_length(":")
    with pytest.raises(NewickFormatError):
        parse_length(":nan")


def test_build_tree_from_tokens():
    tokens = [
        Token(TokenKind.OPEN, "("),
        Token(TokenKind.LABEL, "A"),
        Token(TokenKind.COMMA, ","),
        Token(TokenKind.LABEL, "B"),
        Token(TokenKind.LENGTH, ":2"),
        Token(TokenKind.CLOSE, ")"),
        Token(TokenKind.LABEL, "R"),
        Token(TokenKind.END, ";"),
    ]
    root = build_tree(tokens)
    assert root.label == "R"
    assert [leaf.label for leaf in root.children] == ["A", "B"]
    assert get_child(root, 1).length == 2.0


def test_build_tree_without_end_token():
    root = build_tree(tokenize('(A,B`:1`'))
    assert get_child(root, 1).label == "B"
    assert get_child(root, 1).length == 1.0


def test_quoted_label_with_leading_colon():
    root = parse_newick("(':x',B);")
    a = get_child(root, 0)
    assert a.label == ":x"
    assert not a.has_length


def test_brackets_in_quoted_label_are_kept():
    root = parse_newick("('[x]':1,B[comment]);")
    assert get_child(root, 0).label == "[x]"
    assert get_child(root, 0).length == 1.0
    assert get_child(root, 1).label == "B"
