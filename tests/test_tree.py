from djotlex.tree import TreeNode


def _sample():
    return TreeNode(
        type=1,
        text=b"a",
        children=[
            TreeNode(type=2, text=b"b", children=[TreeNode(type=3, text=b"c")]),
            TreeNode(type=4, text=b"d"),
        ],
    )


def test_traverse_is_preorder():
    assert [node.type for node in _sample().traverse()] == [1, 2, 3, 4]


def test_full_text_concatenates_in_order():
    root = _sample()
    assert root.full_text() == b"".join(node.text for node in root.traverse())
    assert root.full_text() == b"a" + b"b" + b"c" + b"d"


def test_single_node_full_text():
    node = TreeNode(type=7, text=b"alone")
    assert node.full_text() == b"alone"
    assert list(node.traverse()) == [node]


def test_empty_texts_give_empty_full_text():
    node = TreeNode(type=1, children=[TreeNode(type=2), TreeNode(type=3)])
    assert node.full_text() == b""