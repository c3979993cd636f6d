import random

import pytest

from huffman import (
    ContractViolation,
    HuffmanNode,
    MAX_DEPTH,
    MalformedEncoding,
    MalformedTree,
    build_tree,
    count_frequencies,
    decode_text,
    deserialize_tree,
    encode_text,
    format_frequencies,
    generate_codes,
    serialize_tree,
    tree_equals,
)


def _roundtrip(data):
    root = build_tree(count_frequencies(data))
    bits = encode_text(data, generate_codes(root))
    return decode_text(bits, root)


def _cost(freqs):
    codes = generate_codes(build_tree(freqs))
    return sum(len(codes[s]) * f for s, f in freqs.items())


def test_count_frequencies_counts_every_byte():
    freqs = count_frequencies(b"aabbccc\n\x00")
    assert freqs == {ord("a"): 2, ord("b"): 2, ord("c"): 3, 10: 1, 0: 1}
    assert count_frequencies(b"") == {}


def test_format_frequencies_escapes_and_sorts():
    lines = format_frequencies({ord("a"): 2, 10: 1, 0: 3, ord("\\"): 4})
    assert lines == ["\\x00: 3", "\\n: 1", "\\: 4", "a: 2"]


def test_node_rejects_single_child():
    leaf = HuffmanNode(symbol=1, freq=1)
    with pytest.raises(ValueError):
        HuffmanNode(freq=1, left=leaf)
    with pytest.raises(ValueError):
        HuffmanNode(freq=1)


def test_build_empty_raises():
    with pytest.raises(ValueError):
        build_tree({})


def test_build_single_symbol_is_bare_leaf():
    root = build_tree({ord("a"): 4})
    assert root.is_leaf()
    assert root.symbol == ord("a") and root.freq == 4
    assert generate_codes(root) == {ord("a"): ""}


def test_build_three_symbols_shape():
    root = build_tree({ord("a"): 3, ord("b"): 2, ord("c"): 1})
    assert root.freq == 6
    assert root.left is not None and root.right is not None
    assert root.left.is_leaf() and root.left.symbol == ord("a")
    assert root.right.freq == 3
    assert root.right.left.symbol == ord("c")
    assert root.right.right.symbol == ord("b")
    assert serialize_tree(root) == b"ILaILcLb"


def test_tie_break_prefers_lower_symbols_and_older_nodes():
    codes = generate_codes(build_tree({ord(c): 1 for c in "dcba"}))
    assert codes == {ord("a"): "00", ord("b"): "01", ord("c"): "10", ord("d"): "11"}


def test_build_is_deterministic():
    freqs = {s: (s * 7) % 5 + 1 for s in range(40)}
    assert serialize_tree(build_tree(freqs)) == serialize_tree(build_tree(dict(reversed(list(freqs.items())))))


def test_codes_are_prefix_free():
    rng = random.Random(1234)
    for _ in range(30):
        n = rng.randint(2, 256)
        freqs = {s: rng.randint(1, 1000) for s in rng.sample(range(256), n)}
        codes = list(generate_codes(build_tree(freqs)).values())
        assert len(codes) == n and all(codes)
        for a in codes:
            for b in codes:
                assert a is b or not b.startswith(a)


def test_code_lengths_are_optimal():
    assert _cost({ord(c): f for c, f in zip("abcdef", [45, 13, 12, 16, 9, 5])}) == 224
    assert _cost({1: 1, 2: 2, 3: 4, 4: 8}) == 25
    assert _cost({1: 1, 2: 1, 3: 1, 4: 1}) == 8


def test_code_lengths_fill_kraft_sum():
    rng = random.Random(99)
    freqs = {s: rng.randint(1, 50) for s in range(256)}
    codes = generate_codes(build_tree(freqs))
    assert sum(2 ** -len(c) for c in codes.values()) == 1


def test_encode_single_symbol_is_all_zero_bits():
    data = b"aaaa"
    root = build_tree(count_frequencies(data))
    bits = encode_text(data, generate_codes(root))
    assert bits == "0000"
    assert decode_text(bits, root) == data


def test_encode_missing_symbol_raises():
    with pytest.raises(ContractViolation):
        encode_text(b"abz", {ord("a"): "0", ord("b"): "1"})
    with pytest.raises(ContractViolation):
        encode_text(b"ab", {ord("a"): ""})


def test_encode_keeps_input_order(figure_tree):
    codes = generate_codes(figure_tree)
    assert encode_text(b"fabecd", codes) == "1111" + "00" + "01" + "1110" + "10" + "110"


@pytest.mark.parametrize(
    "data",
    [
        b"a",
        b"ab",
        b"abracadabra",
        bytes(range(256)),
        bytes(range(256)) * 3 + b"\x00" * 100,
        b"LLIIL I\x00",
        "пример текста с юникодом".encode("utf-8"),
    ],
)
def test_roundtrip(data):
    assert _roundtrip(data) == data


def test_roundtrip_random_bytes():
    rng = random.Random(7)
    for size in (1, 2, 17, 1000):
        data = bytes(rng.randrange(256) for _ in range(size))
        assert _roundtrip(data) == data


def test_decode_with_hand_built_tree(figure_tree):
    codes = generate_codes(figure_tree)
    for text in [b"a", b"b", b"c", b"d", b"e", b"f", b"abcdef", b"fabecd", b""]:
        assert decode_text(encode_text(text, codes), figure_tree) == text


def test_decode_truncated_code_raises():
    # nodes always have two children, so a bad stream can only stop mid-code
    root = build_tree({ord("a"): 3, ord("b"): 2, ord("c"): 1})
    with pytest.raises(MalformedEncoding):
        decode_text("111", root)


def test_decode_invalid_character_raises(figure_tree):
    with pytest.raises(MalformedEncoding):
        decode_text("00201", figure_tree)


def test_decode_single_leaf_requires_zero_bits():
    root = HuffmanNode(symbol=ord("x"))
    assert decode_text("000", root) == b"xxx"
    assert decode_text("", root) == b""
    with pytest.raises(MalformedEncoding):
        decode_text("010", root)


def test_decode_empty_tree():
    assert decode_text("", None) == b""
    with pytest.raises(MalformedEncoding):
        decode_text("0", None)


def test_serialize_simple_tree():
    root = HuffmanNode(freq=2, left=HuffmanNode(symbol=ord("a"), freq=1),
                       right=HuffmanNode(symbol=ord("b"), freq=1))
    assert serialize_tree(root) == b"ILaLb"
    assert serialize_tree(None) == b""
    assert serialize_tree(HuffmanNode(symbol=0)) == b"L\x00"


def test_deserialize_simple_tree():
    root = deserialize_tree(b"ILaLb")
    assert root is not None and not root.is_leaf()
    assert root.left.symbol == ord("a")
    assert root.right.symbol == ord("b")
    assert root.freq == 0
    assert deserialize_tree(b"") is None


def test_serialize_deserialize_roundtrip(figure_tree):
    assert tree_equals(deserialize_tree(serialize_tree(figure_tree)), figure_tree)

    freqs = {s: (s % 13) + 1 for s in range(256)}
    built = build_tree(freqs)
    assert tree_equals(deserialize_tree(serialize_tree(built)), built)


def test_tags_as_symbols_roundtrip():
    freqs = count_frequencies(b"LLLIII\x00L")
    built = build_tree(freqs)
    assert tree_equals(deserialize_tree(serialize_tree(built)), built)


@pytest.mark.parametrize("data", [b"I", b"L", b"ILa", b"IILaLb", b"X", b"ILaXb", b"LaLb"])
def test_deserialize_malformed_raises(data):
    with pytest.raises(MalformedTree):
        deserialize_tree(data)


def test_deserialize_deep_nesting_raises():
    with pytest.raises(MalformedTree):
        deserialize_tree(b"I" * 5000)
    with pytest.raises(MalformedTree):
        deserialize_tree(b"IL\x00" * (MAX_DEPTH + 1) + b"L\x01")


def test_deserialize_deepest_possible_tree():
    root = deserialize_tree(b"IL\x00" * MAX_DEPTH + b"L\x01")
    depth = 0
    node = root
    while not node.is_leaf():
        node = node.right
        depth += 1
    assert depth == MAX_DEPTH
    assert node.symbol == 1


def test_tree_equals_detects_differences(figure_tree):
    a = deserialize_tree(b"ILaLb")
    assert tree_equals(a, deserialize_tree(b"ILaLb"))
    assert not tree_equals(a, deserialize_tree(b"ILbLa"))
    assert not tree_equals(a, deserialize_tree(b"La"))
    assert not tree_equals(a, None)
    assert tree_equals(None, None)
    assert not tree_equals(a, figure_tree)
    assert not tree_equals(figure_tree, deserialize_tree(serialize_tree(figure_tree)),
                           compare_freq=True)
