from uri_builtins.query import decode_query, encode_query


def test_encode_query_sorts_keys_and_keeps_value_order() -> None:
    assert encode_query({"sorted": ["false"], "id": ["7"]}) == "id=7&sorted=false"
    assert encode_query({"b": ["2", "1"], "a": ["x y"]}) == "a=x+y&b=2&b=1"
    assert encode_query({}) == ""


def test_encode_query_escapes_keys_and_values() -> None:
    assert encode_query({"valid?": ["false"]}) == "valid%3F=false"
    assert encode_query({"redirect": ["/a&b=c"]}) == "redirect=%2Fa%26b%3Dc"


def test_decode_query_collects_repeated_keys() -> None:
    assert decode_query("id=7&sorted=false&id=8") == {"id": ["7", "8"], "sorted": ["false"]}
    assert decode_query("valid?=false") == {"valid?": ["false"]}


def test_decode_query_handles_blank_pairs_and_form_encoding() -> None:
    assert decode_query("a=x+y%21&flag&&b=") == {"a": ["x y!"], "flag": [""], "b": [""]}
    assert decode_query("") == {}


def test_decode_query_drops_malformed_pairs() -> None:
    assert decode_query("a=%zz&b=1&c;d=2") == {"b": ["1"]}
