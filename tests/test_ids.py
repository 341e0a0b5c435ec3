import string

from deferq.ids import ID_ALPHABET, ID_LENGTH, _id_from_bytes, random_id


def test_random_id_has_fixed_length():
    assert len(random_id()) == ID_LENGTH == 10


def test_random_id_uses_only_alphabet_characters():
    for _ in range(200):
        assert set(random_id()) <= set(ID_ALPHABET)


def test_byte_mapping_walks_digits_then_letters():
    produced = []
    for value in range(256):
        char = _id_from_bytes(bytes([value]))
        if char not in produced:
            produced.append(char)
    assert "".join(produced) == (
        string.digits + string.ascii_uppercase + string.ascii_lowercase
    )


def test_random_ids_are_distinct():
    ids = {random_id() for _ in range(1000)}
    assert len(ids) == 1000


def test_zero_bytes_map_to_first_character():
    assert _id_from_bytes(bytes(ID_LENGTH)) == ID_ALPHABET[0] * ID_LENGTH


def test_full_bytes_map_to_last_character():
    assert _id_from_bytes(bytes([255] * ID_LENGTH)) == ID_ALPHABET[-1] * ID_LENGTH


def test_mapping_is_monotonic_over_byte_values():
    mapped = [ID_ALPHABET.index(_id_from_bytes(bytes([value]))) for value in range(256)]
    assert mapped == sorted(mapped)
    assert set(mapped) == set(range(len(ID_ALPHABET)))