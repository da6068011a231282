import pytest

from kvlab.murmur import murmur_words, murmurhash3_x64_128


def test_empty_input_with_zero_seed_hashes_to_zero():
    assert murmurhash3_x64_128(b"", 0) == (0, 0)


def test_distinct_inputs_give_distinct_hashes():
    assert murmurhash3_x64_128(b"hello world", 7) != murmurhash3_x64_128(b"hello worle", 7)


def test_seed_changes_result():
    assert murmurhash3_x64_128(b"key", 1) != murmurhash3_x64_128(b"key", 2)


@pytest.mark.parametrize("length", range(0, 41))
def test_results_are_64_bit(length):
    h1, h2 = murmurhash3_x64_128(bytes(range(length)), 1)
    assert 0 <= h1 < 2**64
    assert 0 <= h2 < 2**64


def test_every_length_gives_distinct_hash():
    data = bytes(range(1, 41))
    results = {murmurhash3_x64_128(data[:n], 1) for n in range(41)}
    assert len(results) == 41


@pytest.mark.parametrize("position", range(33))
def test_each_byte_affects_hash(position):
    data = bytearray(33)
    base = murmurhash3_x64_128(bytes(data), 3)
    data[position] = 1
    assert murmurhash3_x64_128(bytes(data), 3) != base


def test_accepts_bytes_like_objects():
    raw = b"abcdefghijklmnopq"
    assert murmurhash3_x64_128(bytearray(raw), 5) == murmurhash3_x64_128(raw, 5)
    assert murmurhash3_x64_128(memoryview(raw), 5) == murmurhash3_x64_128(raw, 5)


@pytest.mark.parametrize("data", [b"", b"a", (103122).to_bytes(8, "little"), b"x" * 37])
def test_words_split_the_two_halves(data):
    h1, h2 = murmurhash3_x64_128(data, 1)
    w0, w1, w2, w3 = murmur_words(data, 1)
    assert all(0 <= w < 2**32 for w in (w0, w1, w2, w3))
    assert w0 | (w1 << 32) == h1
    assert w2 | (w3 << 32) == h2


def test_seed_is_truncated_to_32_bits():
    assert murmurhash3_x64_128(b"abc", 2**32 + 9) == murmurhash3_x64_128(b"abc", 9)