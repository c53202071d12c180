"""Password hashing — verifies bcrypt hash/check and the dummy hash."""

from shopnear.core.passwords import check_password, dummy_hash, hash_password


def test_hash_then_check():
    hashed = hash_password("hunter22", rounds=4)
    assert hashed != "hunter22"
    assert check_password("hunter22", hashed)
    assert not check_password("hunter23", hashed)


def test_hashes_are_salted():
    assert hash_password("same", rounds=4) != hash_password("same", rounds=4)


def test_malformed_hash_compares_false():
    assert check_password("anything", "not-a-bcrypt-hash") is False


def test_dummy_hash_is_cached_real_hash():
    assert dummy_hash(4) is dummy_hash(4)
    assert dummy_hash(4).startswith("$2")
    assert not check_password("", dummy_hash(4))
