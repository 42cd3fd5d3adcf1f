import pytest

from authcore.app.services.passwords import PasswordHasher, validate_password


@pytest.mark.parametrize("password", ["S3cure!", "N3wPass!", "Abcdef1$", "Pässw0rd!"])
def test_strong_passwords_accepted(password):
    assert validate_password(password).is_ok()


def test_weak_password_lists_every_violation():
    result = validate_password("abc")

    assert result.is_err()
    assert result.error.code == "WEAK_PASSWORD"
    codes = {d.code for d in result.error.details}
    assert codes == {
        "PasswordTooShort",
        "PasswordRequiresNonAlphanumeric",
        "PasswordRequiresDigit",
        "PasswordRequiresUpper",
    }


def test_missing_lowercase_reported():
    result = validate_password("ABCDEF1!")

    assert [d.code for d in result.error.details] == ["PasswordRequiresLower"]


def test_hash_and_verify(hasher):
    password_hash = hasher.hash("S3cure!")

    assert password_hash != "S3cure!"
    assert password_hash.startswith("$2")
    assert hasher.verify("S3cure!", password_hash) is True
    assert hasher.verify("wrong", password_hash) is False


def test_verify_with_malformed_hash_is_false(hasher):
    assert hasher.verify("S3cure!", "not-a-bcrypt-hash") is False


def test_long_passwords_are_hashed(hasher):
    password = "Aa1!" * 40

    assert hasher.verify(password, hasher.hash(password)) is True


def test_burn_does_not_raise(hasher):
    hasher.burn("anything")
    hasher.burn("anything")
