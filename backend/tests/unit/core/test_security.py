"""
Unit Tests for Security Module
Tests for: password hashing, USN/mobile validation, tokens, payment signatures
"""
import pytest

from eventhub.core.security import (
    verify_password,
    get_password_hash,
    is_valid_usn,
    is_valid_mobile,
    generate_session_token,
    generate_reset_token,
    hash_reset_token,
    compute_payment_signature,
    verify_payment_signature,
)


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_password_returns_different_value(self):
        """Test that hashing returns a different value than input"""
        password = "testpassword123"
        hashed = get_password_hash(password)

        assert hashed != password
        assert hashed.startswith("$2")

    def test_hash_password_different_each_time(self):
        """Test that hashing same password returns different hashes"""
        password = "testpassword123"

        # Bcrypt generates different salts
        assert get_password_hash(password) != get_password_hash(password)

    def test_verify_password_correct(self):
        hashed = get_password_hash("testpassword123")
        assert verify_password("testpassword123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = get_password_hash("testpassword123")
        assert verify_password("wrongpassword", hashed) is False

    def test_verify_password_against_non_bcrypt_value(self):
        """A plaintext value in the password column never verifies"""
        assert verify_password("secret", "secret") is False

    def test_long_password_truncated_to_72_bytes(self):
        """Bcrypt only looks at the first 72 bytes"""
        password = "a" * 100
        hashed = get_password_hash(password)

        assert verify_password(password, hashed) is True
        assert verify_password("a" * 72, hashed) is True


class TestUsnValidation:

    @pytest.mark.parametrize("usn", ["1BM23CS101", "1BM21ME077", "1BM99EC000"])
    def test_valid_usn(self, usn):
        assert is_valid_usn(usn) is True

    @pytest.mark.parametrize("usn", [
        "1BM2XCS101",   # non-digit year
        "ABM23CS101",   # wrong prefix
        "1bm23cs101",   # lowercase
        "1BM23CS10",    # too short
        "1BM23CS1011",  # too long
        "1BM23C5101",   # digit in branch
        "1BM\u0968\u0969CS101",   # Devanagari year digits
        "",
    ])
    def test_invalid_usn(self, usn):
        assert is_valid_usn(usn) is False


class TestMobileValidation:

    def test_ten_digits(self):
        assert is_valid_mobile("9876543210") is True

    @pytest.mark.parametrize("mobile", [
        "987654321", "98765432100", "98765-4321", "+919876543", "",
        "\u096f\u096e\u096d\u096c\u096b\u096a\u0969\u0968\u0967\u0966",  # Devanagari digits
    ])
    def test_invalid_mobile(self, mobile):
        assert is_valid_mobile(mobile) is False


class TestTokens:

    def test_session_tokens_are_unique(self):
        tokens = {generate_session_token() for _ in range(50)}
        assert len(tokens) == 50

    def test_session_token_length(self):
        # 32 random bytes, url-safe base64
        assert len(generate_session_token()) >= 43

    def test_reset_token_is_hex(self):
        token = generate_reset_token()
        assert len(token) == 64
        int(token, 16)

    def test_reset_token_digest_is_stable(self):
        token = generate_reset_token()
        assert hash_reset_token(token) == hash_reset_token(token)
        assert hash_reset_token(token) != token
        assert len(hash_reset_token(token)) == 64


class TestPaymentSignature:
    """HMAC-SHA256 over "order_id|payment_id" """

    SECRET = "rzp_test_secret"

    def test_known_vector(self):
        import hashlib
        import hmac

        expected = hmac.new(b"rzp_test_secret", b"order_abc|pay_xyz", hashlib.sha256).hexdigest()
        assert compute_payment_signature("order_abc", "pay_xyz", self.SECRET) == expected

    def test_matching_signature_verifies(self):
        signature = compute_payment_signature("order_abc", "pay_xyz", self.SECRET)
        assert verify_payment_signature("order_abc", "pay_xyz", signature, self.SECRET) is True

    def test_single_character_mutation_fails(self):
        signature = compute_payment_signature("order_abc", "pay_xyz", self.SECRET)
        mutated = ("0" if signature[0] != "0" else "1") + signature[1:]

        assert verify_payment_signature("order_abc", "pay_xyz", mutated, self.SECRET) is False

    def test_swapped_ids_fail(self):
        signature = compute_payment_signature("order_abc", "pay_xyz", self.SECRET)
        assert verify_payment_signature("pay_xyz", "order_abc", signature, self.SECRET) is False

    def test_wrong_secret_fails(self):
        signature = compute_payment_signature("order_abc", "pay_xyz", "other_secret")
        assert verify_payment_signature("order_abc", "pay_xyz", signature, self.SECRET) is False

    @pytest.mark.parametrize("order_id,payment_id,signature", [
        ("", "pay_xyz", "abc"),
        ("order_abc", "", "abc"),
        ("order_abc", "pay_xyz", ""),
    ])
    def test_missing_fields_fail(self, order_id, payment_id, signature):
        assert verify_payment_signature(order_id, payment_id, signature, self.SECRET) is False

    def test_non_ascii_signature_fails(self):
        signature = compute_payment_signature("order_abc", "pay_xyz", self.SECRET)
        mutated = "\u00e9" + signature[1:]

        assert verify_payment_signature("order_abc", "pay_xyz", mutated, self.SECRET) is False
