import pytest

from src.adapter.services.password_generator import SPECIAL_CHARACTERS, SecretsPasswordGenerator
from src.adapter.services.password_service import BcryptPasswordService
from src.app.use_cases.auth import PLACEHOLDER_HASH


@pytest.mark.asyncio
async def test_temporary_password_has_every_character_class():
    generator = SecretsPasswordGenerator()

    for _ in range(20):
        password = await generator.generate_temporary_password()
        assert len(password) == 12
        assert any(c.isupper() for c in password)
        assert any(c.islower() for c in password)
        assert any(c.isdigit() for c in password)
        assert any(c in SPECIAL_CHARACTERS for c in password)
        assert generator.validate_password_strength(password).score == 5


@pytest.mark.asyncio
async def test_reset_tokens_are_unique():
    generator = SecretsPasswordGenerator()
    tokens = {await generator.generate_reset_token() for _ in range(10)}

    assert len(tokens) == 10


def test_strength_feedback():
    strength = SecretsPasswordGenerator().validate_password_strength("lowercase")

    assert strength.is_valid is False
    assert "password.missing_uppercase" in strength.feedback
    assert "password.missing_digit" in strength.feedback


@pytest.mark.asyncio
async def test_bcrypt_hash_and_verify():
    service = BcryptPasswordService(rounds=4)

    hashed = await service.hash("Secret123")

    assert hashed.startswith("$2b$04$")
    assert await service.verify("Secret123", hashed) is True
    assert await service.verify("Secret124", hashed) is False


@pytest.mark.asyncio
async def test_bcrypt_placeholder_hash_never_matches():
    service = BcryptPasswordService(rounds=4)

    assert await service.verify("anything", PLACEHOLDER_HASH) is False


@pytest.mark.asyncio
async def test_bcrypt_malformed_hash_returns_false():
    service = BcryptPasswordService(rounds=4)

    assert await service.verify("anything", "not-a-bcrypt-hash") is False
