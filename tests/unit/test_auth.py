from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from fieldservice.errors import (
    DuplicateIdentity, InvalidCapability, InvalidCredential, ValidationError, WeakCredential,
)
from fieldservice.models import TechnicianSession
from fieldservice.services import auth


async def test_register_authenticate_resolve(db):
    registered = await auth.register(db, "Tecnico@RM.com.br ", "senha-forte-1", "Carlos")
    assert registered.technician.email == "tecnico@rm.com.br"
    assert registered.technician.name == "Carlos"

    login = await auth.authenticate(db, "TECNICO@rm.com.br", "senha-forte-1")
    assert login.token != registered.token
    assert login.technician.last_login_at is not None

    ctx = await auth.resolve(login.token, db)
    assert ctx.technician_id == registered.technician.id
    assert ctx.email == "tecnico@rm.com.br"


async def test_register_default_name(db):
    result = await auth.register(db, "semnome@rm.com.br", "senha-forte-1")
    assert result.technician.name == "Técnico"


async def test_register_duplicate_email(db):
    await auth.register(db, "dup@rm.com.br", "senha-forte-1")
    with pytest.raises(DuplicateIdentity):
        await auth.register(db, "DUP@rm.com.br", "outra-senha-2")


@pytest.mark.parametrize("email, password", [
    ("", "senha-forte-1"),
    ("curto@rm.com.br", ""),
    ("curto@rm.com.br", "1234567"),
    ("not-an-email", "senha-forte-1"),
])
async def test_register_rejects_bad_input(db, email, password):
    with pytest.raises(ValidationError):
        await auth.register(db, email, password)


async def test_invalid_credentials_do_not_reveal_which_part_failed(db):
    await auth.register(db, "real@rm.com.br", "senha-forte-1")

    with pytest.raises(InvalidCredential) as unknown:
        await auth.authenticate(db, "ghost@rm.com.br", "senha-forte-1")
    with pytest.raises(InvalidCredential) as wrong:
        await auth.authenticate(db, "real@rm.com.br", "senha-errada")
    assert unknown.value.message == wrong.value.message == "Invalid credentials"


async def test_authenticate_requires_both_fields(db):
    with pytest.raises(ValidationError):
        await auth.authenticate(db, "real@rm.com.br", "")


async def test_resolve_rejects_unknown_and_missing_tokens(db):
    with pytest.raises(InvalidCapability):
        await auth.resolve(None, db)
    with pytest.raises(InvalidCapability):
        await auth.resolve("forged-token", db)


async def test_expired_capability_is_rejected(db):
    result = await auth.register(db, "velho@rm.com.br", "senha-forte-1")
    session = (await db.execute(select(TechnicianSession))).scalars().one()
    session.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    await db.commit()

    with pytest.raises(InvalidCapability):
        await auth.resolve(result.token, db)


async def test_resolve_slides_expiry_forward(db):
    result = await auth.register(db, "ativo@rm.com.br", "senha-forte-1")
    session = (await db.execute(select(TechnicianSession))).scalars().one()
    session.expires_at = datetime.now(timezone.utc) + timedelta(hours=1)
    await db.commit()

    await auth.resolve(result.token, db)
    await db.refresh(session)
    remaining = auth._as_utc(session.expires_at) - datetime.now(timezone.utc)
    assert remaining > timedelta(days=auth.SESSION_MAX_AGE_DAYS - 1)


async def test_token_is_stored_hashed(db):
    result = await auth.register(db, "hash@rm.com.br", "senha-forte-1")
    session = (await db.execute(select(TechnicianSession))).scalars().one()
    assert session.token_hash != result.token
    assert len(session.token_hash) == 64


async def test_revoke(db):
    result = await auth.register(db, "sair@rm.com.br", "senha-forte-1")
    await auth.revoke(result.token, db)
    with pytest.raises(InvalidCapability):
        await auth.resolve(result.token, db)


async def test_update_profile(db, tech_a):
    tech = await auth.update_profile(db, tech_a, name="  João Silva ", phone="11999990000")
    assert tech.name == "João Silva"
    assert tech.phone == "11999990000"

    with pytest.raises(ValidationError):
        await auth.update_profile(db, tech_a, name="   ")


def test_password_hashing():
    hashed = auth.hash_password("senha-forte-1")
    assert hashed != "senha-forte-1"
    assert auth.verify_password("senha-forte-1", hashed)
    assert not auth.verify_password("senha-errada", hashed)


async def test_short_password_is_a_weak_credential(db):
    with pytest.raises(WeakCredential):
        await auth.register(db, "fraca@rm.com.br", "1234567")


async def test_unknown_email_still_checks_a_password_hash(db, monkeypatch):
    checked = []

    def spy(plain, hashed):
        checked.append(hashed)
        return False

    monkeypatch.setattr(auth, "verify_password", spy)
    with pytest.raises(InvalidCredential):
        await auth.authenticate(db, "ninguem@rm.com.br", "senha-forte-1")
    assert checked == [auth._DUMMY_HASH]
