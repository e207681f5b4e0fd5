from vollmed.config import Settings
from vollmed.security import create_access_token, decode_access_token, hash_password, verify_password


def test_hash_de_senha():
    hashed = hash_password("segredo")
    assert hashed != "segredo"
    assert verify_password("segredo", hashed)
    assert not verify_password("outro", hashed)


def test_token_carrega_login():
    settings = Settings(secret_key="chave")
    token = create_access_token("ana@voll.med", settings)
    assert decode_access_token(token, settings) == "ana@voll.med"


def test_token_de_outra_chave_ou_emissor_e_rejeitado():
    token = create_access_token("ana@voll.med", Settings(secret_key="chave"))
    assert decode_access_token(token, Settings(secret_key="outra")) is None
    assert decode_access_token(token, Settings(secret_key="chave", token_issuer="Outro")) is None
    assert decode_access_token("nao-e-jwt", Settings(secret_key="chave")) is None


def test_token_expirado():
    settings = Settings(secret_key="chave", access_token_expire_minutes=-1)
    assert decode_access_token(create_access_token("ana@voll.med", settings), settings) is None


def test_hash_usa_o_custo_pedido():
    assert hash_password("segredo", rounds=4).startswith("$2b$04$")
    assert hash_password("segredo", rounds=5).startswith("$2b$05$")
