import pytest

from storefront.services.auth import AuthError, register, sign_in


def test_sign_in_defaults_name():
    user = sign_in("jane@example.com", "secret")
    assert user.name == "Jane Doe"
    assert user.email == "jane@example.com"


def test_sign_in_keeps_given_name():
    assert sign_in("amy@example.com", "secret", "Amy").name == "Amy"


@pytest.mark.parametrize("email,password", [("", "secret"), ("jane@example.com", "")])
def test_sign_in_requires_email_and_password(email, password):
    with pytest.raises(AuthError):
        sign_in(email, password)


def test_register():
    user = register("Amy", "amy@example.com", "secret1")
    assert user.name == "Amy"


def test_register_requires_all_fields():
    with pytest.raises(AuthError):
        register("", "amy@example.com", "secret1")


def test_register_rejects_short_password():
    with pytest.raises(AuthError):
        register("Amy", "amy@example.com", "12345")
