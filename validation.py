"""Registration rules shared by the ``/users`` routes and the client form."""

MIN_PASSWORD_LENGTH = 6

SERVER_REQUIRED = ("username", "password")
FORM_REQUIRED = ("name", "username", "password")

MISSING_FIELDS = "Por favor, preencha todos os campos."
PASSWORD_MISMATCH = "As senhas não coincidem."
PASSWORD_TOO_SHORT = f"A senha deve ter pelo menos {MIN_PASSWORD_LENGTH} caracteres."

_UNSET = object()


def _blank(value) -> bool:
    return not isinstance(value, str) or not value.strip()


def missing_fields(data: dict, required=SERVER_REQUIRED) -> list[str]:
    return [field for field in required if _blank(data.get(field))]


def validate_registration(data: dict, required=SERVER_REQUIRED, confirmation=_UNSET) -> str | None:
    """Return the first rule broken by ``data`` or ``None``.

    ``confirmation`` is only checked when given (the API has no confirmation field).
    """
    if missing_fields(data, required) or (confirmation is not _UNSET and not confirmation):
        return MISSING_FIELDS
    password = data.get("password") or ""
    if confirmation is not _UNSET and password != confirmation:
        return PASSWORD_MISMATCH
    if len(password) < MIN_PASSWORD_LENGTH:
        return PASSWORD_TOO_SHORT
    return None


def validate_password(password) -> str | None:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        return PASSWORD_TOO_SHORT
    return None
