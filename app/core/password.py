"""
Password credential.

A :class:`Password` pairs the bcrypt hash (the only persisted form) with the
plaintext it was computed from.  The plaintext lives in memory only, for the
duration of a request, so validation can run against it before it is
discarded.
"""

from typing import Optional

import bcrypt

# Fixed work factor.  Changing it only affects newly set passwords; bcrypt
# hashes carry their own cost.
BCRYPT_COST = 12

# Longest input bcrypt accepts, in bytes.
MAX_PASSWORD_BYTES = 72

COMMON_PASSWORDS: frozenset[str] = frozenset({
    "password",
    "password1",
    "password12",
    "password123",
    "passw0rd",
    "p@ssw0rd",
    "12345678",
    "123456789",
    "1234567890",
    "87654321",
    "11111111",
    "00000000",
    "qwertyuiop",
    "qwerty123",
    "qwerty12345",
    "1q2w3e4r",
    "1q2w3e4r5t",
    "abcd1234",
    "abc12345",
    "asdfghjkl",
    "iloveyou",
    "iloveyou1",
    "sunshine",
    "princess",
    "football",
    "baseball",
    "superman",
    "starwars",
    "whatever",
    "trustno1",
    "letmein1",
    "welcome1",
    "welcome123",
    "changeme",
    "administrator",
    "admin123",
    "computer",
    "internet",
    "michelle",
    "jennifer",
    "1qaz2wsx",
    "zaq12wsx",
    "qazwsxedc",
    "aa123456",
    "dragon123",
    "monkey123",
    "shadow123",
    "master123",
})


class Password:
    """Password credential: transient plaintext plus persisted bcrypt hash."""

    __slots__ = ("plaintext", "hash")

    def __init__(self, hash: Optional[bytes] = None):
        self.plaintext: Optional[str] = None
        self.hash: Optional[bytes] = hash

    def set(self, plaintext: str) -> None:
        """
        Hash *plaintext* with bcrypt and keep both forms in memory.

        Errors from the hashing primitive propagate unchanged.
        """
        hashed = bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_COST))
        self.plaintext = plaintext
        self.hash = hashed

    def matches(self, plaintext: str) -> bool:
        """
        Check *plaintext* against the stored hash.

        Returns ``False`` when the password is simply wrong.  Raises
        ``ValueError`` when verification itself cannot run, e.g. the stored
        hash is missing or malformed; callers must treat that as an
        operational error, not as a wrong password.
        """
        if self.hash is None:
            raise ValueError("password hash is not set")
        candidate = plaintext.encode("utf-8")
        # Longer than any password that can be set
        if len(candidate) > MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(candidate, self.hash)

    def __repr__(self) -> str:
        state = "set" if self.hash is not None else "unset"
        return f"<Password hash={state}>"
