from passlib.context import CryptContext

DEFAULT_ROUNDS = 12


class PasswordHasher:
    """
    Salted bcrypt hashing backed by a passlib CryptContext.

    Every call to hash() draws a fresh salt, so digests of the same password never
    compare equal; use verify() instead.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, digest: str) -> bool:
        """
        Check a plain password against a stored digest.

        Returns False on mismatch. Raises ValueError when the digest is not a bcrypt hash.
        """
        return self._context.verify(password, digest)

    def dummy_verify(self) -> bool:
        # Same cost as verify(), for lookups that found no user.
        return self._context.dummy_verify()
