import asyncio

import bcrypt

from src.app.services.password_service import IPasswordService


class BcryptPasswordService(IPasswordService):
    """bcrypt hashing, run off the event loop"""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    async def hash(self, plain_password: str) -> str:
        hashed = await asyncio.to_thread(bcrypt.hashpw, plain_password.encode(), bcrypt.gensalt(self.rounds))
        return hashed.decode()

    async def verify(self, plain_password: str, hashed_password: str) -> bool:
        return await asyncio.to_thread(self._checkpw, plain_password, hashed_password)

    def _checkpw(self, plain_password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())
        except ValueError:
            # Malformed hash: spend the same time as a real check
            bcrypt.checkpw(b"dummy_password", bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(self.rounds)))
            return False
