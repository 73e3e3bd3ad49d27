from ..errors import DataNotFound, InvalidCredentials
from ..repositories.users import UserRepository
from ..security import verify_password
from ..tokens import TokenService
from .base import service_errors


class AuthService:
    def __init__(self, repo: UserRepository, tokens: TokenService):
        self.repo = repo
        self.tokens = tokens

    def login(self, email: str, password: str) -> str:
        with service_errors("auth.login"):
            try:
                user = self.repo.get_user_by_email(email)
            except DataNotFound:
                raise InvalidCredentials()
            if not verify_password(password, user.password):
                raise InvalidCredentials()
            return self.tokens.create_token(user)
