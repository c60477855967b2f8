"""Use case resolving an email into the session of a signed-in user."""

from src.application.ports.family_repository import ProfilesRepositoryPort
from src.domain.errors import GatewayError
from src.domain.models import UserSession
from src.domain.services import validate_email
from src.infrastructure.logging.logger import get_app_logger


class SignInUseCase:
    """Map an authenticated email to its profile.

    Credentials are verified upstream; this only binds the identity.
    """

    def __init__(
        self,
        profiles_repository: ProfilesRepositoryPort,
        logger=None,
    ) -> None:
        self._repository = profiles_repository
        self._logger = logger or get_app_logger()

    def execute(self, email: str) -> UserSession:
        """Return the session for ``email``, creating the profile if needed.

        Raises:
            ValidationError: When the email is malformed.
            GatewayError: When the profile lookup fails.
        """
        normalized = validate_email(email)
        try:
            session = self._repository.ensure_profile(normalized)
        except GatewayError as exc:
            self._logger.error(f"Sign-in failed for {normalized}: {exc}")
            raise
        self._logger.info(f"Signed in {session.user_id}")
        return session


__all__ = ["SignInUseCase"]
