"""
Auth gateway for the LexiTax API.

Signs users up and in, stores the returned credential in the session
manager, and signs them out again.
"""

import re

from lexitax.api.base import BaseApiClient
from lexitax.api.constants import ApiEndpoint
from lexitax.api.exceptions import AuthError, ValidationError
from lexitax.api.results import ApiResult
from lexitax.auth.constants import PASSWORD_MIN_LENGTH
from lexitax.auth.schemas import AuthResponse, LoginRequest, SignupRequest
from lexitax.utils.logger import logger


def check_password_policy(password: str) -> list[str]:
    """Return the password requirements that are not met."""
    failures = []
    if len(password) < PASSWORD_MIN_LENGTH:
        failures.append(f"at least {PASSWORD_MIN_LENGTH} characters")
    if not re.search(r"[A-Z]", password):
        failures.append("an uppercase letter")
    if not re.search(r"[0-9]", password):
        failures.append("a number")
    return failures


class AuthGateway(BaseApiClient):
    """Obtains, stores and clears the bearer credential."""

    error_class = AuthError

    async def signup(
        self,
        email: str,
        password: str,
        full_name: str,
        confirm_password: str | None = None,
    ) -> ApiResult[AuthResponse]:
        """
        Create an account and store its credential.

        Args:
            email: Account email
            password: Account password
            full_name: Display name
            confirm_password: Optional confirmation that must match ``password``

        Returns:
            ApiResult[AuthResponse]: The created user payload on success
        """
        if not email or not password or not full_name:
            return ApiResult.fail(ValidationError("Please fill in all fields"))
        if confirm_password is not None and confirm_password != password:
            return ApiResult.fail(ValidationError("Passwords do not match"))
        if self.settings.enforce_password_policy:
            missing = check_password_policy(password)
            if missing:
                return ApiResult.fail(
                    ValidationError(f"Password must contain {', '.join(missing)}")
                )

        request = SignupRequest(email=email, password=password, full_name=full_name)
        result = await self._request_result(
            "POST",
            ApiEndpoint.AUTH_SIGNUP.value,
            AuthResponse.model_validate,
            data=request.model_dump(),
            fallback_error="Signup failed",
        )
        return self._store_credential(result)

    async def login(self, email: str, password: str) -> ApiResult[AuthResponse]:
        """Sign an existing user in and store the credential."""
        if not email or not password:
            return ApiResult.fail(ValidationError("Please fill in all fields"))

        request = LoginRequest(email=email, password=password)
        result = await self._request_result(
            "POST",
            ApiEndpoint.AUTH_LOGIN.value,
            AuthResponse.model_validate,
            data=request.model_dump(),
            fallback_error="Login failed",
        )
        return self._store_credential(result)

    async def logout(self) -> ApiResult[None]:
        """
        Notify the backend and clear the local credential.

        The local clear always happens; a failed remote call is reported in
        the result but does not keep the credential alive.
        """
        result = await self._request_result(
            "POST",
            ApiEndpoint.AUTH_LOGOUT.value,
            lambda _body: None,
            fallback_error="Logout failed",
        )
        try:
            self.session.clear_token()
        except OSError as e:
            logger.error("Failed to clear stored credential", error=str(e))
            return ApiResult.fail(AuthError(f"Could not clear the stored credential: {e}"))
        if not result.success:
            logger.warning("Remote logout failed, local credential cleared", error=result.message)
        return result

    def set_token(self, token: str, refresh_token: str | None = None) -> None:
        self.session.set_token(token, refresh_token)

    def clear_token(self) -> None:
        self.session.clear_token()

    def _store_credential(self, result: ApiResult[AuthResponse]) -> ApiResult[AuthResponse]:
        if not (result.success and result.data and result.data.access_token):
            return result
        try:
            self.session.set_token(result.data.access_token, result.data.refresh_token)
        except OSError as e:
            logger.error("Failed to store credential", user_id=result.data.id, error=str(e))
            return ApiResult.fail(AuthError(f"Could not save the credential: {e}"))
        logger.info("Signed in", user_id=result.data.id)
        return result
