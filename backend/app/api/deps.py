from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.errors import AuthenticationError, ServiceResult
from app.services.geocoding import GeocodingClient, get_geocoder
from app.services.sessions import decode_token

bearer = HTTPBearer(auto_error=False)


def get_current_account_id(
    credentials: HTTPAuthorizationCredentials = Depends(bearer),
) -> int:
    """Resolve the signed-in caller from the bearer session token."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return decode_token(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_geocoding_client() -> GeocodingClient:
    return get_geocoder()


def unwrap_or_raise(result: ServiceResult):
    """Return a successful result's value or turn its error into an HTTP error."""
    if not result.ok:
        raise HTTPException(status_code=result.error.status_code, detail=result.error.message)
    return result.value
