from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_account_id, unwrap_or_raise
from app.database import get_db
from app.models.account import Account
from app.schemas.account import SignInRequest, SignUpRequest, TokenResponse
from app.services.accounts import AccountService
from app.services.sessions import issue_token

router = APIRouter()


@router.post("/api/signup", status_code=status.HTTP_201_CREATED)
async def sign_up(payload: SignUpRequest, db: Session = Depends(get_db)):
    service = AccountService(db)
    account_id = unwrap_or_raise(service.sign_up(payload.name, payload.email, payload.password))
    return {"message": "User created successfully", "account_id": account_id}


@router.post("/api/signin", response_model=TokenResponse)
async def sign_in(payload: SignInRequest, db: Session = Depends(get_db)):
    service = AccountService(db)
    account_id = unwrap_or_raise(service.authenticate(payload.email, payload.password))
    token, expires_at = issue_token(account_id, remember=payload.remember)
    return TokenResponse(access_token=token, expires_at=expires_at)


@router.get("/api/me")
async def current_account(
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    account = db.query(Account).filter(Account.id == account_id).first()
    if account is None:
        return {"error": "Account not found"}
    return {
        "id": account.id,
        "name": account.name,
        "email": account.email,
        "image_url": account.image_url,
    }
