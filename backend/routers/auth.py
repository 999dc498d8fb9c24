from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from schemas.auth import AuthCheckResponse, AuthUserRead
from services.auth import AuthContext, get_auth_context

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/check", response_model=AuthCheckResponse)
async def check_auth(context: AuthContext = Depends(get_auth_context)):
    if not context.authenticated:
        return JSONResponse(status_code=401, content={"authenticated": False, "user": None})
    return AuthCheckResponse(authenticated=True, user=AuthUserRead(**context.user.to_dict()))
