import logging

from fastapi import APIRouter, Depends

from ..container import Container
from ..dependencies import get_container, require_user
from ..schemas import RegisterRequest, LoginRequest, AuthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse)
def register(payload: RegisterRequest, container: Container = Depends(get_container)):
    return container.auth.register(payload.username, payload.email, payload.password)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, container: Container = Depends(get_container)):
    return container.auth.login(payload.email, payload.password)


@router.get("/me")
def me(current_user: int = Depends(require_user), container: Container = Depends(get_container)):
    return {"success": True, "user": container.auth.me(current_user)}
