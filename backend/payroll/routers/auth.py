"""登录：单一管理员帐密（来自设置），成功回传 access_token 供前端 Bearer 带入。"""
import secrets

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from payroll.config import settings

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    access_token: str


class MeResponse(BaseModel):
    username: str
    role: str = "admin"


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest):
    """帐密正确回传随机 access_token，否则 401。"""
    if body.username.strip() == settings.admin_username and body.password == settings.admin_password:
        return LoginResponse(access_token=secrets.token_urlsafe(32))
    raise HTTPException(status_code=401, detail="用户名或密码错误")


@router.get("/me", response_model=MeResponse)
async def me():
    return MeResponse(username=settings.admin_username)
