from pydantic import BaseModel, Field

from projetopds.schemas.usuario import UsuarioResponse


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, description="Username ou email")
    senha: str = Field(min_length=1)


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    usuario: UsuarioResponse
