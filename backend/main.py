import logging
from datetime import datetime, timezone
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from projetopds.config import settings
from projetopds.exceptions import DomainError
from projetopds.routers import atividades, auth, modalidades, usuarios, version
from projetopds.schemas.erro import ErroResponse

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=version.APP_NAME,
    version=version.APP_VERSION,
    docs_url="/api/docs",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(usuarios.router)
app.include_router(modalidades.router)
app.include_router(atividades.router)
app.include_router(version.router)


def _erro(status_code: int, code: str, message: str, headers: dict | None = None) -> JSONResponse:
    body = ErroResponse(
        timestamp=datetime.now(timezone.utc),
        status=status_code,
        error=HTTPStatus(status_code).phrase,
        code=code,
        message=message,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"), headers=headers)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return _erro(exc.status_code, exc.code, exc.message, headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # so o primeiro campo invalido e reportado
    primeiro = exc.errors()[0] if exc.errors() else {}
    campo = ".".join(str(p) for p in primeiro.get("loc", ()) if p not in ("body", "query", "path"))
    mensagem = primeiro.get("msg", "Requisição inválida")
    if campo:
        mensagem = f"{campo}: {mensagem}"
    return _erro(status.HTTP_400_BAD_REQUEST, "VALIDACAO", mensagem)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Erro inesperado em %s %s", request.method, request.url.path)
    return _erro(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "ERRO_INTERNO",
        "Ocorreu um erro inesperado no servidor.",
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.BACKEND_PORT)
