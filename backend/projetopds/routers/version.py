from pathlib import Path

from fastapi import APIRouter

APP_NAME = "ProjetoPDS - Atividades Esportivas"

_version_file = Path(__file__).resolve().parent.parent.parent.parent / "VERSION"
APP_VERSION = (
    _version_file.read_text(encoding="utf-8").strip()
    if _version_file.exists()
    else "unknown"
)

router = APIRouter(tags=["version"])


@router.get("/version")
async def get_version():
    return {"version": APP_VERSION, "name": APP_NAME}
