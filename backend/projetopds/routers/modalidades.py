from fastapi import APIRouter, Depends

from projetopds.schemas.modalidade import ModalidadeResponse
from projetopds.services.modalidade_service import ModalidadeService, get_modalidade_service

router = APIRouter(prefix="/modalidades", tags=["modalidades"])


@router.get("", response_model=list[ModalidadeResponse])
async def list_modalidades(service: ModalidadeService = Depends(get_modalidade_service)):
    modalidades = await service.listar()
    return [ModalidadeResponse.model_validate(m) for m in modalidades]
