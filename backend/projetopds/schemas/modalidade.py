from pydantic import BaseModel


class ModalidadeResponse(BaseModel):
    id: int
    nome: str

    model_config = {"from_attributes": True}
