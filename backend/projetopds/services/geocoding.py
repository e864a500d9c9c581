"""
Geocoding de CEP — BrasilAPI como provedor principal, OpenCage como fallback.

Retorna ``None`` somente quando os dois provedores falham ou nao trazem
coordenadas; o chamador decide qual erro de dominio levantar.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from projetopds.config import settings
from projetopds.schemas.validacao import limpar_cep

logger = logging.getLogger(__name__)

# Falhas de rede, HTTP != 2xx e payloads fora do formato esperado
_ERROS_PROVEDOR = (httpx.HTTPError, ValueError, TypeError, AttributeError)


@dataclass(frozen=True)
class Coordenadas:
    latitude: float
    longitude: float


class Geocoder(Protocol):
    async def obter_coordenadas(self, cep: str) -> Coordenadas | None: ...


def _to_float(valor) -> float | None:
    if valor is None or valor == "":
        return None
    try:
        return float(valor)
    except (TypeError, ValueError):
        return None


class GeocodingService:
    """Resolve CEP em coordenadas via HTTP, com timeout limitado por provedor."""

    def __init__(
        self,
        brasilapi_url: str,
        opencage_url: str,
        opencage_api_key: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._brasilapi_url = brasilapi_url.rstrip("/")
        self._opencage_url = opencage_url
        self._opencage_api_key = opencage_api_key
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls) -> GeocodingService:
        return cls(
            brasilapi_url=settings.GEOCODING_BRASILAPI_URL,
            opencage_url=settings.GEOCODING_OPENCAGE_URL,
            opencage_api_key=settings.GEOCODING_OPENCAGE_API_KEY,
            timeout=settings.GEOCODING_TIMEOUT_SECONDS,
        )

    async def obter_coordenadas(self, cep: str) -> Coordenadas | None:
        cep_limpo = limpar_cep(cep)
        if len(cep_limpo) != 8:
            return None

        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout), transport=self._transport
        ) as client:
            try:
                coords = await self._brasilapi(client, cep_limpo)
                if coords:
                    logger.debug("Coordenadas do CEP %s via BrasilAPI", cep_limpo)
                    return coords
            except _ERROS_PROVEDOR as e:
                logger.warning("BrasilAPI falhou para CEP %s: %s", cep_limpo, e)

            logger.info("Fallback para OpenCage (CEP %s)", cep_limpo)
            try:
                coords = await self._opencage(client, cep_limpo)
                if coords:
                    logger.debug("Coordenadas do CEP %s via OpenCage", cep_limpo)
                    return coords
            except _ERROS_PROVEDOR as e:
                logger.warning("OpenCage falhou para CEP %s: %s", cep_limpo, e)

        logger.warning("Nenhum provedor retornou coordenadas para CEP %s", cep_limpo)
        return None

    async def _brasilapi(self, client: httpx.AsyncClient, cep: str) -> Coordenadas | None:
        response = await client.get(f"{self._brasilapi_url}/{cep}")
        response.raise_for_status()
        data = response.json()

        coordinates = ((data or {}).get("location") or {}).get("coordinates") or {}
        lat = _to_float(coordinates.get("latitude"))
        lng = _to_float(coordinates.get("longitude"))
        if lat is None or lng is None:
            return None
        return Coordenadas(latitude=lat, longitude=lng)

    async def _opencage(self, client: httpx.AsyncClient, cep: str) -> Coordenadas | None:
        if not self._opencage_api_key:
            logger.warning("GEOCODING_OPENCAGE_API_KEY nao configurada")
            return None

        response = await client.get(
            self._opencage_url,
            params={"q": f"{cep}, Brasil", "key": self._opencage_api_key},
        )
        response.raise_for_status()
        results = (response.json() or {}).get("results") or []
        if not results:
            return None

        geometry = results[0].get("geometry") or {}
        lat = _to_float(geometry.get("lat"))
        lng = _to_float(geometry.get("lng"))
        if lat is None or lng is None:
            return None
        return Coordenadas(latitude=lat, longitude=lng)


def get_geocoder() -> Geocoder:
    return GeocodingService.from_settings()
