from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from service_booking.api.schemas import ServiceSchema
from service_booking.application.ports.service_catalog import ServiceCatalogPort
from service_booking.wiring.dependencies import get_service_catalog

router = APIRouter(prefix="/services")


@router.get("", response_model=list[ServiceSchema])
def list_services(catalog: ServiceCatalogPort = Depends(get_service_catalog)) -> list[ServiceSchema]:
    return [ServiceSchema(**asdict(s)) for s in catalog.list_services()]


@router.get("/{service_id}", response_model=ServiceSchema)
def get_service(service_id: int, catalog: ServiceCatalogPort = Depends(get_service_catalog)) -> ServiceSchema:
    service = catalog.get_service(service_id)
    if service is None:
        raise HTTPException(status_code=404, detail="Service not found")
    return ServiceSchema(**asdict(service))
