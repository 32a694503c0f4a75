import uuid

from fastapi import APIRouter, Body, Depends, status

from academy.core.deps import AuthorizationService
from academy.schemas.shares.certificate import CreateCertificate
from academy.services.shares.certificates import CertificateService

router = APIRouter(prefix="/certificates", tags=["Certificates"])

ASSIGNERS = ["TEACHER", "ADMIN", "SUPERVISOR"]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_certificate(
    schema: CreateCertificate = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    certificate_service: CertificateService = Depends(CertificateService),
):
    assigner = await authorization.require_role(ASSIGNERS)
    return await certificate_service.create_certificate_async(schema, assigner)


@router.get("")
async def list_certificates(
    authorization: AuthorizationService = Depends(AuthorizationService),
    certificate_service: CertificateService = Depends(CertificateService),
):
    user = await authorization.require_role(ASSIGNERS)
    return await certificate_service.list_certificates_async(user)


@router.get("/my-certificates")
async def my_certificates(
    authorization: AuthorizationService = Depends(AuthorizationService),
    certificate_service: CertificateService = Depends(CertificateService),
):
    user = await authorization.require_role(["USER"])
    return await certificate_service.my_certificates_async(user)


@router.delete("/{certificate_id}")
async def delete_certificate(
    certificate_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    certificate_service: CertificateService = Depends(CertificateService),
):
    user = await authorization.require_role(ASSIGNERS)
    return await certificate_service.delete_certificate_async(certificate_id, user)
