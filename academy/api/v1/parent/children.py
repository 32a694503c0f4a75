from fastapi import APIRouter, Depends

from academy.core.deps import AuthorizationService
from academy.services.parent.children import ParentService
from academy.services.shares.certificates import CertificateService

router = APIRouter(prefix="/parent", tags=["Parent"])


@router.get("/children")
async def get_children(
    authorization: AuthorizationService = Depends(AuthorizationService),
    parent_service: ParentService = Depends(ParentService),
):
    parent = await authorization.require_role(["PARENT"])
    return await parent_service.get_children_async(parent)


@router.get("/certificates")
async def get_children_certificates(
    authorization: AuthorizationService = Depends(AuthorizationService),
    certificate_service: CertificateService = Depends(CertificateService),
):
    parent = await authorization.require_role(["PARENT"])
    return await certificate_service.children_certificates_async(parent)
