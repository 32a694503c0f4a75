import uuid

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.enum import STAFF_ROLES, UserRole
from academy.db.models.database import Certificate, User
from academy.db.session import get_session
from academy.libs.formats.text import public_storage_url
from academy.schemas.shares.certificate import CreateCertificate


def certificate_out(cert: Certificate) -> dict:
    student = cert.student
    assigner = cert.assigner
    return {
        "id": str(cert.id),
        "student_id": str(cert.student_id),
        "student_name": student.full_name if student else None,
        "assigned_by": str(cert.assigned_by) if cert.assigned_by else None,
        "assigned_by_name": assigner.full_name if assigner else None,
        "image_url": public_storage_url(cert.image_url),
        "title": cert.title,
        "description": cert.description,
        "created_at": cert.created_at,
    }


class CertificateService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    def _base_query(self):
        return (
            select(Certificate)
            .options(selectinload(Certificate.student), selectinload(Certificate.assigner))
            .order_by(Certificate.created_at.desc())
        )

    async def create_certificate_async(self, schema: CreateCertificate, assigner: User):
        if not schema.student_id or not schema.image_url:
            raise HTTPException(400, "student_id and image_url are required")

        student = await self.db.get(User, schema.student_id)
        if not student or student.role != UserRole.USER.value:
            raise HTTPException(404, "Student not found")
        try:
            cert = Certificate(
                student_id=student.id,
                assigned_by=assigner.id,
                image_url=schema.image_url,
                title=schema.title,
                description=schema.description,
            )
            self.db.add(cert)
            await self.db.commit()
            cert = await self.db.scalar(self._base_query().where(Certificate.id == cert.id))
            logger.info(f"🎓 Certificate {cert.id} assigned to {student.id}")
            return certificate_out(cert)
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while creating certificate: {e}")

    async def list_certificates_async(self, user: User):
        stmt = self._base_query()
        if user.role not in STAFF_ROLES:
            stmt = stmt.where(Certificate.assigned_by == user.id)
        return [certificate_out(c) for c in await self.db.scalars(stmt)]

    async def my_certificates_async(self, user: User):
        stmt = self._base_query().where(Certificate.student_id == user.id)
        return [certificate_out(c) for c in await self.db.scalars(stmt)]

    async def children_certificates_async(self, parent: User):
        children_ids = select(User.id).where(
            User.parent_phone_number == parent.phone_number,
            User.role == UserRole.USER.value,
        )
        stmt = self._base_query().where(Certificate.student_id.in_(children_ids))
        return [certificate_out(c) for c in await self.db.scalars(stmt)]

    async def delete_certificate_async(self, certificate_id: uuid.UUID, user: User):
        cert = await self.db.get(Certificate, certificate_id)
        if not cert:
            raise HTTPException(404, "Certificate not found")
        if user.role not in STAFF_ROLES and cert.assigned_by != user.id:
            raise HTTPException(403, "Permission denied")
        try:
            await self.db.delete(cert)
            await self.db.commit()
            return {"message": "Certificate deleted"}
        except Exception as e:
            await self.db.rollback()
            raise HTTPException(500, f"Error while deleting certificate: {e}")
