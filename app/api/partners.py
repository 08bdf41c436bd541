"""
Partners API Endpoints
Affiliates whose codes give a fixed percentage discount
"""
from fastapi import APIRouter, Depends, HTTPException

from app.core.auth import TokenUser, require_admin
from app.core.exceptions import DarkStoreError
from app.domain.partner import PartnerCreate
from app.services.partner_service import PartnerService

router = APIRouter()


@router.get("/")
async def list_partners(user: TokenUser = Depends(require_admin)):
    try:
        partners = PartnerService().list_partners()
        return {"status": "success", "count": len(partners), "data": [p.to_dict() for p in partners]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching partners: {str(e)}")


@router.post("/", status_code=201)
async def create_partner(data: PartnerCreate, user: TokenUser = Depends(require_admin)):
    try:
        partner = PartnerService().create_partner(data)
        return {"status": "success", "data": partner.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating partner: {str(e)}")


@router.delete("/{partner_id}")
async def delete_partner(partner_id: int, user: TokenUser = Depends(require_admin)):
    try:
        PartnerService().delete_partner(partner_id)
        return {"status": "success", "message": "Parceiro excluído."}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting partner: {str(e)}")
